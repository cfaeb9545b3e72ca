# backend/transactions.py
import logging
import sqlite3

from flask import Blueprint, jsonify, request
from flask_jwt_extended import current_user, jwt_required

from .errors import ApiError, Forbidden, InternalError, NotFound, ValidationError, api_error_handler
from .models import NewTransaction, SchemaValidationError, Transaction

logger = logging.getLogger("finance-backend")

bp = Blueprint("transactions", __name__)
# transaction routes report failures under "error" rather than "message"
bp.register_error_handler(ApiError, api_error_handler("error"))


# ---------------- Service ----------------
def list_transactions(user_id):
    return Transaction.find_by_user(user_id)


def add_transaction(user_id, new_tx):
    tx = new_tx.to_model(user_id)
    try:
        tx.save()
    except SchemaValidationError as e:
        raise ValidationError(e.messages)
    except sqlite3.Error:
        logger.exception("Add Transaction Error")
        raise InternalError("Server Error")
    logger.info(f"Transaction {tx.id} added for user {user_id}")
    return tx


def delete_transaction(user_id, tx_id):
    # look up by id alone, then compare owners
    tx = Transaction.find_by_id(tx_id)
    if tx is None:
        raise NotFound("No transaction found")
    if tx.user_id != user_id:
        logger.warning(f"User {user_id} tried to delete transaction {tx_id} owned by another user")
        raise Forbidden("Not authorized to delete this transaction")
    try:
        tx.delete()
    except sqlite3.Error:
        logger.exception("Delete Transaction Error")
        raise InternalError("Server Error")
    logger.info(f"Transaction {tx_id} deleted for user {user_id}")


# ---------------- Routes ----------------
@bp.route("", methods=["GET"])
@jwt_required()
def get_transactions():
    try:
        transactions = list_transactions(current_user.id)
    except sqlite3.Error:
        logger.exception("Get Transactions Error")
        raise InternalError("Server Error")
    return jsonify({
        "success": True,
        "count": len(transactions),
        "data": [tx.to_dict() for tx in transactions],
    })


@bp.route("", methods=["POST"])
@jwt_required()
def create_transaction():
    new_tx = NewTransaction.from_json(request.get_json(silent=True) or {})
    tx = add_transaction(current_user.id, new_tx)
    return jsonify({"success": True, "data": tx.to_dict()}), 201


@bp.route("/<int:tx_id>", methods=["DELETE"])
@jwt_required()
def remove_transaction(tx_id):
    delete_transaction(current_user.id, tx_id)
    return jsonify({"success": True, "data": {}})
