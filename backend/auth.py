# backend/auth.py
import logging

from flask import Blueprint, jsonify, request
from flask_jwt_extended import JWTManager, create_access_token, jwt_required
from flask_jwt_extended import get_current_user as resolved_identity
from werkzeug.security import check_password_hash, generate_password_hash

from .errors import ApiError, Conflict, InternalError, NotFound, Unauthorized, error_response
from .models import Credentials, DuplicateKeyError, User

logger = logging.getLogger("finance-backend")

auth_bp = Blueprint("auth", __name__)

jwt = JWTManager()

# checked against when the email is unknown so both failures cost one hash check
DUMMY_PASSWORD_HASH = generate_password_hash("placeholder-password-never-matches")


# ---------------- Token handling ----------------
def generate_token(user):
    # sub must be a string; lifetime comes from JWT_ACCESS_TOKEN_EXPIRES
    return create_access_token(identity=str(user.id))


@jwt.user_lookup_loader
def load_user(_jwt_header, jwt_data):
    try:
        user_id = int(jwt_data["sub"])
    except (KeyError, TypeError, ValueError):
        return None
    return User.find_by_id(user_id)


@jwt.user_lookup_error_loader
def user_lookup_error(_jwt_header, _jwt_data):
    return error_response("Not authorized, user not found", 401)


@jwt.unauthorized_loader
def missing_token(reason):
    return error_response("Not authorized, no token", 401)


@jwt.invalid_token_loader
def invalid_token(reason):
    return error_response("Not authorized, token failed", 401)


@jwt.expired_token_loader
def expired_token(_jwt_header, _jwt_data):
    return error_response("Not authorized, token expired", 401)


# ---------------- Service ----------------
def register_user(credentials):
    if User.find_by_email(credentials.email):
        raise Conflict("User already exists")
    try:
        user = User.create(credentials.email, generate_password_hash(credentials.password))
    except DuplicateKeyError:
        # lost a race against a concurrent registration
        raise Conflict("User already exists")
    logger.info(f"User registered: id={user.id}")
    return user


def authenticate_user(credentials):
    """Return the user whose password matches, else raise Unauthorized.

    The same message is used whether the email is unknown or the password is
    wrong.
    """
    email, password = credentials.email, credentials.password
    if not isinstance(email, str) or not isinstance(password, str) or not email or not password:
        raise Unauthorized("Invalid credentials")
    user = User.find_by_email(email)
    stored_hash = user.password_hash if user is not None else DUMMY_PASSWORD_HASH
    if not check_password_hash(stored_hash, password) or user is None:
        logger.warning("Rejected login attempt")
        raise Unauthorized("Invalid credentials")
    return user


def get_current_user():
    user = resolved_identity()
    if user is None:
        raise NotFound("User not found")
    return user


def _token_response(user, status=200):
    return jsonify({
        "success": True,
        "_id": user.id,
        "email": user.email,
        "token": generate_token(user),
    }), status


# ---------------- Routes ----------------
@auth_bp.route('/register', methods=['POST'])
def register():
    credentials = Credentials.from_json(request.get_json(silent=True) or {})
    try:
        user = register_user(credentials)
    except ApiError:
        raise
    except Exception:
        logger.exception("Register error")
        raise InternalError("Server Error during registration")
    return _token_response(user, 201)


@auth_bp.route('/login', methods=['POST'])
def login():
    credentials = Credentials.from_json(request.get_json(silent=True) or {}, strict=False)
    try:
        user = authenticate_user(credentials)
    except ApiError:
        raise
    except Exception:
        logger.exception("Login error")
        raise InternalError("Server Error during login")
    return _token_response(user)


@auth_bp.route('/me', methods=['GET'])
@jwt_required()
def me():
    user = get_current_user()
    return jsonify({"success": True, "data": user.to_dict()})
