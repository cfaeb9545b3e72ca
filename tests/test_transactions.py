# tests/test_transactions.py
import sqlite3
from unittest import mock

from backend.models import Transaction
from tests.base import ApiTestCase


class AddAndListTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.token = self.token_for("a@x.com", "secret1")

    def test_add_then_list_returns_single_entry(self):
        resp = self.add(self.token)
        self.assertEqual(resp.status_code, 201)
        created = resp.get_json()["data"]

        body = self.list_for(self.token)
        self.assertTrue(body["success"])
        self.assertEqual(body["count"], 1)
        tx = body["data"][0]
        self.assertEqual(tx["_id"], created["_id"])
        self.assertEqual(tx["amount"], 4.5)
        self.assertEqual(tx["description"], "Coffee")
        self.assertEqual(tx["type"], "expense")
        self.assertEqual(tx["category"], "Food")
        self.assertEqual(tx["date"], "2024-01-01")
        self.assertTrue(tx["createdAt"])

    def test_record_is_owned_by_caller(self):
        me = self.client.get("/api/auth/me", headers=self.auth(self.token)).get_json()["data"]
        tx = self.add(self.token).get_json()["data"]
        self.assertEqual(tx["user"], me["_id"])

    def test_amount_sign_is_not_flipped_for_expenses(self):
        self.add(self.token, amount="250.75", type="expense")
        self.assertEqual(self.list_for(self.token)["data"][0]["amount"], 250.75)

    def test_description_is_trimmed(self):
        self.add(self.token, description="  Lunch  ")
        self.assertEqual(self.list_for(self.token)["data"][0]["description"], "Lunch")

    def test_list_is_newest_first(self):
        self.add(self.token, description="old", date="2023-05-01")
        self.add(self.token, description="new", date="2024-03-10")
        self.add(self.token, description="mid", date="2023-12-31")
        names = [tx["description"] for tx in self.list_for(self.token)["data"]]
        self.assertEqual(names, ["new", "mid", "old"])

    def test_other_users_transactions_are_not_listed(self):
        other = self.token_for("b@x.com", "secret2")
        self.add(other, description="Theirs")
        self.assertEqual(self.list_for(self.token)["count"], 0)

    def test_alternate_date_formats(self):
        self.add(self.token, date="15/02/2024")
        self.add(self.token, date="2024-02-16T10:30:00Z")
        dates = [tx["date"] for tx in self.list_for(self.token)["data"]]
        self.assertEqual(dates, ["2024-02-16", "2024-02-15"])

    def test_requires_token(self):
        resp = self.client.get("/api/transactions")
        self.assertEqual(resp.status_code, 401)
        resp = self.client.post("/api/transactions", json={"description": "x"})
        self.assertEqual(resp.status_code, 401)


class AddValidationTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.token = self.token_for()

    def test_missing_field(self):
        resp = self.add(self.token, category=None)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(
            resp.get_json()["error"],
            "Please provide all required fields: description, amount, type, category, date",
        )

    def test_bad_type(self):
        resp = self.add(self.token, type="transfer")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()["error"], 'Type must be either "income" or "expense"')

    def test_non_numeric_amount(self):
        resp = self.add(self.token, amount="abc")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()["error"], "Amount must be a valid number")

    def test_schema_errors_are_listed(self):
        resp = self.add(self.token, description="   ", date="not-a-date")
        self.assertEqual(resp.status_code, 400)
        errors = resp.get_json()["error"]
        self.assertIsInstance(errors, list)
        self.assertIn("Please add a description", errors)
        self.assertIn("Please add a date for the transaction", errors)

    def test_non_positive_amount(self):
        resp = self.add(self.token, amount=0)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()["error"], ["Amount must be greater than zero"])

    def test_body_must_be_object(self):
        resp = self.client.post("/api/transactions", json=["x"], headers=self.auth(self.token))
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(resp.get_json()["success"])

    def test_nothing_persisted_on_failure(self):
        self.add(self.token, amount=-5)
        self.assertEqual(self.list_for(self.token)["count"], 0)

    def test_description_and_category_must_be_text(self):
        for overrides in ({"description": {"x": 1}}, {"category": ["Food"]}, {"description": 42}):
            resp = self.add(self.token, **overrides)
            self.assertEqual(resp.status_code, 400, overrides)
            self.assertEqual(resp.get_json(), {"success": False, "error": "Description and category must be text"})
        self.assertEqual(self.list_for(self.token)["count"], 0)


class DeleteTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.alice = self.token_for("a@x.com", "secret1")
        self.bob = self.token_for("b@x.com", "secret2")
        self.tx_id = self.add(self.alice).get_json()["data"]["_id"]

    def test_owner_can_delete(self):
        resp = self.client.delete(f"/api/transactions/{self.tx_id}", headers=self.auth(self.alice))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json(), {"success": True, "data": {}})
        self.assertEqual(self.list_for(self.alice)["count"], 0)

    def test_non_owner_cannot_delete(self):
        resp = self.client.delete(f"/api/transactions/{self.tx_id}", headers=self.auth(self.bob))
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.get_json()["error"], "Not authorized to delete this transaction")
        ids = [tx["_id"] for tx in self.list_for(self.alice)["data"]]
        self.assertEqual(ids, [self.tx_id])

    def test_unknown_id(self):
        resp = self.client.delete("/api/transactions/9999", headers=self.auth(self.alice))
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.get_json(), {"success": False, "error": "No transaction found"})

    def test_delete_twice(self):
        self.client.delete(f"/api/transactions/{self.tx_id}", headers=self.auth(self.alice))
        resp = self.client.delete(f"/api/transactions/{self.tx_id}", headers=self.auth(self.alice))
        self.assertEqual(resp.status_code, 404)

    def test_requires_token(self):
        resp = self.client.delete(f"/api/transactions/{self.tx_id}")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(self.list_for(self.alice)["count"], 1)


class ServiceRootTests(ApiTestCase):
    def test_root_and_health(self):
        self.assertEqual(self.client.get("/").get_json(), {"msg": "Finance Tracker API Running"})
        self.assertEqual(self.client.get("/health").get_json(), {"status": "ok"})

    def test_unknown_route_is_json_404(self):
        resp = self.client.get("/api/nothing-here")
        self.assertEqual(resp.status_code, 404)
        self.assertFalse(resp.get_json()["success"])


class StorageFailureTests(ApiTestCase):
    """Database errors surface as a 500 envelope, never as a raw traceback."""

    def setUp(self):
        super().setUp()
        self.token = self.token_for()

    def test_list_failure(self):
        with mock.patch.object(Transaction, "find_by_user", side_effect=sqlite3.OperationalError("disk I/O error")):
            resp = self.client.get("/api/transactions", headers=self.auth(self.token))
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.get_json(), {"success": False, "error": "Server Error"})

    def test_add_failure_persists_nothing(self):
        with mock.patch.object(Transaction, "save", side_effect=sqlite3.OperationalError("database is locked")):
            resp = self.add(self.token)
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.get_json(), {"success": False, "error": "Server Error"})
        self.assertEqual(self.list_for(self.token)["count"], 0)

    def test_delete_failure_keeps_record(self):
        tx_id = self.add(self.token).get_json()["data"]["_id"]
        with mock.patch.object(Transaction, "delete", side_effect=sqlite3.OperationalError("database is locked")):
            resp = self.client.delete(f"/api/transactions/{tx_id}", headers=self.auth(self.token))
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.get_json(), {"success": False, "error": "Server Error"})
        self.assertEqual(self.list_for(self.token)["count"], 1)

    def test_unexpected_error_is_logged_500(self):
        with mock.patch.object(Transaction, "find_by_user", side_effect=RuntimeError("boom")):
            with self.assertLogs("finance-backend", level="ERROR") as logs:
                resp = self.client.get("/api/transactions", headers=self.auth(self.token))
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.get_json(), {"success": False, "message": "Server Error"})
        self.assertIn("Unhandled error", logs.output[0])
