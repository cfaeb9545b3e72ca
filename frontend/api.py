# frontend/api.py
import logging
import os

import requests

logger = logging.getLogger("finance-frontend")

API_BASE = os.environ.get("FINANCE_API_URL", "http://localhost:5001")
DEFAULT_TIMEOUT = 10


class ApiRequestError(Exception):
    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def safe_json(resp):
    try:
        return resp.json()
    except ValueError:
        return None


def error_message(payload, fallback):
    if not isinstance(payload, dict):
        return fallback
    detail = payload.get("message") or payload.get("error")
    if isinstance(detail, list):
        detail = "; ".join(str(d) for d in detail)
    return detail or fallback


class ApiClient:
    """Thin wrapper over the REST API. Every call raises ApiRequestError on failure."""

    def __init__(self, base_url=None, session=None, timeout=DEFAULT_TIMEOUT):
        self.base_url = (base_url or API_BASE).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def request(self, method, path, token=None, json=None):
        headers = {}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        url = self.base_url + path
        try:
            resp = self.session.request(method.upper(), url, headers=headers, json=json, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Connection to {url} failed: {e}")
            raise ApiRequestError(f"Connection failed: {e}") from e

        payload = safe_json(resp)
        if resp.status_code >= 400:
            raise ApiRequestError(
                error_message(payload, f"Request failed with status {resp.status_code}"),
                resp.status_code,
            )
        return payload or {}

    # ---------------- Auth ----------------
    def register(self, email, password):
        return self.request("POST", "/api/auth/register", json={"email": email, "password": password})

    def login(self, email, password):
        return self.request("POST", "/api/auth/login", json={"email": email, "password": password})

    def me(self, token):
        return self.request("GET", "/api/auth/me", token=token)["data"]

    # ---------------- Transactions ----------------
    def list_transactions(self, token):
        return self.request("GET", "/api/transactions", token=token).get("data", [])

    def add_transaction(self, token, transaction):
        return self.request("POST", "/api/transactions", token=token, json=transaction)["data"]

    def delete_transaction(self, token, tx_id):
        self.request("DELETE", f"/api/transactions/{tx_id}", token=token)
