# frontend/state.py
"""Client-side application state and the commands that change it.

The controller owns one ``AppState``. Every mutation goes to the API first and
is followed by a full reload of the transaction list, so the state always
mirrors what the server holds once a command returns.
"""
import logging
from datetime import date

from .aggregation import summarize
from .api import ApiRequestError
from .export import transactions_to_csv

logger = logging.getLogger("finance-frontend")

PAGES = ("dashboard", "addTransaction")
THEMES = ("dark", "light")
SESSION_EXPIRED = "Session expired, please log in again."

CATEGORIES = {
    "expense": ["Food", "Transport", "Utilities", "Entertainment", "Health",
                "Shopping", "Education", "Bills", "Subscription", "Other"],
    "income": ["Salary", "Bonus", "Investment", "Gift", "Freelance",
               "Rental", "Interest", "Other"],
}


class AppState:
    def __init__(self, theme="dark"):
        self.user = None
        self.token = None
        self.transactions = []
        self.loading = False
        self.error = ""
        self.page = "dashboard"
        # theme may come from a url parameter, so anything unknown falls back
        self.theme = theme if theme in THEMES else THEMES[0]

    @property
    def logged_in(self):
        return self.user is not None and self.token is not None


def validate_form(form):
    """Return an error message for an add-transaction form, or '' when it is fine."""
    description = str(form.get("description") or "").strip()
    amount = form.get("amount")
    if not description or amount in (None, "") or not form.get("date") or not form.get("category"):
        return "Please fill in all fields."
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return "Amount must be a valid number."
    if value <= 0:
        return "Amount must be greater than zero."
    return ""


class FinanceController:
    def __init__(self, client, state=None):
        self.client = client
        self.state = state or AppState()

    # ---------------- Identity ----------------
    def sign_up(self, email, password):
        return self._authenticate(self.client.register, email, password)

    def sign_in(self, email, password):
        return self._authenticate(self.client.login, email, password)

    def _authenticate(self, call, email, password):
        if self.state.loading:
            return False
        self.state.loading = True
        self.state.error = ""
        try:
            payload = call(email, password)
            token = payload.get("token")
            user = self._load_profile(token, payload, email)
        except ApiRequestError as e:
            self.state.error = e.message
            return False
        finally:
            self.state.loading = False
        self.set_identity(user, token)
        return True

    def _load_profile(self, token, payload, email):
        """Full user record from /me, or the fields the auth response carried."""
        try:
            return self.client.me(token)
        except ApiRequestError as e:
            if e.status_code == 401:
                raise
            logger.warning(f"Profile fetch error: {e.message}")
            return {"_id": payload.get("_id"), "email": payload.get("email", email)}

    def set_identity(self, user, token):
        self.state.user = user
        self.state.token = token if user else None
        self.reload()

    def sign_out(self):
        # tokens are stateless; dropping it is all a logout does
        self.state.page = "dashboard"
        self.state.error = ""
        self.set_identity(None, None)

    def _expire_session(self, e):
        """Sign out when the server rejected the token. Returns True if it did.

        A 401 can also mean "not your record", so the token is checked against
        /me before the session is dropped.
        """
        if e.status_code != 401:
            return False
        try:
            self.client.me(self.state.token)
        except ApiRequestError as check:
            if check.status_code != 401:
                return False
        else:
            return False
        logger.info("Session rejected by the server, signing out")
        self.sign_out()
        self.state.error = SESSION_EXPIRED
        return True

    # ---------------- Transactions ----------------
    def reload(self):
        if not self.state.logged_in:
            self.state.transactions = []
            return
        self.state.loading = True
        self.state.error = ""
        try:
            self.state.transactions = self.client.list_transactions(self.state.token)
        except ApiRequestError as e:
            logger.error(f"Fetch transactions error: {e.message}")
            if not self._expire_session(e):
                self.state.error = "Failed to fetch transactions."
        finally:
            self.state.loading = False

    def add_transaction(self, form):
        """Send the form and reload. Returns False when nothing was added."""
        if self.state.loading:
            return False
        if not self.state.logged_in:
            self.state.error = "You must be logged in."
            return False
        problem = validate_form(form)
        if problem:
            self.state.error = problem
            return False

        payload = {
            "description": str(form["description"]).strip(),
            "amount": form["amount"],
            "type": form.get("type", "expense"),
            "category": form["category"],
            "date": form["date"].isoformat() if isinstance(form["date"], date) else form["date"],
        }
        self.state.loading = True
        self.state.error = ""
        try:
            self.client.add_transaction(self.state.token, payload)
        except ApiRequestError as e:
            logger.error(f"Add transaction error: {e.message}")
            if not self._expire_session(e):
                self.state.error = f"Failed to add transaction. {e.message}"
            return False
        finally:
            self.state.loading = False
        self.reload()
        self.state.page = "dashboard"
        return True

    def delete_transaction(self, tx_id):
        if self.state.loading:
            return False
        if not self.state.logged_in:
            self.state.error = "You must be logged in."
            return False
        self.state.loading = True
        self.state.error = ""
        try:
            self.client.delete_transaction(self.state.token, tx_id)
        except ApiRequestError as e:
            logger.error(f"Delete transaction error: {e.message}")
            if not self._expire_session(e):
                self.state.error = "Failed to delete transaction."
            return False
        finally:
            self.state.loading = False
        self.reload()
        return True

    # ---------------- View ----------------
    @property
    def summary(self):
        return summarize(self.state.transactions)

    def navigate(self, page):
        if page not in PAGES:
            raise ValueError(f"Unknown page: {page}")
        self.state.page = page

    def toggle_theme(self):
        self.state.theme = "light" if self.state.theme == "dark" else "dark"
        return self.state.theme

    def export_csv(self):
        return transactions_to_csv(self.state.transactions)
