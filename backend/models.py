# backend/models.py
# lightweight model classes over the sqlite tables (not an ORM)
import math
import re
import sqlite3
from datetime import datetime, timezone

from .db import execute_db, query_db
from .errors import ValidationError

TRANSACTION_TYPES = ('income', 'expense')
DEFAULT_CATEGORY = 'Other'
DATE_FORMATS = ["%Y-%m-%d", "%d-%m-%Y", "%Y/%m/%d", "%d/%m/%Y"]
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6


class SchemaValidationError(Exception):
    """Raised by a model when a record breaks its schema rules.

    ``errors`` maps field name to a human readable message.
    """

    def __init__(self, errors):
        super().__init__("; ".join(errors.values()))
        self.errors = errors

    @property
    def messages(self):
        return list(self.errors.values())


class DuplicateKeyError(Exception):
    pass


def utcnow_iso():
    return datetime.now(timezone.utc).isoformat()


def parse_date(s):
    """Try multiple date formats, then ISO 8601 datetimes."""
    if not s:
        return None
    s = str(s).strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(s.replace('Z', '+00:00')).date()
    except ValueError:
        return None


def parse_amount(value):
    """Return value as a finite float, or None when it is not a number."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        amount = float(str(value).strip())
    except (TypeError, ValueError):
        return None
    if not math.isfinite(amount):
        return None
    return amount


class User:
    def __init__(self, id, email, password_hash, created_at=None):
        self.id = id
        self.email = email
        self.password_hash = password_hash
        self.created_at = created_at

    @classmethod
    def from_row(cls, row):
        if row is None:
            return None
        return cls(row['id'], row['email'], row['password_hash'], row['created_at'])

    @classmethod
    def find_by_id(cls, user_id):
        return cls.from_row(query_db("SELECT * FROM users WHERE id=?", (user_id,), one=True))

    @classmethod
    def find_by_email(cls, email):
        # exact, case-sensitive match
        return cls.from_row(query_db("SELECT * FROM users WHERE email=?", (email,), one=True))

    @classmethod
    def create(cls, email, password_hash):
        created_at = utcnow_iso()
        try:
            user_id = execute_db(
                "INSERT INTO users (email, password_hash, created_at) VALUES (?,?,?)",
                (email, password_hash, created_at)
            )
        except sqlite3.IntegrityError as e:
            raise DuplicateKeyError(email) from e
        return cls(user_id, email, password_hash, created_at)

    def to_dict(self, include_password=False):
        data = {'_id': self.id, 'email': self.email, 'createdAt': self.created_at}
        if include_password:
            data['password'] = self.password_hash
        return data


class Transaction:
    def __init__(self, id, user_id, date, amount, description=None, category=None, type='expense', created_at=None):
        self.id = id
        self.user_id = user_id
        self.date = date
        self.amount = amount
        self.description = description.strip() if isinstance(description, str) else description
        if category is None:
            category = DEFAULT_CATEGORY
        self.category = category.strip() if isinstance(category, str) else category
        self.type = type
        self.created_at = created_at

    @classmethod
    def from_row(cls, row):
        if row is None:
            return None
        return cls(
            id=row['id'],
            user_id=row['user_id'],
            date=parse_date(row['date']),
            amount=row['amount'],
            description=row['description'],
            category=row['category'],
            type=row['type'],
            created_at=row['created_at'],
        )

    def validate(self):
        errors = {}
        if not isinstance(self.description, str) or not self.description:
            errors['description'] = 'Please add a description'
        amount = parse_amount(self.amount)
        if amount is None:
            errors['amount'] = 'Please add a positive or negative number for amount'
        elif amount <= 0:
            errors['amount'] = 'Amount must be greater than zero'
        if self.type not in TRANSACTION_TYPES:
            errors['type'] = 'Please specify type as income or expense'
        if not isinstance(self.category, str) or not self.category:
            errors['category'] = 'Please add a category'
        if self.date is None:
            errors['date'] = 'Please add a date for the transaction'
        if errors:
            raise SchemaValidationError(errors)

    def save(self):
        """Insert a new record. Raises SchemaValidationError before touching the db."""
        self.validate()
        self.created_at = utcnow_iso()
        self.id = execute_db(
            "INSERT INTO transactions (user_id, description, amount, type, category, date, created_at) "
            "VALUES (?,?,?,?,?,?,?)",
            (self.user_id, self.description, float(self.amount), self.type,
             self.category, self.date.isoformat(), self.created_at)
        )
        return self

    def delete(self):
        execute_db("DELETE FROM transactions WHERE id=?", (self.id,))

    @classmethod
    def find_by_id(cls, tx_id):
        return cls.from_row(query_db("SELECT * FROM transactions WHERE id=?", (tx_id,), one=True))

    @classmethod
    def find_by_user(cls, user_id):
        rows = query_db(
            "SELECT * FROM transactions WHERE user_id=? ORDER BY date DESC, id DESC",
            (user_id,)
        )
        return [cls.from_row(r) for r in rows]

    def to_dict(self):
        return {
            '_id': self.id,
            'user': self.user_id,
            'description': self.description,
            'amount': self.amount,
            'type': self.type,
            'category': self.category,
            'date': self.date.isoformat() if self.date else None,
            'createdAt': self.created_at,
        }


# ---------------- Request bodies ----------------
def _require_object(data):
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


class Credentials:
    """Body of /register and /login."""

    def __init__(self, email, password):
        self.email = email
        self.password = password

    @classmethod
    def from_json(cls, data, strict=True):
        data = _require_object(data)
        email = data.get('email')
        password = data.get('password')
        if not strict:
            return cls(email, password)
        if not email or not password:
            raise ValidationError("Please provide an email and password")
        if not isinstance(email, str) or not EMAIL_RE.match(email):
            raise ValidationError("Please provide a valid email")
        if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return cls(email, password)


class NewTransaction:
    """Body of POST /api/transactions, checked before it reaches the model."""
    REQUIRED = ('description', 'amount', 'type', 'category', 'date')

    def __init__(self, description, amount, type, category, date):
        self.description = description
        self.amount = amount
        self.type = type
        self.category = category
        self.date = date

    @classmethod
    def from_json(cls, data):
        data = _require_object(data)
        missing = [f for f in cls.REQUIRED if data.get(f) is None or data.get(f) == '']
        if missing:
            raise ValidationError(
                'Please provide all required fields: description, amount, type, category, date'
            )
        if data['type'] not in TRANSACTION_TYPES:
            raise ValidationError('Type must be either "income" or "expense"')
        amount = parse_amount(data['amount'])
        if amount is None:
            raise ValidationError('Amount must be a valid number')
        if not isinstance(data['description'], str) or not isinstance(data['category'], str):
            raise ValidationError('Description and category must be text')
        return cls(
            description=data['description'],
            amount=amount,
            type=data['type'],
            category=data['category'],
            date=parse_date(data['date']),
        )

    def to_model(self, user_id):
        return Transaction(
            id=None,
            user_id=user_id,
            date=self.date,
            amount=self.amount,
            description=self.description,
            category=self.category,
            type=self.type,
        )
