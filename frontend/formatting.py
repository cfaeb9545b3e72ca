# frontend/formatting.py
import math
from datetime import date, datetime

import pandas as pd

CURRENCY_SYMBOL = "₹"


def _group_indian(digits):
    # last three digits, then groups of two: 12,34,567
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(amount):
    """Format an amount as INR with Indian digit grouping, e.g. ₹1,50,000.00."""
    try:
        value = float(amount)
    except (TypeError, ValueError):
        value = 0.0
    if not math.isfinite(value):
        value = 0.0
    sign = "-" if value < 0 else ""
    whole, frac = f"{abs(value):.2f}".split(".")
    return f"{sign}{CURRENCY_SYMBOL}{_group_indian(whole)}.{frac}"


def format_date_for_display(value):
    if value is None or value == "":
        return "N/A"
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        parsed = pd.to_datetime(str(value), errors="coerce")
        if pd.isna(parsed):
            return "Invalid Date"
    return parsed.strftime("%b %d, %Y")


def format_amount(amount):
    """Plain number text as the API sent it: 1500.0 becomes 1500, 4.5 stays 4.5."""
    if amount is None:
        return ""
    if isinstance(amount, float) and amount.is_integer():
        return str(int(amount))
    return str(amount)
