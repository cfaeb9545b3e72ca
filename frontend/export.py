# frontend/export.py
from datetime import date

from .formatting import format_amount, format_date_for_display

CSV_HEADERS = ["Date", "Description", "Category", "Type", "Amount (INR)"]


def _quote(text):
    return '"' + (text or "").replace('"', '""') + '"'


def transactions_to_csv(transactions):
    """One line per transaction under a header line, joined with newlines.

    The description is always quoted; the amount is written as received.
    """
    rows = [",".join(CSV_HEADERS)]
    for tx in transactions:
        date_str = format_date_for_display(tx.get("date")).replace(",", "")
        rows.append(",".join([
            date_str,
            _quote(tx.get("description")),
            str(tx.get("category") or ""),
            str(tx.get("type") or ""),
            format_amount(tx.get("amount")),
        ]))
    return "\n".join(rows)


def export_filename(today=None):
    today = today or date.today()
    return f"transactions-{today.isoformat()}.csv"
