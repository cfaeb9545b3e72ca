# frontend/aggregation.py
"""Totals and category breakdowns for the dashboard.

Everything here is recomputed from the full transaction list each time it is
called; there is no incremental state.
"""
from typing import Dict, Iterable, List, Tuple

import pandas as pd

DEFAULT_CATEGORY = "Other"


class Summary:
    def __init__(self, total_income=0.0, total_expenses=0.0,
                 income_by_category=None, expense_by_category=None):
        self.total_income = total_income
        self.total_expenses = total_expenses
        self.income_by_category: List[Tuple[str, float]] = income_by_category or []
        self.expense_by_category: List[Tuple[str, float]] = expense_by_category or []

    @property
    def balance(self):
        return self.total_income - self.total_expenses


def _by_category(df: pd.DataFrame) -> List[Tuple[str, float]]:
    if df.empty:
        return []
    # groupby(sort=False) keeps first-encounter order, which the stable sort preserves for ties
    totals = df.groupby("category", sort=False)["amount"].sum()
    pairs = [(str(name), float(value)) for name, value in totals.items()]
    return sorted(pairs, key=lambda pair: pair[1], reverse=True)


def summarize(transactions: Iterable[Dict]) -> Summary:
    """Income/expense totals and per-category sums.

    Transactions whose amount is missing or not numeric are skipped, as are
    transactions of any type other than ``income`` or ``expense``.
    """
    df = pd.DataFrame(list(transactions), columns=["type", "category", "amount"])
    if df.empty:
        return Summary()

    df["amount"] = pd.to_numeric(df["amount"], errors="coerce")
    df = df.dropna(subset=["amount"]).copy()
    # 1 and "1" are the same category once displayed
    df["category"] = df["category"].fillna(DEFAULT_CATEGORY).astype(str)

    income = df[df["type"] == "income"]
    expense = df[df["type"] == "expense"]

    return Summary(
        total_income=float(income["amount"].sum()),
        total_expenses=float(expense["amount"].sum()),
        income_by_category=_by_category(income),
        expense_by_category=_by_category(expense),
    )
