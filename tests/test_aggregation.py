# tests/test_aggregation.py
import pytest

from frontend.aggregation import summarize


def tx(type_, category, amount):
    return {"type": type_, "category": category, "amount": amount}


SAMPLE = [
    tx("income", "Salary", 50000),
    tx("expense", "Food", 1200.5),
    tx("expense", "Transport", 300),
    tx("income", "Freelance", 8000),
    tx("expense", "Food", 99.5),
    tx("expense", "Bills", 1300),
]


def test_totals_and_balance():
    s = summarize(SAMPLE)
    assert s.total_income == pytest.approx(58000)
    assert s.total_expenses == pytest.approx(2900)
    assert s.balance == pytest.approx(s.total_income - s.total_expenses)


def test_category_sums_match_totals():
    s = summarize(SAMPLE)
    assert sum(v for _, v in s.income_by_category) == pytest.approx(s.total_income)
    assert sum(v for _, v in s.expense_by_category) == pytest.approx(s.total_expenses)


def test_breakdown_sorted_descending():
    s = summarize(SAMPLE)
    assert s.expense_by_category == [("Food", 1300.0), ("Bills", 1300.0), ("Transport", 300.0)]
    assert [name for name, _ in s.income_by_category] == ["Salary", "Freelance"]


def test_ties_keep_encounter_order():
    s = summarize([
        tx("expense", "B", 10),
        tx("expense", "A", 10),
        tx("expense", "C", 20),
        tx("expense", "D", 10),
    ])
    assert [name for name, _ in s.expense_by_category] == ["C", "B", "A", "D"]


def test_invalid_amounts_are_skipped():
    s = summarize([
        tx("income", "Salary", "abc"),
        tx("income", "Salary", None),
        {"type": "income", "category": "Gift"},
        tx("income", "Gift", "25.5"),
        tx("expense", "Food", 10),
    ])
    assert s.total_income == pytest.approx(25.5)
    assert s.income_by_category == [("Gift", 25.5)]
    assert s.total_expenses == pytest.approx(10)


def test_unknown_types_and_missing_category():
    s = summarize([tx("transfer", "Bank", 100), {"type": "expense", "amount": 5}])
    assert s.total_income == 0
    assert s.expense_by_category == [("Other", 5.0)]


def test_empty_list():
    s = summarize([])
    assert (s.total_income, s.total_expenses, s.balance) == (0, 0, 0)
    assert s.income_by_category == [] and s.expense_by_category == []


def test_categories_group_by_display_text():
    s = summarize([tx("expense", 1, 2), tx("expense", "1", 3), tx("expense", None, 1)])
    assert s.expense_by_category == [("1", 5.0), ("Other", 1.0)]
