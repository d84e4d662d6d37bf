from datetime import date

import pytest

from aggregator import (
    MONTH_LABELS,
    Transaction,
    bar_chart_series,
    build_dashboard,
    compute_monthly_category_breakdown,
    compute_summary,
    compute_yearly_monthly_totals,
    filter_by_category_substring,
    normalize_transactions,
    pie_chart_series,
)

TODAY = date(2026, 10, 18)


def tx(amount, category="food", type="expense", day="2026-10-05"):
    return Transaction(date=day, amount=amount, category=category, type=type)


@pytest.fixture
def transactions():
    return (
        tx(1000, "salary", "income", "2026-10-01"),
        tx(200, "salary", "income", "2026-03-01"),
        tx(50, "food", day="2026-10-02"),
        tx(25.5, "Food", day="2026-10-17"),
        tx(300, "rent", day="2026-10-01"),
        tx(80, "travel", day="2026-09-30"),
        tx(40, "food", day="2025-10-10"),
    )


class TestSummary:
    def test_totals(self, transactions):
        summary = compute_summary(transactions)
        assert summary.total_income == 1200
        assert summary.total_expense == 495.5
        assert summary.balance == 1200 - 495.5

    def test_empty(self):
        summary = compute_summary(())
        assert (summary.total_income, summary.total_expense, summary.balance) == (0, 0, 0)

    def test_only_income(self):
        summary = compute_summary([tx(10, type="income"), tx(5, type="income")])
        assert summary.total_expense == 0
        assert summary.balance == 15


class TestMonthlyBreakdown:
    def test_current_month_expenses_by_category(self, transactions):
        breakdown = compute_monthly_category_breakdown(transactions, TODAY)
        assert breakdown == {"food": 50, "Food": 25.5, "rent": 300}

    def test_ignores_unparseable_dates(self):
        breakdown = compute_monthly_category_breakdown([tx(10, day="someday")], TODAY)
        assert breakdown == {}

    def test_pie_series(self):
        series = pie_chart_series({"food": 10.0, "rent": 20.0, "fun": 5.0})
        assert series.labels == ["food", "rent", "fun"]
        assert series.values == [10.0, 20.0, 5.0]
        assert series.colors == [
            "hsl(0, 70%, 60%)",
            "hsl(120, 70%, 60%)",
            "hsl(240, 70%, 60%)",
        ]

    def test_pie_series_empty(self):
        series = pie_chart_series({})
        assert series.labels == series.values == series.colors == []


class TestYearlyTotals:
    def test_twelve_buckets(self, transactions):
        totals = compute_yearly_monthly_totals(transactions, 2026)
        assert len(totals) == 12
        assert totals[9] == 375.5
        assert totals[8] == 80
        assert totals[2] == 0
        assert sum(totals) == 455.5

    def test_empty_input_still_twelve(self):
        assert compute_yearly_monthly_totals([], 2026) == [0.0] * 12

    def test_bar_series(self):
        series = bar_chart_series([1.0] * 12)
        assert series.labels == MONTH_LABELS
        assert series.labels[0] == "Jan" and series.labels[-1] == "Dec"
        assert len(series.values) == 12


class TestFilter:
    def test_case_insensitive_substring(self, transactions):
        rows = filter_by_category_substring(transactions, "FOO")
        assert [t.amount for t in rows] == [50, 25.5, 40]

    def test_empty_query_passes_everything(self, transactions):
        assert filter_by_category_substring(transactions, "") == list(transactions)


def test_normalize_transactions():
    records = [
        {"id": 1, "amount": "12.5", "category": "food", "type": "expense", "date": "2026-10-01"},
        {"id": 2, "amount": 3, "type": "gift"},
        {"id": 3, "amount": None, "category": None, "type": "income", "date": ""},
    ]
    normalized = normalize_transactions(records, today=TODAY)
    assert normalized[0] == Transaction(id="1", date="2026-10-01", amount=12.5, category="food", type="expense")
    assert normalized[1].type == "expense"
    assert normalized[1].date == "2026-10-18"
    assert normalized[1].category == ""
    assert normalized[2].amount == 0
    assert normalized[2].type == "income"


def test_transactions_are_immutable():
    t = tx(1)
    with pytest.raises(Exception):
        t.amount = 2


def test_build_dashboard(transactions):
    dashboard = build_dashboard(transactions, today=TODAY, query="rent")
    assert dashboard["summary"].balance == 1200 - 495.5
    assert [t.category for t in dashboard["rows"]] == ["rent"]
    assert dashboard["pie"].labels == ["food", "Food", "rent"]
    assert sum(dashboard["bar"].values) == 455.5


def test_dashboard_from_api(user_client):
    user_client.post("/api/expenses", json={"amount": 100, "category": "food"})
    user_client.post("/api/expenses", json={"amount": 250, "category": "pay", "type": "income"})

    transactions = normalize_transactions(user_client.get("/api/expenses").json())
    dashboard = build_dashboard(transactions)
    assert dashboard["summary"].total_income == 250
    assert dashboard["summary"].total_expense == 100
    assert dashboard["pie"].values == [100]
