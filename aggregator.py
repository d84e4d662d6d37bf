# aggregator.py
"""Summary totals and chart series computed from a user's transaction list.

Everything here is a pure function over an immutable list of ``Transaction``
records. Rendering the charts is left to whoever consumes the series.
"""
import calendar
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from dateutil.parser import isoparse
from pydantic import BaseModel

MONTH_LABELS = list(calendar.month_abbr)[1:]


class Transaction(BaseModel):
    id: Optional[str] = None
    date: str
    amount: float
    category: str = ""
    type: str = "expense"

    class Config:
        frozen = True


class Summary(BaseModel):
    total_income: float
    total_expense: float
    balance: float


class ChartSeries(BaseModel):
    labels: List[str]
    values: List[float]
    colors: List[str] = []


def normalize_transactions(
    records: Iterable[dict], today: date = None
) -> Tuple[Transaction, ...]:
    """Turn raw expense records from the API into ``Transaction`` values."""
    today = today or date.today()
    transactions = []
    for record in records:
        record_id = record.get("id", record.get("_id"))
        transactions.append(
            Transaction(
                id=None if record_id is None else str(record_id),
                date=record.get("date") or today.isoformat(),
                amount=float(record.get("amount") or 0),
                category=record.get("category") or "",
                type="income" if record.get("type") == "income" else "expense",
            )
        )
    return tuple(transactions)


def parse_date(value: str) -> Optional[date]:
    try:
        return isoparse(value).date()
    except (TypeError, ValueError):
        return None


def compute_summary(transactions: Iterable[Transaction]) -> Summary:
    income = 0.0
    expense = 0.0
    for t in transactions:
        if t.type == "income":
            income += t.amount
        elif t.type == "expense":
            expense += t.amount
    return Summary(total_income=income, total_expense=expense, balance=income - expense)


def compute_monthly_category_breakdown(
    transactions: Iterable[Transaction], reference_date: date
) -> Dict[str, float]:
    """Expense totals per category for the month containing ``reference_date``."""
    totals: Dict[str, float] = {}
    for t in transactions:
        if t.type != "expense":
            continue
        day = parse_date(t.date)
        if day is None:
            continue
        if day.year == reference_date.year and day.month == reference_date.month:
            totals[t.category] = totals.get(t.category, 0.0) + t.amount
    return totals


def compute_yearly_monthly_totals(
    transactions: Iterable[Transaction], reference_year: int
) -> List[float]:
    """Expense totals for Jan..Dec of ``reference_year``; always 12 entries."""
    totals = [0.0] * 12
    for t in transactions:
        if t.type != "expense":
            continue
        day = parse_date(t.date)
        if day is not None and day.year == reference_year:
            totals[day.month - 1] += t.amount
    return totals


def filter_by_category_substring(
    transactions: Iterable[Transaction], query: str
) -> List[Transaction]:
    needle = (query or "").lower()
    return [t for t in transactions if needle in t.category.lower()]


def pie_chart_series(breakdown: Dict[str, float]) -> ChartSeries:
    labels = list(breakdown)
    count = len(labels)
    colors = [f"hsl({i * 360 / count:g}, 70%, 60%)" for i in range(count)]
    return ChartSeries(labels=labels, values=[breakdown[k] for k in labels], colors=colors)


def bar_chart_series(monthly_totals: List[float]) -> ChartSeries:
    return ChartSeries(labels=MONTH_LABELS, values=list(monthly_totals))


def build_dashboard(
    transactions: Iterable[Transaction], today: date = None, query: str = ""
) -> dict:
    today = today or date.today()
    transactions = tuple(transactions)
    return {
        "summary": compute_summary(transactions),
        "rows": filter_by_category_substring(transactions, query),
        "pie": pie_chart_series(compute_monthly_category_breakdown(transactions, today)),
        "bar": bar_chart_series(compute_yearly_monthly_totals(transactions, today.year)),
    }
