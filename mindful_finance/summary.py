"""Monthly summary and category breakdown for the dashboard header widgets."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional, Union

from .categories import CATEGORY_COLORS, CATEGORY_ICONS, Category, category_label
from .data_processing import (
    TransactionsLike,
    as_date,
    ensure_frame,
    expense_rows,
    income_rows,
    month_rows,
    total_amount,
)
from .forecast import shift_month


@dataclass(frozen=True)
class MonthlySummary:
    year: int
    month: int
    income: float
    expenses: float
    net_savings: float
    savings_rate: float
    change_percent: float
    wellness_score: int


@dataclass(frozen=True)
class CategorySpend:
    category: Category
    label: str
    icon: str
    color: str
    amount: float
    percent: float


def wellness_score(income: float, net_savings: float) -> int:
    """Simple financial wellness heuristic on a 0-100 scale.

    The score is 75 while no income is tracked; otherwise it steps with
    the savings rate: above 20% scores 90, above 10% scores 80, any
    positive rate scores 70 and a zero or negative rate scores 50.
    """
    if income <= 0:
        return 75
    rate = net_savings / income
    if rate > 0.2:
        return 90
    if rate > 0.1:
        return 80
    if rate > 0:
        return 70
    return 50


def calculate_monthly_summary(
    transactions: TransactionsLike,
    year: Optional[int] = None,
    month: Optional[int] = None,
    now: Optional[Union[date, datetime]] = None,
) -> MonthlySummary:
    """Calculate income, expenses and savings for one month.

    Defaults to the month containing ``now``.  ``change_percent`` compares
    expenses with the previous month (0 when that month has none).
    """
    today = as_date(now)
    year = today.year if year is None else year
    month = today.month if month is None else month
    frame = ensure_frame(transactions)

    current = month_rows(frame, year, month)
    income = total_amount(income_rows(current))
    expenses = total_amount(expense_rows(current))

    prev_year, prev_month = shift_month(year, month, -1)
    previous_expenses = total_amount(expense_rows(month_rows(frame, prev_year, prev_month)))

    net_savings = income - expenses
    return MonthlySummary(
        year=year,
        month=month,
        income=income,
        expenses=expenses,
        net_savings=net_savings,
        savings_rate=(net_savings / income * 100) if income > 0 else 0.0,
        change_percent=(
            (expenses - previous_expenses) / previous_expenses * 100 if previous_expenses > 0 else 0.0
        ),
        wellness_score=wellness_score(income, net_savings),
    )


def calculate_category_breakdown(transactions: TransactionsLike) -> List[CategorySpend]:
    """Total expenses per category, largest first, with each category's share."""
    expenses = expense_rows(ensure_frame(transactions))
    if expenses.empty:
        return []
    totals = expenses.groupby('category', sort=False)['amount'].sum().sort_values(
        ascending=False, kind='stable'
    )
    overall = float(totals.sum())

    breakdown = []
    for value, amount in totals.items():
        category = Category(value)
        breakdown.append(
            CategorySpend(
                category=category,
                label=category_label(category),
                icon=CATEGORY_ICONS[category],
                color=CATEGORY_COLORS[category],
                amount=float(amount),
                percent=(float(amount) / overall * 100) if overall > 0 else 0.0,
            )
        )
    return breakdown
