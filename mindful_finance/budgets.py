"""Budget compliance and 50/30/20 rule calculations.

Both evaluators work on a single calendar month.  Percentages are of
realised spending rather than of income, so the 50/30/20 split can be
read as "is my spending mix on target" even when income tracking is
incomplete; income only drives the absolute targets.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from .categories import BUDGET_BUCKETS, Category, bucket_for
from .config import DEFAULT_SETTINGS, AnalyticsSettings
from .data_processing import (
    TransactionsLike,
    ensure_frame,
    expense_rows,
    income_rows,
    month_rows,
    total_amount,
)
from .models import Budget


class BudgetStatus(str, Enum):
    SAFE = 'safe'
    WARNING = 'warning'
    EXCEEDED = 'exceeded'


@dataclass(frozen=True)
class BudgetCompliance:
    category: Category
    budgeted: float
    spent: float
    remaining: float
    percent_used: float
    status: BudgetStatus


@dataclass(frozen=True)
class BucketSummary:
    amount: float
    percent: float
    target: float
    categories: Tuple[Category, ...]


@dataclass(frozen=True)
class Rule503020:
    needs: BucketSummary
    wants: BucketSummary
    savings: BucketSummary
    total_income: float
    total_expenses: float


def budget_status(percent_used: float, settings: Optional[AnalyticsSettings] = None) -> BudgetStatus:
    """Map a percent-used value onto the safe / warning / exceeded tiers."""
    settings = settings or DEFAULT_SETTINGS
    if percent_used >= settings.budget_exceeded_percent:
        return BudgetStatus.EXCEEDED
    if percent_used >= settings.budget_warning_percent:
        return BudgetStatus.WARNING
    return BudgetStatus.SAFE


def calculate_budget_compliance(
    transactions: TransactionsLike,
    budgets: Iterable[Budget],
    month: int,
    year: int,
    settings: Optional[AnalyticsSettings] = None,
) -> List[BudgetCompliance]:
    """Compare each budget with the month's spending in its category.

    Args:
        transactions: Transactions (or a prepared frame) to evaluate
        budgets: Budgets for the period, in display order
        month: Calendar month, 1-12
        year: Calendar year

    Returns:
        One entry per budget, in the order given.  ``percent_used`` is 0
        when the budgeted amount is not positive.

    Example:
        >>> compliance = calculate_budget_compliance(transactions, budgets, 3, 2024)
        >>> compliance[0].status
        <BudgetStatus.EXCEEDED: 'exceeded'>
    """
    frame = ensure_frame(transactions)
    month_expenses = expense_rows(month_rows(frame, year, month))
    spent_by_category = month_expenses.groupby('category')['amount'].sum()

    results: List[BudgetCompliance] = []
    for budget in budgets:
        category = Category(budget.category)
        budgeted = float(budget.amount)
        spent = float(spent_by_category.get(category.value, 0.0))
        percent_used = (spent / budgeted * 100) if budgeted > 0 else 0.0
        results.append(
            BudgetCompliance(
                category=category,
                budgeted=budgeted,
                spent=spent,
                remaining=budgeted - spent,
                percent_used=percent_used,
                status=budget_status(percent_used, settings),
            )
        )
    return results


def calculate_503020_rule(
    transactions: TransactionsLike,
    month: int,
    year: int,
    settings: Optional[AnalyticsSettings] = None,
) -> Rule503020:
    """Split the month's expenses into needs, wants and savings.

    Each bucket reports its amount, its share of tracked expenses and an
    income-derived target (50% / 30% / 20% of the month's income by
    default).
    """
    settings = settings or DEFAULT_SETTINGS
    period = month_rows(ensure_frame(transactions), year, month)
    total_income = total_amount(income_rows(period))
    expenses = expense_rows(period)

    bucket_totals = expenses.groupby(expenses['category'].map(bucket_for))['amount'].sum()
    amounts = {name: float(bucket_totals.get(name, 0.0)) for name in BUDGET_BUCKETS}
    total_expenses = sum(amounts.values())

    def summarize(name: str) -> BucketSummary:
        amount = amounts[name]
        return BucketSummary(
            amount=amount,
            percent=(amount / total_expenses * 100) if total_expenses > 0 else 0.0,
            target=total_income * settings.rule_ratios[name],
            categories=BUDGET_BUCKETS[name],
        )

    return Rule503020(
        needs=summarize('needs'),
        wants=summarize('wants'),
        savings=summarize('savings'),
        total_income=total_income,
        total_expenses=total_expenses,
    )
