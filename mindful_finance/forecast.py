"""Naive expense forecasting.

Two projections are offered:

* :func:`predict_monthly_spending` extrapolates the current month's
  spend-to-date linearly over the whole month.  This is the headline
  forecast figure.
* :func:`expense_forecast_series` returns a short history of monthly
  totals followed by a flat projection at the average of the non-zero
  months, for display next to the headline number.  An optional jitter
  can be applied to the projected points; it carries no analytical
  meaning and is disabled by default.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple, Union

import numpy as np

from .config import DEFAULT_SETTINGS, AnalyticsSettings
from .data_processing import TransactionsLike, as_date, ensure_frame, expense_rows, month_rows, total_amount


@dataclass(frozen=True)
class ForecastPoint:
    label: str
    year: int
    month: int
    actual: Optional[float]
    predicted: Optional[float]


def shift_month(year: int, month: int, offset: int) -> Tuple[int, int]:
    """Move a (year, month) pair by ``offset`` months, wrapping year boundaries.

    Example:
        >>> shift_month(2024, 1, -1)
        (2023, 12)
        >>> shift_month(2024, 11, 3)
        (2025, 2)
    """
    index = year * 12 + (month - 1) + offset
    new_year, new_month = divmod(index, 12)
    return new_year, new_month + 1


def predict_monthly_spending(
    transactions: TransactionsLike,
    now: Optional[Union[date, datetime]] = None,
) -> float:
    """Project the current month's total spending from its run rate.

    Expenses dated in the current month up to and including today are
    summed, divided by the day of the month and multiplied by the number
    of days in the month.
    """
    today = as_date(now)
    frame = ensure_frame(transactions)
    month_expenses = expense_rows(month_rows(frame, today.year, today.month))
    spent_so_far = total_amount(month_expenses[month_expenses['date'].dt.day <= today.day])

    days_elapsed = today.day
    days_in_month = calendar.monthrange(today.year, today.month)[1]
    daily_rate = spent_so_far / days_elapsed if days_elapsed > 0 else 0.0
    return daily_rate * days_in_month


def monthly_expense_totals(transactions: TransactionsLike) -> Dict[Tuple[int, int], float]:
    """Total expenses keyed by ``(year, month)``."""
    expenses = expense_rows(ensure_frame(transactions))
    if expenses.empty:
        return {}
    grouped = expenses.groupby(['year', 'month'])['amount'].sum()
    return {(int(year), int(month)): float(total) for (year, month), total in grouped.items()}


def expense_forecast_series(
    transactions: TransactionsLike,
    now: Optional[Union[date, datetime]] = None,
    history_months: Optional[int] = None,
    projection_months: Optional[int] = None,
    jitter: float = 0.0,
    rng: Optional[np.random.Generator] = None,
    settings: Optional[AnalyticsSettings] = None,
) -> List[ForecastPoint]:
    """Build the actual-plus-projected monthly expense series.

    Args:
        transactions: Transactions (or a prepared frame) to evaluate
        now: Evaluation time; the current month is the last historical point
        history_months: Number of months of actuals, oldest first
        projection_months: Number of projected months after the current one
        jitter: Maximum relative perturbation of projected points
            (``0.05`` gives ±5%).  ``0`` keeps the series deterministic.
        rng: Random generator used when ``jitter`` is positive

    Returns:
        Historical points carry ``actual``; projected points carry
        ``predicted``.  The last historical point carries both so the two
        lines join up.
    """
    settings = settings or DEFAULT_SETTINGS
    history_months = settings.history_months if history_months is None else history_months
    projection_months = settings.projection_months if projection_months is None else projection_months
    today = as_date(now)
    totals = monthly_expense_totals(transactions)

    points: List[ForecastPoint] = []
    history: List[float] = []
    for offset in range(history_months - 1, -1, -1):
        year, month = shift_month(today.year, today.month, -offset)
        amount = totals.get((year, month), 0.0)
        history.append(amount)
        points.append(
            ForecastPoint(
                label=calendar.month_abbr[month],
                year=year,
                month=month,
                actual=amount,
                predicted=amount if offset == 0 else None,
            )
        )

    non_zero = [amount for amount in history if amount > 0]
    average = float(np.mean(non_zero)) if non_zero else 0.0

    if jitter > 0:
        rng = rng or np.random.default_rng()
        factors = 1 + rng.uniform(-jitter, jitter, size=projection_months)
    else:
        factors = np.ones(projection_months)

    for offset in range(1, projection_months + 1):
        year, month = shift_month(today.year, today.month, offset)
        points.append(
            ForecastPoint(
                label=calendar.month_abbr[month],
                year=year,
                month=month,
                actual=None,
                predicted=average * float(factors[offset - 1]),
            )
        )
    return points
