"""Spending analytics over one snapshot of a user's records.

:class:`SpendingAnalytics` builds the transaction frame once and pins a
single evaluation time, so every figure in one dashboard pass agrees on
what "today" and "this month" mean.  Each method delegates to the pure
function of the same purpose in the topic modules.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, List, Optional, Union

import numpy as np

from .budgets import BudgetCompliance, Rule503020, calculate_503020_rule, calculate_budget_compliance
from .config import DEFAULT_SETTINGS, AnalyticsSettings
from .data_processing import budgets_for_period, to_local_naive, transactions_frame
from .emotional import (
    EmotionalInsight,
    MoodSpendingCorrelation,
    SpendingPattern,
    calculate_mood_correlations,
    detect_emotional_spending,
    generate_emotional_insights,
)
from .forecast import ForecastPoint, expense_forecast_series, predict_monthly_spending
from .goals import GoalProgress, calculate_goal_progress
from .models import Budget, SavingsGoal, Transaction
from .report import DashboardReport
from .savings import SavingHack, generate_saving_hacks
from .summary import CategorySpend, MonthlySummary, calculate_category_breakdown, calculate_monthly_summary

logger = logging.getLogger(__name__)


class SpendingAnalytics:
    """Personal spending analytics and calculations."""

    def __init__(
        self,
        transactions: Iterable[Transaction],
        budgets: Iterable[Budget] = (),
        goals: Iterable[SavingsGoal] = (),
        now: Optional[Union[date, datetime]] = None,
        settings: Optional[AnalyticsSettings] = None,
    ):
        """Initialize with a snapshot of the user's records."""
        if now is None:
            now = datetime.now()
        elif isinstance(now, datetime):
            now = to_local_naive(now)
        else:
            now = datetime.combine(now, datetime.min.time())
        self.now: datetime = now
        self.settings = settings or DEFAULT_SETTINGS
        self.transactions = tuple(transactions)
        self.budgets = tuple(budgets)
        self.goals = tuple(goals)
        self.data = transactions_frame(self.transactions)
        logger.debug(
            "Built analytics snapshot: %d transactions, %d budgets, %d goals at %s",
            len(self.transactions), len(self.budgets), len(self.goals), self.now.isoformat(),
        )

    @property
    def today(self) -> date:
        return self.now.date()

    def _period(self, month: Optional[int], year: Optional[int]) -> tuple[int, int]:
        return (self.today.month if month is None else month, self.today.year if year is None else year)

    def budget_compliance(self, month: Optional[int] = None, year: Optional[int] = None) -> List[BudgetCompliance]:
        """Compliance for the budgets set for a month (the current one by default)."""
        month, year = self._period(month, year)
        budgets = budgets_for_period(self.budgets, month, year)
        return calculate_budget_compliance(self.data, budgets, month, year, self.settings)

    def rule_503020(self, month: Optional[int] = None, year: Optional[int] = None) -> Rule503020:
        month, year = self._period(month, year)
        return calculate_503020_rule(self.data, month, year, self.settings)

    def predict_monthly_spending(self) -> float:
        return predict_monthly_spending(self.data, self.now)

    def expense_forecast(self, jitter: float = 0.0, rng: Optional[np.random.Generator] = None) -> List[ForecastPoint]:
        return expense_forecast_series(self.data, self.now, jitter=jitter, rng=rng, settings=self.settings)

    def mood_correlations(self) -> List[MoodSpendingCorrelation]:
        return calculate_mood_correlations(self.data)

    def spending_pattern(self) -> SpendingPattern:
        return detect_emotional_spending(self.data, self.settings)

    def emotional_insights(self, limit: Optional[int] = None) -> List[EmotionalInsight]:
        return generate_emotional_insights(self.data, self.settings, limit=limit)

    def saving_hacks(self, limit: Optional[int] = None) -> List[SavingHack]:
        return generate_saving_hacks(self.data, self.now, self.settings, limit=limit)

    def monthly_summary(self, month: Optional[int] = None, year: Optional[int] = None) -> MonthlySummary:
        month, year = self._period(month, year)
        return calculate_monthly_summary(self.data, year=year, month=month, now=self.now)

    def category_breakdown(self) -> List[CategorySpend]:
        return calculate_category_breakdown(self.data)

    def goal_progress(self) -> List[GoalProgress]:
        """Goal progress, estimating time to goal from this month's net savings."""
        monthly_savings = self.monthly_summary().net_savings
        return calculate_goal_progress(self.goals, monthly_savings=monthly_savings)

    def dashboard_report(
        self,
        insight_limit: Optional[int] = None,
        hack_limit: Optional[int] = None,
    ) -> DashboardReport:
        """Assemble every dashboard figure for the current month."""
        month, year = self._period(None, None)
        logger.debug("Assembling dashboard report for %04d-%02d", year, month)
        return DashboardReport(
            generated_at=self.now,
            month=month,
            year=year,
            summary=self.monthly_summary(),
            budget_compliance=self.budget_compliance(),
            rule_503020=self.rule_503020(),
            predicted_spending=self.predict_monthly_spending(),
            forecast=self.expense_forecast(),
            mood_correlations=self.mood_correlations(),
            spending_pattern=self.spending_pattern(),
            insights=self.emotional_insights(limit=insight_limit),
            saving_hacks=self.saving_hacks(limit=hack_limit),
            category_breakdown=self.category_breakdown(),
            goals=self.goal_progress(),
        )
