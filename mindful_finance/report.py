"""Dashboard report container and JSON-friendly serialisation."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List

from .budgets import BudgetCompliance, Rule503020
from .emotional import EmotionalInsight, MoodSpendingCorrelation, SpendingPattern
from .forecast import ForecastPoint
from .goals import GoalProgress
from .savings import SavingHack
from .summary import CategorySpend, MonthlySummary


@dataclass(frozen=True)
class DashboardReport:
    generated_at: datetime
    month: int
    year: int
    summary: MonthlySummary
    budget_compliance: List[BudgetCompliance]
    rule_503020: Rule503020
    predicted_spending: float
    forecast: List[ForecastPoint]
    mood_correlations: List[MoodSpendingCorrelation]
    spending_pattern: SpendingPattern
    insights: List[EmotionalInsight]
    saving_hacks: List[SavingHack]
    category_breakdown: List[CategorySpend]
    goals: List[GoalProgress]


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value


def report_to_dict(report: Any) -> Dict[str, Any]:
    """Convert a report (or any derived dataclass) into JSON-compatible dicts.

    Enum members become their values, dates become ISO strings and
    non-finite floats (e.g. an unreachable goal's ``months_to_goal``)
    become ``None``.
    """
    if not is_dataclass(report):
        raise TypeError(f"Expected a dataclass instance, got {type(report).__name__}")
    return _jsonable(asdict(report))
