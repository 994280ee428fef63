"""Savings goal progress helpers."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, List

from .models import SavingsGoal


@dataclass(frozen=True)
class GoalProgress:
    goal: SavingsGoal
    progress_percent: float
    remaining_amount: float
    months_to_goal: float
    is_complete: bool


def apply_goal_contribution(goal: SavingsGoal, amount: float) -> SavingsGoal:
    """Return a copy of ``goal`` with ``amount`` added (or withdrawn if negative).

    Progress is clamped to ``[0, target_amount]``.

    Example:
        >>> goal = SavingsGoal(id='g1', user_id='u1', name='Trip', target_amount=500, current_amount=450)
        >>> apply_goal_contribution(goal, 100).current_amount
        500
    """
    new_amount = max(0, goal.current_amount + amount)
    return replace(goal, current_amount=min(new_amount, goal.target_amount))


def calculate_goal_progress(goals: Iterable[SavingsGoal], monthly_savings: float = 0.0) -> List[GoalProgress]:
    """Calculate progress towards each savings goal.

    ``months_to_goal`` assumes the remaining amount is covered by
    ``monthly_savings`` each month; it is infinite when nothing is being
    saved and 0 once the goal is reached.
    """
    progress: List[GoalProgress] = []
    for goal in goals:
        target = goal.target_amount
        percent = (goal.current_amount / target * 100) if target > 0 else 0.0
        remaining = max(target - goal.current_amount, 0.0)
        if remaining == 0:
            months = 0.0
        elif monthly_savings > 0:
            months = remaining / monthly_savings
        else:
            months = float('inf')
        progress.append(
            GoalProgress(
                goal=goal,
                progress_percent=min(percent, 100.0),
                remaining_amount=remaining,
                months_to_goal=months,
                is_complete=percent >= 100,
            )
        )
    return progress
