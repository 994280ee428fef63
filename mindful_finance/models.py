"""Record types consumed by the analytics functions.

Records are immutable snapshots of what the hosted backend stores.
Amounts are always non-negative magnitudes; the direction of a
transaction is carried by its ``type`` alone.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from .categories import Category, Mood, TransactionType


@dataclass(frozen=True)
class Transaction:
    id: str
    user_id: str
    description: str
    amount: float
    category: Category
    type: TransactionType
    date: date
    created_at: datetime
    mood: Optional[Mood] = None

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE


@dataclass(frozen=True)
class Budget:
    id: str
    user_id: str
    category: Category
    amount: float
    month: int  # 1-12
    year: int

    @property
    def period_key(self) -> tuple[str, Category, int, int]:
        """Identity used for upserts: one budget per user, category and month."""
        return (self.user_id, self.category, self.month, self.year)


@dataclass(frozen=True)
class SavingsGoal:
    id: str
    user_id: str
    name: str
    target_amount: float
    current_amount: float = 0.0
    deadline: Optional[date] = None
    icon: str = '🎯'
    color: str = '#00d4ff'
