"""Category, mood and transaction-type enumerations with display metadata.

Every consumer in the package looks categories and moods up through the
tables below, so each table must stay exhaustive over its enumeration.
The 50/30/20 bucket sets and the "emotional" category set also live here
because budgets, insights and saving hacks all need the same grouping.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Tuple


class Category(str, Enum):
    FOOD = 'food'
    HOUSING = 'housing'
    TRANSPORT = 'transport'
    ENTERTAINMENT = 'entertainment'
    SHOPPING = 'shopping'
    UTILITIES = 'utilities'
    HEALTH = 'health'
    EDUCATION = 'education'
    SAVINGS = 'savings'
    OTHER = 'other'


class Mood(str, Enum):
    HAPPY = 'happy'
    SAD = 'sad'
    STRESSED = 'stressed'
    NEUTRAL = 'neutral'
    EXCITED = 'excited'
    ANGRY = 'angry'
    ANXIOUS = 'anxious'


class TransactionType(str, Enum):
    INCOME = 'income'
    EXPENSE = 'expense'


CATEGORY_ICONS: Dict[Category, str] = {
    Category.FOOD: '🍔',
    Category.HOUSING: '🏠',
    Category.TRANSPORT: '🚗',
    Category.ENTERTAINMENT: '🎮',
    Category.SHOPPING: '🛒',
    Category.UTILITIES: '💡',
    Category.HEALTH: '🏥',
    Category.EDUCATION: '📚',
    Category.SAVINGS: '💰',
    Category.OTHER: '📌',
}

CATEGORY_COLORS: Dict[Category, str] = {
    Category.FOOD: '#00d4ff',
    Category.HOUSING: '#a855f7',
    Category.TRANSPORT: '#3b82f6',
    Category.ENTERTAINMENT: '#d946ef',
    Category.SHOPPING: '#f97316',
    Category.UTILITIES: '#eab308',
    Category.HEALTH: '#22c55e',
    Category.EDUCATION: '#06b6d4',
    Category.SAVINGS: '#10b981',
    Category.OTHER: '#6b7280',
}

MOOD_EMOJIS: Dict[Mood, str] = {
    Mood.HAPPY: '😊',
    Mood.SAD: '😢',
    Mood.STRESSED: '😰',
    Mood.NEUTRAL: '😐',
    Mood.EXCITED: '🎉',
    Mood.ANGRY: '😡',
    Mood.ANXIOUS: '😟',
}

MOOD_COLORS: Dict[Mood, str] = {
    Mood.HAPPY: '#4ade80',
    Mood.SAD: '#60a5fa',
    Mood.STRESSED: '#f87171',
    Mood.NEUTRAL: '#a78bfa',
    Mood.EXCITED: '#fbbf24',
    Mood.ANGRY: '#ef4444',
    Mood.ANXIOUS: '#fb923c',
}

# 50/30/20 groupings; together they cover every Category exactly once.
NEEDS_CATEGORIES: Tuple[Category, ...] = (
    Category.HOUSING,
    Category.UTILITIES,
    Category.TRANSPORT,
    Category.HEALTH,
)
WANTS_CATEGORIES: Tuple[Category, ...] = (
    Category.FOOD,
    Category.ENTERTAINMENT,
    Category.SHOPPING,
    Category.EDUCATION,
    Category.OTHER,
)
SAVINGS_CATEGORIES: Tuple[Category, ...] = (Category.SAVINGS,)

BUDGET_BUCKETS: Dict[str, Tuple[Category, ...]] = {
    'needs': NEEDS_CATEGORIES,
    'wants': WANTS_CATEGORIES,
    'savings': SAVINGS_CATEGORIES,
}

# Non-essential categories watched for emotional spending.
EMOTIONAL_CATEGORIES: Tuple[Category, ...] = (
    Category.SHOPPING,
    Category.ENTERTAINMENT,
    Category.FOOD,
)


def category_values(categories: Tuple[Category, ...]) -> list[str]:
    """Return the raw string values used in transaction frames."""
    return [category.value for category in categories]


def bucket_for(category: Category | str) -> Optional[str]:
    """Return the 50/30/20 bucket name for a category.

    Example:
        >>> bucket_for('food')
        'wants'
        >>> bucket_for(Category.HOUSING)
        'needs'
    """
    category = Category(category)
    for bucket, members in BUDGET_BUCKETS.items():
        if category in members:
            return bucket
    return None


def category_label(category: Category | str) -> str:
    """Human readable label with icon, e.g. ``'🍔 Food'``."""
    category = Category(category)
    return f"{CATEGORY_ICONS[category]} {category.value.capitalize()}"
