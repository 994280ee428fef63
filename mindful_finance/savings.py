"""Rule-based saving suggestions.

Suggestions look at expenses from the trailing savings window (30
calendar days ending today by default).  Each watched category has a
spending threshold; crossing it yields a fixed-template suggestion whose
potential savings are a fixed share of the category total.  Two general
suggestions (round-up savings and the opportunity cost of food spending)
are added whenever there is spending to base them on.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Dict, List, Optional, Union

import numpy as np

from .categories import Category
from .config import DEFAULT_SETTINGS, AnalyticsSettings
from .data_processing import TransactionsLike, as_date, ensure_frame, expense_rows, total_amount
from .formatting import format_currency


class Priority(str, Enum):
    HIGH = 'high'
    MEDIUM = 'medium'
    LOW = 'low'


class HackKind(str, Enum):
    SUBSCRIPTION = 'subscription'
    HABIT = 'habit'
    ALTERNATIVE = 'alternative'
    AUTOMATION = 'automation'
    GENERAL = 'general'


PRIORITY_ORDER: Dict[Priority, int] = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


@dataclass(frozen=True)
class SavingHack:
    id: str
    title: str
    description: str
    potential_savings: float
    icon: str
    category: HackKind
    priority: Priority


@dataclass(frozen=True)
class CategoryHackRule:
    category: Category
    id: str
    title: str
    template: str  # formatted with ``total`` and ``savings``
    icon: str
    kind: HackKind
    priority: Priority


CATEGORY_HACK_RULES = (
    CategoryHackRule(
        category=Category.FOOD,
        id='food-savings',
        title='Reduce Food Spending',
        template=(
            'You spent {total} on food this month. '
            'Meal prepping could save you up to {savings}/month.'
        ),
        icon='🍳',
        kind=HackKind.HABIT,
        priority=Priority.HIGH,
    ),
    CategoryHackRule(
        category=Category.ENTERTAINMENT,
        id='entertainment-savings',
        title='Entertainment Alternatives',
        template=(
            '{total} on entertainment this month. '
            'Free alternatives: parks, libraries, community events.'
        ),
        icon='🎭',
        kind=HackKind.ALTERNATIVE,
        priority=Priority.MEDIUM,
    ),
    CategoryHackRule(
        category=Category.SHOPPING,
        id='shopping-savings',
        title='30-Day Wishlist Rule',
        template=(
            'Add non-essential items to a wishlist and wait 30 days. '
            '70% of items become undesirable after waiting.'
        ),
        icon='📝',
        kind=HackKind.HABIT,
        priority=Priority.HIGH,
    ),
    CategoryHackRule(
        category=Category.TRANSPORT,
        id='transport-savings',
        title='Consider Public Transport',
        template=(
            'Spending {total}/month on transport. '
            'Public transit could save you up to 60%.'
        ),
        icon='🚌',
        kind=HackKind.ALTERNATIVE,
        priority=Priority.MEDIUM,
    ),
)


def round_up_savings(amounts: np.ndarray, increment: float = 5.0) -> float:
    """Total saved by rounding each amount up to the next ``increment``.

    Example:
        >>> round_up_savings(np.array([12.0, 20.0, 7.5]))
        5.5
    """
    if len(amounts) == 0:
        return 0.0
    rounded = np.ceil(amounts / increment) * increment
    return float(np.sum(rounded - amounts))


def generate_saving_hacks(
    transactions: TransactionsLike,
    now: Optional[Union[date, datetime]] = None,
    settings: Optional[AnalyticsSettings] = None,
    limit: Optional[int] = None,
) -> List[SavingHack]:
    """Suggest ways to save based on the trailing window's category spending.

    Returns:
        Suggestions sorted high, medium, low priority; within a tier the
        generation order (food, entertainment, shopping, transport,
        round-up, opportunity cost) is kept.
    """
    settings = settings or DEFAULT_SETTINGS
    today = as_date(now)
    window_start = today - timedelta(days=settings.savings_window_days - 1)

    expenses = expense_rows(ensure_frame(transactions))
    dates = expenses['date'].dt.date
    recent = expenses[(dates >= window_start) & (dates <= today)]
    category_totals = recent.groupby('category')['amount'].sum()

    hacks: List[SavingHack] = []
    for rule in CATEGORY_HACK_RULES:
        key = rule.category.value
        total = float(category_totals.get(key, 0.0))
        if total <= settings.hack_thresholds[key]:
            continue
        savings = total * settings.hack_savings_ratios[key]
        hacks.append(SavingHack(
            id=rule.id,
            title=rule.title,
            description=rule.template.format(
                total=format_currency(total, decimals=0),
                savings=format_currency(savings, decimals=0),
            ),
            potential_savings=savings,
            icon=rule.icon,
            category=rule.kind,
            priority=rule.priority,
        ))

    if total_amount(recent) > 0:
        round_up = round_up_savings(recent['amount'].to_numpy(dtype=float), settings.round_up_increment)
        hacks.append(SavingHack(
            id='round-up',
            title='Round-Up Savings',
            description=(
                f"Round every purchase to the nearest {format_currency(settings.round_up_increment, decimals=0)} "
                f"and save the difference. You could save {format_currency(round_up, decimals=0)}/month!"
            ),
            potential_savings=round_up,
            icon='🔄',
            category=HackKind.AUTOMATION,
            priority=Priority.LOW,
        ))

    food_total = float(category_totals.get(Category.FOOD.value, 0.0))
    if food_total > 0:
        hacks.append(SavingHack(
            id='opportunity-cost',
            title='Opportunity Cost',
            description=(
                f"Your food spending equals {format_currency(food_total * 12, decimals=0)}/year. "
                "That's a vacation or emergency fund!"
            ),
            potential_savings=0.0,
            icon='✈️',
            category=HackKind.GENERAL,
            priority=Priority.LOW,
        ))

    ordered = sorted(hacks, key=lambda hack: PRIORITY_ORDER[hack.priority])
    return ordered[:limit] if limit is not None else ordered
