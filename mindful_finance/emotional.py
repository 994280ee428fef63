"""Mood/spending correlation and emotional-spending pattern detection.

Transactions may carry the mood the user was in when logging them.  This
module aggregates spending by mood, detects behavioural patterns that
often accompany impulse buying (late-night purchases, weekend
concentration, bursts of many purchases on one day) and turns both into
short advisory messages.

"Late night" is judged from each transaction's ``created_at`` hour, not
from its user-chosen calendar ``date``; weekends and purchase bursts use
the calendar date.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

import pandas as pd

from .categories import EMOTIONAL_CATEGORIES, MOOD_COLORS, MOOD_EMOJIS, Category, Mood, category_values
from .config import DEFAULT_SETTINGS, AnalyticsSettings
from .data_processing import TransactionsLike, ensure_frame, expense_rows, total_amount
from .formatting import format_currency, format_percent

WEEKEND_DAYS = (5, 6)  # Saturday, Sunday with Monday=0


class InsightLevel(str, Enum):
    ALERT = 'alert'
    WARNING = 'warning'
    INFO = 'info'


@dataclass(frozen=True)
class MoodSpendingCorrelation:
    mood: Mood
    emoji: str
    color: str
    total_spent: float
    transaction_count: int
    avg_amount: float
    percent_of_total: float


@dataclass(frozen=True)
class SpendingPattern:
    late_night_spending: float
    weekend_spending: float
    weekend_share: float
    frequency_spike: bool
    emotional_categories: Tuple[Category, ...]


@dataclass(frozen=True)
class EmotionalInsight:
    type: InsightLevel
    title: str
    description: str
    icon: str


def calculate_mood_correlations(transactions: TransactionsLike) -> List[MoodSpendingCorrelation]:
    """Aggregate mood-tagged expenses by mood.

    Percentages are of mood-tagged spending only; untagged expenses are
    left out of the denominator.  Results are sorted by total spent,
    largest first, with ties kept in order of first appearance.
    """
    expenses = expense_rows(ensure_frame(transactions))
    tagged = expenses[expenses['mood'].notna()]
    if tagged.empty:
        return []

    tagged_total = total_amount(tagged)
    grouped = tagged.groupby('mood', sort=False)['amount'].agg(['sum', 'count'])

    correlations = []
    for mood_value, row in grouped.iterrows():
        mood = Mood(mood_value)
        total = float(row['sum'])
        count = int(row['count'])
        correlations.append(
            MoodSpendingCorrelation(
                mood=mood,
                emoji=MOOD_EMOJIS[mood],
                color=MOOD_COLORS[mood],
                total_spent=total,
                transaction_count=count,
                avg_amount=total / count if count else 0.0,
                percent_of_total=(total / tagged_total * 100) if tagged_total > 0 else 0.0,
            )
        )
    return sorted(correlations, key=lambda c: c.total_spent, reverse=True)


def detect_late_night_spending(
    transactions: TransactionsLike,
    settings: Optional[AnalyticsSettings] = None,
) -> pd.DataFrame:
    """Return expense rows logged between 23:00 and 02:59."""
    settings = settings or DEFAULT_SETTINGS
    expenses = expense_rows(ensure_frame(transactions))
    return expenses[expenses['hour'].isin(settings.late_night_hours)]


def late_night_total(
    transactions: TransactionsLike,
    settings: Optional[AnalyticsSettings] = None,
) -> float:
    return total_amount(detect_late_night_spending(transactions, settings))


def detect_frequency_spikes(
    transactions: TransactionsLike,
    settings: Optional[AnalyticsSettings] = None,
) -> bool:
    """Flag a day whose purchase count is far above the daily average.

    A spike is a day with more than ``spike_multiplier`` times the mean
    number of expenses per active day.  Fewer than ``spike_min_expenses``
    expenses is treated as insufficient data.
    """
    settings = settings or DEFAULT_SETTINGS
    expenses = expense_rows(ensure_frame(transactions))
    if len(expenses) < settings.spike_min_expenses:
        return False
    counts = expenses.groupby('date').size()
    return bool(counts.max() > counts.mean() * settings.spike_multiplier)


def weekend_spending_total(transactions: TransactionsLike) -> float:
    expenses = expense_rows(ensure_frame(transactions))
    return total_amount(expenses[expenses['weekday'].isin(WEEKEND_DAYS)])


def weekend_spending_share(transactions: TransactionsLike) -> float:
    """Fraction (0-1) of expense spending dated on a Saturday or Sunday."""
    frame = ensure_frame(transactions)
    total = total_amount(expense_rows(frame))
    if total <= 0:
        return 0.0
    return weekend_spending_total(frame) / total


def emotional_categories(transactions: TransactionsLike) -> Tuple[Category, ...]:
    """Distinct shopping / entertainment / food categories with any expense."""
    expenses = expense_rows(ensure_frame(transactions))
    present = expenses.loc[expenses['category'].isin(category_values(EMOTIONAL_CATEGORIES)), 'category']
    return tuple(Category(value) for value in present.unique())


def detect_emotional_spending(
    transactions: TransactionsLike,
    settings: Optional[AnalyticsSettings] = None,
) -> SpendingPattern:
    frame = ensure_frame(transactions)
    return SpendingPattern(
        late_night_spending=late_night_total(frame, settings),
        weekend_spending=weekend_spending_total(frame),
        weekend_share=weekend_spending_share(frame),
        frequency_spike=detect_frequency_spikes(frame, settings),
        emotional_categories=emotional_categories(frame),
    )


def _mood_share(correlations: List[MoodSpendingCorrelation], mood: Mood) -> Optional[float]:
    for correlation in correlations:
        if correlation.mood == mood:
            return correlation.percent_of_total
    return None


def generate_emotional_insights(
    transactions: TransactionsLike,
    settings: Optional[AnalyticsSettings] = None,
    limit: Optional[int] = None,
) -> List[EmotionalInsight]:
    """Turn mood correlations and spending patterns into advisory messages.

    Insights are emitted in a fixed order: stress spending, sad spending,
    late-night purchases, purchase spikes, weekend spending.  When none
    applies a single encouraging message is returned instead.

    Args:
        transactions: Transactions (or a prepared frame) to evaluate
        settings: Threshold overrides
        limit: Keep only the first ``limit`` insights (for compact widgets)
    """
    settings = settings or DEFAULT_SETTINGS
    frame = ensure_frame(transactions)
    correlations = calculate_mood_correlations(frame)
    patterns = detect_emotional_spending(frame, settings)
    insights: List[EmotionalInsight] = []

    stressed = _mood_share(correlations, Mood.STRESSED)
    if stressed is not None and stressed > settings.stress_share_percent:
        insights.append(EmotionalInsight(
            type=InsightLevel.ALERT,
            title='Stress Spending Detected',
            description=(
                f"{format_percent(stressed)} of your spending happens when you're stressed. "
                "Try a 5-minute walk before purchasing."
            ),
            icon=MOOD_EMOJIS[Mood.STRESSED],
        ))

    sad = _mood_share(correlations, Mood.SAD)
    if sad is not None and sad > settings.sad_share_percent:
        insights.append(EmotionalInsight(
            type=InsightLevel.WARNING,
            title='Emotional Comfort Buying',
            description=(
                'You tend to spend more when feeling sad. '
                'Consider calling a friend or journaling instead.'
            ),
            icon=MOOD_EMOJIS[Mood.SAD],
        ))

    if patterns.late_night_spending > 0:
        insights.append(EmotionalInsight(
            type=InsightLevel.INFO,
            title='Late Night Purchases',
            description=(
                f"You've spent {format_currency(patterns.late_night_spending)} on late-night purchases. "
                'Sleep on it: 70% of impulse buys feel unnecessary the next day.'
            ),
            icon='🌙',
        ))

    if patterns.frequency_spike:
        insights.append(EmotionalInsight(
            type=InsightLevel.ALERT,
            title='Spending Spike Detected',
            description=(
                'You had an unusual number of purchases recently. '
                'This could indicate emotional spending.'
            ),
            icon='📈',
        ))

    if patterns.weekend_share > settings.weekend_share:
        insights.append(EmotionalInsight(
            type=InsightLevel.WARNING,
            title='Weekend Spending Alert',
            description=(
                f"Over {format_percent(settings.weekend_share * 100)} of your spending happens on weekends. "
                'Plan free activities to reduce weekend splurges.'
            ),
            icon='📅',
        ))

    if not insights:
        insights.append(EmotionalInsight(
            type=InsightLevel.INFO,
            title='Great Job!',
            description=(
                'No concerning emotional spending patterns detected. '
                'Keep tracking your moods to get better insights.'
            ),
            icon='✨',
        ))

    return insights[:limit] if limit is not None else insights
