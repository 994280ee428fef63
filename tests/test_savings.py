from __future__ import annotations

from datetime import date, datetime, time

import numpy as np
import pytest

from mindful_finance.categories import Category, TransactionType
from mindful_finance.config import AnalyticsSettings
from mindful_finance.models import Transaction
from mindful_finance.savings import HackKind, Priority, generate_saving_hacks, round_up_savings

NOW = datetime(2024, 3, 31, 18, 0)


def _tx(amount, category='food', day='2024-03-20', kind='expense'):
    d = date.fromisoformat(day)
    return Transaction(
        id=f"{category}-{day}-{amount}",
        user_id='u1',
        description=category,
        amount=amount,
        category=Category(category),
        type=TransactionType(kind),
        date=d,
        created_at=datetime.combine(d, time(12, 0)),
    )


def test_food_over_threshold_suggests_meal_prep():
    transactions = [_tx(100, day=f"2024-03-{day}") for day in (10, 11, 12, 13)]
    hacks = generate_saving_hacks(transactions, now=NOW)

    assert [h.id for h in hacks] == ['food-savings', 'round-up', 'opportunity-cost']
    food = hacks[0]
    assert food.priority == Priority.HIGH
    assert food.category == HackKind.HABIT
    assert food.potential_savings == pytest.approx(160)
    assert '$400' in food.description
    assert '$160' in food.description
    assert hacks[2].potential_savings == 0
    assert '$4,800' in hacks[2].description


def test_thresholds_are_strict():
    hacks = generate_saving_hacks([_tx(300)], now=NOW)
    assert 'food-savings' not in [h.id for h in hacks]


def test_all_category_hacks_sorted_by_priority():
    transactions = [
        _tx(301, category='food'),
        _tx(101, category='entertainment'),
        _tx(151, category='shopping'),
        _tx(201, category='transport'),
    ]
    hacks = generate_saving_hacks(transactions, now=NOW)

    assert [h.id for h in hacks] == [
        'food-savings',
        'shopping-savings',
        'entertainment-savings',
        'transport-savings',
        'round-up',
        'opportunity-cost',
    ]
    by_id = {h.id: h for h in hacks}
    assert by_id['shopping-savings'].potential_savings == pytest.approx(151 * 0.7)
    assert by_id['entertainment-savings'].potential_savings == pytest.approx(50.5)
    assert by_id['transport-savings'].potential_savings == pytest.approx(120.6)
    assert by_id['round-up'].potential_savings == pytest.approx(16)
    assert [h.priority for h in hacks] == sorted(
        (h.priority for h in hacks), key=lambda p: ['high', 'medium', 'low'].index(p.value)
    )


def test_only_trailing_window_counts():
    transactions = [
        _tx(400, day='2024-03-01'),  # 31 days before today
        _tx(400, day='2024-04-01'),  # after today
        _tx(12, day='2024-03-02'),
    ]
    hacks = generate_saving_hacks(transactions, now=NOW)
    assert [h.id for h in hacks] == ['round-up', 'opportunity-cost']
    assert hacks[0].potential_savings == pytest.approx(3)


def test_window_follows_settings():
    settings = AnalyticsSettings(savings_window_days=60)
    hacks = generate_saving_hacks([_tx(400, day='2024-03-01')], now=NOW, settings=settings)
    assert hacks[0].id == 'food-savings'


def test_no_spending_gives_no_hacks():
    assert generate_saving_hacks([], now=NOW) == []
    assert generate_saving_hacks([_tx(5000, kind='income')], now=NOW) == []


def test_non_food_spending_skips_opportunity_cost():
    hacks = generate_saving_hacks([_tx(42, category='health')], now=NOW)
    assert [h.id for h in hacks] == ['round-up']


def test_hack_limit():
    transactions = [_tx(301, category='food'), _tx(151, category='shopping')]
    hacks = generate_saving_hacks(transactions, now=NOW, limit=2)
    assert [h.id for h in hacks] == ['food-savings', 'shopping-savings']


def test_round_up_savings():
    assert round_up_savings(np.array([12.0, 20.0, 7.5])) == pytest.approx(5.5)
    assert round_up_savings(np.array([])) == 0.0
    assert round_up_savings(np.array([3.0]), increment=10) == pytest.approx(7)
