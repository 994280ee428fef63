"""Unit tests for mindful_finance.data_processing.

These tests cover record parsing at the export boundary, the shared
transaction frame and the small helpers used by the transaction and
budget screens.
"""

from __future__ import annotations

import json
from datetime import date, datetime, timezone

import pandas as pd
import pytest

from mindful_finance import data_processing as dp
from mindful_finance.categories import Category, Mood, TransactionType
from mindful_finance.models import Budget, Transaction


def _record(**overrides):
    record = {
        'id': 't1',
        'user_id': 'u1',
        'description': 'Groceries',
        'amount': 42.5,
        'category': 'food',
        'type': 'expense',
        'mood': 'happy',
        'date': '2024-03-02',
        'created_at': '2024-03-02T23:15:00',
    }
    record.update(overrides)
    return record


def test_parse_transaction_builds_record() -> None:
    t = dp.parse_transaction(_record())
    assert t.amount == 42.5
    assert t.category == Category.FOOD
    assert t.type == TransactionType.EXPENSE
    assert t.mood == Mood.HAPPY
    assert t.date == date(2024, 3, 2)
    assert t.created_at == datetime(2024, 3, 2, 23, 15)
    assert t.is_expense


def test_parse_transaction_normalises_values() -> None:
    t = dp.parse_transaction(_record(amount='-12.50', category=' Food ', type='INCOME', mood=''))
    assert t.amount == 12.5
    assert t.category == Category.FOOD
    assert t.type == TransactionType.INCOME
    assert t.mood is None


def test_parse_transaction_converts_aware_timestamps() -> None:
    t = dp.parse_transaction(_record(created_at='2024-03-02T10:00:00Z'))
    assert t.created_at.tzinfo is None


@pytest.mark.parametrize(
    'overrides, message',
    [
        ({'category': 'groceries'}, 'Unknown category'),
        ({'mood': 'bored'}, 'Unknown mood'),
        ({'type': 'transfer'}, 'Unknown transaction type'),
        ({'amount': 'twelve'}, "Field 'amount' must be numeric"),
        ({'amount': None}, "Missing required field 'amount'"),
        ({'created_at': None}, "Missing required field 'created_at'"),
        ({'date': '03/02/2024'}, 'Invalid date'),
    ],
)
def test_parse_transaction_rejects_invalid_records(overrides, message) -> None:
    with pytest.raises(ValueError, match=message):
        dp.parse_transaction(_record(**overrides))


def test_parse_budget_validates_month() -> None:
    budget = dp.parse_budget({'category': 'food', 'amount': '120', 'month': 3, 'year': 2024})
    assert budget.amount == 120.0
    assert budget.month == 3

    with pytest.raises(ValueError, match='between 1 and 12'):
        dp.parse_budget({'category': 'food', 'amount': 120, 'month': 13, 'year': 2024})


def test_parse_goal_clamps_progress() -> None:
    goal = dp.parse_goal({'name': 'Trip', 'target_amount': 500, 'current_amount': 650})
    assert goal.current_amount == 500
    assert goal.icon == '🎯'

    goal = dp.parse_goal({'name': 'Trip', 'target_amount': 500, 'current_amount': -5, 'deadline': '2024-12-31'})
    assert goal.current_amount == 0
    assert goal.deadline == date(2024, 12, 31)


def test_transactions_frame_columns() -> None:
    frame = dp.transactions_frame([dp.parse_transaction(_record())])
    assert list(frame.columns) == dp.FRAME_COLUMNS + dp.DERIVED_COLUMNS
    row = frame.iloc[0]
    assert row['category'] == 'food'
    assert row['mood'] == 'happy'
    assert row['weekday'] == 5  # Saturday
    assert row['hour'] == 23
    assert row['year'] == 2024 and row['month'] == 3


def test_empty_frame_has_all_columns() -> None:
    frame = dp.transactions_frame([])
    assert frame.empty
    assert list(frame.columns) == dp.FRAME_COLUMNS + dp.DERIVED_COLUMNS
    assert dp.total_amount(frame) == 0.0


def test_ensure_frame_reuses_prepared_frames() -> None:
    frame = dp.transactions_frame([dp.parse_transaction(_record())])
    assert dp.ensure_frame(frame) is frame


def test_ensure_frame_prepares_raw_frames() -> None:
    raw = pd.DataFrame([{column: _record().get(column) for column in dp.FRAME_COLUMNS}])
    prepared = dp.ensure_frame(raw)
    assert prepared is not raw
    assert prepared.loc[0, 'hour'] == 23
    assert 'hour' not in raw.columns


def _sample_transactions():
    return [
        dp.parse_transaction(_record(id='1', description='Coffee shop', category='food')),
        dp.parse_transaction(_record(id='2', description='Monthly rent', category='housing')),
        dp.parse_transaction(_record(id='3', description='Salary', category='other', type='income')),
    ]


def test_filter_transactions() -> None:
    transactions = _sample_transactions()
    assert [t.id for t in dp.filter_transactions(transactions, search='COFFEE')] == ['1']
    assert [t.id for t in dp.filter_transactions(transactions, category='housing')] == ['2']
    assert [t.id for t in dp.filter_transactions(transactions, transaction_type=TransactionType.INCOME)] == ['3']
    assert len(dp.filter_transactions(transactions, category='all', transaction_type='all')) == 3


def test_upsert_budget_replaces_same_period() -> None:
    food = Budget(id='b1', user_id='u1', category=Category.FOOD, amount=100, month=3, year=2024)
    rent = Budget(id='b2', user_id='u1', category=Category.HOUSING, amount=900, month=3, year=2024)
    updated = dp.upsert_budget((food, rent), Budget(id='b3', user_id='u1', category=Category.FOOD, amount=150, month=3, year=2024))
    assert [b.id for b in updated] == ['b3', 'b2']

    april = Budget(id='b4', user_id='u1', category=Category.FOOD, amount=80, month=4, year=2024)
    appended = dp.upsert_budget(updated, april)
    assert [b.id for b in appended] == ['b3', 'b2', 'b4']
    assert [b.id for b in dp.budgets_for_period(appended, 4, 2024)] == ['b4']


def test_load_export_json(tmp_path) -> None:
    path = tmp_path / 'export.json'
    path.write_text(json.dumps({
        'transactions': [_record(), _record(id='t2', amount=10, mood=None)],
        'budgets': [{'id': 'b1', 'category': 'food', 'amount': 200, 'month': 3, 'year': 2024}],
        'goals': [{'id': 'g1', 'name': 'Trip', 'target_amount': 1000, 'current_amount': 250}],
    }))
    export = dp.load_export(path)
    assert len(export.transactions) == 2
    assert export.transactions[1].mood is None
    assert export.budgets[0].category == Category.FOOD
    assert export.goals[0].current_amount == 250
    assert export.skipped == {}


def test_load_export_csv(tmp_path) -> None:
    path = tmp_path / 'transactions.csv'
    pd.DataFrame([_record(), _record(id='t2', mood=None, description=None)]).to_csv(path, index=False)
    export = dp.load_export(path)
    assert [t.id for t in export.transactions] == ['t1', 't2']
    assert export.transactions[1].mood is None
    assert export.transactions[1].description == ''
    assert export.budgets == ()


def test_load_export_strict_reports_index(tmp_path) -> None:
    path = tmp_path / 'export.json'
    path.write_text(json.dumps({'transactions': [_record(), _record(category='pets')]}))
    with pytest.raises(ValueError, match='Invalid transaction record at index 1'):
        dp.load_export(path)


def test_load_export_lenient_skips_invalid(tmp_path) -> None:
    path = tmp_path / 'export.json'
    path.write_text(json.dumps({
        'transactions': [_record(), _record(category='pets')],
        'budgets': [{'category': 'food', 'amount': 1, 'month': 0, 'year': 2024}],
    }))
    export = dp.load_export(path, strict=False)
    assert len(export.transactions) == 1
    assert export.skipped == {'transactions': 1, 'budgets': 1}


def test_load_export_errors(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        dp.load_export(tmp_path / 'missing.json')

    path = tmp_path / 'export.txt'
    path.write_text('')
    with pytest.raises(ValueError, match='Unsupported file extension'):
        dp.load_export(path)

    path = tmp_path / 'list.json'
    path.write_text('[]')
    with pytest.raises(ValueError, match='JSON object'):
        dp.load_export(path)


def test_as_date_handles_dates_and_datetimes() -> None:
    assert dp.as_date(date(2024, 3, 1)) == date(2024, 3, 1)
    assert dp.as_date(datetime(2024, 3, 1, 23, 59)) == date(2024, 3, 1)
    assert isinstance(dp.as_date(), date)


def test_raw_frames_and_records_share_local_hour() -> None:
    record = _record(created_at='2024-03-04T23:30:00+00:00', date='2024-03-04')
    from_records = dp.transactions_frame([dp.parse_transaction(record)])
    raw = pd.DataFrame([{column: record.get(column) for column in dp.FRAME_COLUMNS}])
    from_raw = dp.ensure_frame(raw)

    expected = dp.to_local_naive(datetime(2024, 3, 4, 23, 30, tzinfo=timezone.utc)).hour
    assert from_records['hour'].tolist() == [expected]
    assert from_raw['hour'].tolist() == [expected]
    assert from_raw['created_at'].dt.tz is None
    assert from_raw['date'].tolist() == from_records['date'].tolist()


def test_raw_frame_dates_ignore_time_of_day() -> None:
    raw = pd.DataFrame([{column: _record(date='2024-03-02T23:59:00Z').get(column) for column in dp.FRAME_COLUMNS}])
    prepared = dp.ensure_frame(raw)
    assert prepared.loc[0, 'date'] == pd.Timestamp('2024-03-02')
    assert prepared.loc[0, 'weekday'] == 5


def test_load_export_rejects_non_list_sections(tmp_path) -> None:
    path = tmp_path / 'export.json'
    path.write_text(json.dumps({'transactions': None}))
    with pytest.raises(ValueError, match="'transactions' must be a list"):
        dp.load_export(path, strict=False)


def test_load_export_non_object_records(tmp_path) -> None:
    path = tmp_path / 'export.json'
    path.write_text(json.dumps({'transactions': [_record(), 'oops', 7]}))

    with pytest.raises(ValueError, match='index 1: expected an object, got str'):
        dp.load_export(path)

    export = dp.load_export(path, strict=False)
    assert len(export.transactions) == 1
    assert export.skipped == {'transactions': 2}
