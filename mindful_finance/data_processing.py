"""Record ingestion and transaction frame helpers.

This module is the boundary between the hosted backend's exported
records and the analytics functions.  It contains:

* parsers that turn exported dictionaries into validated records,
  rejecting unknown categories, moods and transaction types;
* :func:`transactions_frame`, which builds the pandas DataFrame every
  analytics function works on, plus the row filters shared by them;
* small pure helpers for the transaction and budget screens
  (searching, budget upserts);
* :func:`load_export` for reading JSON or CSV exports from disk.

Nothing in the analytics modules performs I/O; only :func:`load_export`
touches the filesystem.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Type, TypeVar, Union

import pandas as pd

from .categories import Category, Mood, TransactionType
from .models import Budget, SavingsGoal, Transaction

logger = logging.getLogger(__name__)

FRAME_COLUMNS = [
    'id', 'user_id', 'description', 'amount', 'category', 'type', 'mood', 'date', 'created_at'
]
DERIVED_COLUMNS = ['year', 'month', 'weekday', 'hour']

TransactionsLike = Union[pd.DataFrame, Iterable[Transaction]]

E = TypeVar('E', Category, Mood, TransactionType)


# ---------------------------------------------------------------------------
# Record parsing
# ---------------------------------------------------------------------------


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _require(record: Mapping[str, Any], key: str) -> Any:
    value = record.get(key)
    if _is_missing(value):
        raise ValueError(f"Missing required field '{key}'")
    return value


def _text(record: Mapping[str, Any], key: str, default: str = '') -> str:
    value = record.get(key)
    return default if _is_missing(value) else str(value)


def _parse_enum(enum_cls: Type[E], value: Any, field_name: str) -> E:
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        allowed = ', '.join(member.value for member in enum_cls)
        raise ValueError(f"Unknown {field_name} '{value}' (expected one of: {allowed})") from None


def _parse_amount(value: Any, field_name: str = 'amount') -> float:
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Field '{field_name}' must be numeric, got {value!r}") from None
    if amount != amount:  # NaN
        raise ValueError(f"Field '{field_name}' must be numeric, got {value!r}")
    return amount


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        raise ValueError(f"Invalid date {value!r}, expected YYYY-MM-DD") from None


def to_local_naive(ts: datetime) -> datetime:
    """Convert an aware timestamp to naive local time; naive values pass through."""
    if ts.tzinfo is None:
        return ts
    return ts.astimezone().replace(tzinfo=None)


def as_date(now: Optional[Union[date, datetime]] = None) -> date:
    """Resolve an evaluation time to the local calendar date (today when ``None``)."""
    if now is None:
        return datetime.now().date()
    if isinstance(now, datetime):
        return to_local_naive(now).date()
    return now


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, pd.Timestamp):
        value = value.to_pydatetime()
    if isinstance(value, datetime):
        return to_local_naive(value)
    text = str(value).strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValueError(f"Invalid timestamp {value!r}, expected ISO 8601") from None
    return to_local_naive(parsed)


def parse_transaction(record: Mapping[str, Any]) -> Transaction:
    """Build a :class:`Transaction` from an exported record.

    Amounts are stored as magnitudes, so negative exports are flipped.
    Timezone-aware ``created_at`` values are converted to local time.

    Raises:
        ValueError: If a required field is missing or a category, mood or
            type is outside the fixed enumerations.

    Example:
        >>> t = parse_transaction({
        ...     'amount': '12.50', 'category': 'food', 'type': 'expense',
        ...     'date': '2024-03-01', 'created_at': '2024-03-01T12:30:00',
        ... })
        >>> t.amount, t.category
        (12.5, <Category.FOOD: 'food'>)
    """
    mood_value = record.get('mood')
    return Transaction(
        id=_text(record, 'id'),
        user_id=_text(record, 'user_id'),
        description=_text(record, 'description'),
        amount=abs(_parse_amount(_require(record, 'amount'))),
        category=_parse_enum(Category, _require(record, 'category'), 'category'),
        type=_parse_enum(TransactionType, _require(record, 'type'), 'transaction type'),
        date=_parse_date(_require(record, 'date')),
        created_at=_parse_timestamp(_require(record, 'created_at')),
        mood=None if _is_missing(mood_value) else _parse_enum(Mood, mood_value, 'mood'),
    )


def parse_budget(record: Mapping[str, Any]) -> Budget:
    """Build a :class:`Budget` from an exported record.

    Raises:
        ValueError: If a field is missing, the category is unknown or the
            month is outside 1-12.
    """
    month = int(_parse_amount(_require(record, 'month'), 'month'))
    if not 1 <= month <= 12:
        raise ValueError(f"Budget month must be between 1 and 12, got {month}")
    return Budget(
        id=_text(record, 'id'),
        user_id=_text(record, 'user_id'),
        category=_parse_enum(Category, _require(record, 'category'), 'category'),
        amount=_parse_amount(_require(record, 'amount')),
        month=month,
        year=int(_parse_amount(_require(record, 'year'), 'year')),
    )


def parse_goal(record: Mapping[str, Any]) -> SavingsGoal:
    """Build a :class:`SavingsGoal`, clamping progress to ``[0, target]``."""
    target = _parse_amount(_require(record, 'target_amount'), 'target_amount')
    current = record.get('current_amount')
    current_amount = 0.0 if _is_missing(current) else _parse_amount(current, 'current_amount')
    deadline = record.get('deadline')
    return SavingsGoal(
        id=_text(record, 'id'),
        user_id=_text(record, 'user_id'),
        name=str(_require(record, 'name')),
        target_amount=target,
        current_amount=min(max(current_amount, 0.0), max(target, 0.0)),
        deadline=None if _is_missing(deadline) else _parse_date(deadline),
        icon=_text(record, 'icon', '🎯'),
        color=_text(record, 'color', '#00d4ff'),
    )


# ---------------------------------------------------------------------------
# Transaction frames
# ---------------------------------------------------------------------------


def transactions_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Build the analysis DataFrame for a collection of transactions.

    Columns mirror :class:`Transaction` with enum members stored as their
    string values, plus ``year``, ``month``, ``weekday`` (Monday=0) taken
    from ``date`` and ``hour`` taken from ``created_at``.
    """
    rows = [
        {
            'id': t.id,
            'user_id': t.user_id,
            'description': t.description,
            'amount': float(t.amount),
            'category': Category(t.category).value,
            'type': TransactionType(t.type).value,
            'mood': Mood(t.mood).value if t.mood is not None else None,
            'date': pd.Timestamp(t.date),
            'created_at': pd.Timestamp(to_local_naive(t.created_at)),
        }
        for t in transactions
    ]
    return _prepare_frame(pd.DataFrame(rows, columns=FRAME_COLUMNS))


def _calendar_day(value: Any) -> pd.Timestamp:
    return pd.NaT if _is_missing(value) else pd.Timestamp(_parse_date(value))


def _local_timestamp(value: Any) -> pd.Timestamp:
    return pd.NaT if _is_missing(value) else pd.Timestamp(_parse_timestamp(value))


def _prepare_frame(frame: pd.DataFrame) -> pd.DataFrame:
    # Same conversions as the record parsers, so raw frames and records
    # agree on calendar day and local hour.
    frame['amount'] = frame['amount'].astype(float)
    frame['date'] = pd.to_datetime(frame['date'].map(_calendar_day))
    frame['created_at'] = pd.to_datetime(frame['created_at'].map(_local_timestamp))
    frame['year'] = frame['date'].dt.year
    frame['month'] = frame['date'].dt.month
    frame['weekday'] = frame['date'].dt.dayofweek
    frame['hour'] = frame['created_at'].dt.hour
    return frame


def ensure_frame(transactions: TransactionsLike) -> pd.DataFrame:
    """Return a prepared transaction frame for records or an existing frame."""
    if isinstance(transactions, pd.DataFrame):
        if all(column in transactions.columns for column in DERIVED_COLUMNS):
            return transactions
        return _prepare_frame(transactions[FRAME_COLUMNS].copy())
    return transactions_frame(transactions)


def expense_rows(frame: pd.DataFrame) -> pd.DataFrame:
    return frame[frame['type'] == TransactionType.EXPENSE.value]


def income_rows(frame: pd.DataFrame) -> pd.DataFrame:
    return frame[frame['type'] == TransactionType.INCOME.value]


def month_rows(frame: pd.DataFrame, year: int, month: int) -> pd.DataFrame:
    """Rows whose calendar date falls in the given month (1-indexed)."""
    return frame[(frame['year'] == year) & (frame['month'] == month)]


def total_amount(frame: pd.DataFrame) -> float:
    """Sum of the ``amount`` column, ``0.0`` for an empty frame."""
    if frame.empty:
        return 0.0
    return float(frame['amount'].sum())


# ---------------------------------------------------------------------------
# Screen helpers
# ---------------------------------------------------------------------------


def filter_transactions(
    transactions: Iterable[Transaction],
    search: str = '',
    category: Optional[Union[Category, str]] = None,
    transaction_type: Optional[Union[TransactionType, str]] = None,
) -> List[Transaction]:
    """Filter transactions by description text, category and type.

    ``None`` (or ``'all'``) disables the category and type filters.  The
    description search is case-insensitive.
    """
    needle = search.strip().lower()
    wanted_category = None if category in (None, 'all') else Category(category)
    wanted_type = None if transaction_type in (None, 'all') else TransactionType(transaction_type)
    return [
        t for t in transactions
        if needle in t.description.lower()
        and (wanted_category is None or t.category == wanted_category)
        and (wanted_type is None or t.type == wanted_type)
    ]


def upsert_budget(budgets: Iterable[Budget], budget: Budget) -> Tuple[Budget, ...]:
    """Insert ``budget`` or replace the one with the same user, category and period."""
    existing = tuple(budgets)
    replaced = False
    result: List[Budget] = []
    for current in existing:
        if current.period_key == budget.period_key:
            if not replaced:
                result.append(budget)
                replaced = True
            continue
        result.append(current)
    if not replaced:
        result.append(budget)
    return tuple(result)


def budgets_for_period(budgets: Iterable[Budget], month: int, year: int) -> List[Budget]:
    return [b for b in budgets if b.month == month and b.year == year]


# ---------------------------------------------------------------------------
# File loading
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LedgerExport:
    transactions: Tuple[Transaction, ...] = ()
    budgets: Tuple[Budget, ...] = ()
    goals: Tuple[SavingsGoal, ...] = ()
    skipped: Dict[str, int] = field(default_factory=dict)


def _record_list(data: Mapping[str, Any], key: str) -> List[Any]:
    records = data.get(key, [])
    if not isinstance(records, list):
        raise ValueError(f"Export field '{key}' must be a list, got {type(records).__name__}")
    return records


def _parse_many(records: Iterable[Mapping[str, Any]], parser, kind: str, strict: bool) -> Tuple[list, int]:
    parsed = []
    skipped = 0
    for index, record in enumerate(records):
        try:
            if not isinstance(record, Mapping):
                raise ValueError(f"expected an object, got {type(record).__name__}")
            parsed.append(parser(record))
        except ValueError as exc:
            if strict:
                raise ValueError(f"Invalid {kind} record at index {index}: {exc}") from exc
            logger.warning("Skipping %s record %d: %s", kind, index, exc)
            skipped += 1
    return parsed, skipped


def load_export(path: Union[str, Path], *, strict: bool = True) -> LedgerExport:
    """Load records exported from the hosted backend.

    ``.json`` files hold an object with ``transactions``, ``budgets`` and
    ``goals`` lists (all optional).  ``.csv`` files hold transactions only,
    one per row, using the exported field names as headers.

    Args:
        path: Export file to read
        strict: Raise on the first invalid record instead of skipping it

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: For unsupported extensions, malformed documents or
            (when ``strict``) invalid records
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Export file not found: {path}")

    ext = path.suffix.lower()
    if ext == '.json':
        with path.open('r', encoding='utf-8') as handle:
            data = json.load(handle)
        if not isinstance(data, dict):
            raise ValueError(f"Export must be a JSON object, got {type(data).__name__}")
        raw_transactions = _record_list(data, 'transactions')
        raw_budgets = _record_list(data, 'budgets')
        raw_goals = _record_list(data, 'goals')
    elif ext == '.csv':
        raw_transactions = pd.read_csv(path).to_dict('records')
        raw_budgets, raw_goals = [], []
    else:
        raise ValueError(f"Unsupported file extension '{ext}'.")

    transactions, skipped_tx = _parse_many(raw_transactions, parse_transaction, 'transaction', strict)
    budgets, skipped_budgets = _parse_many(raw_budgets, parse_budget, 'budget', strict)
    goals, skipped_goals = _parse_many(raw_goals, parse_goal, 'goal', strict)

    logger.info(
        "Loaded %d transactions, %d budgets, %d goals from %s",
        len(transactions), len(budgets), len(goals), path,
    )
    skipped = {
        kind: count
        for kind, count in (
            ('transactions', skipped_tx), ('budgets', skipped_budgets), ('goals', skipped_goals)
        )
        if count
    }
    return LedgerExport(tuple(transactions), tuple(budgets), tuple(goals), skipped)
