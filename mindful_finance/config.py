"""Configuration management for the analytics package.

This module centralizes the analytics thresholds and the environment
variable overrides.  Thresholds live in :class:`AnalyticsSettings`; every
analytics function accepts an optional ``settings`` argument and falls
back to :data:`DEFAULT_SETTINGS`, so the analytics themselves never read
files.  Callers that want custom thresholds load them once with
:func:`load_settings` and pass the result down.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

# Optional JSON file with threshold overrides
SETTINGS_PATH = os.getenv("MINDFUL_FINANCE_SETTINGS")

LOG_LEVEL = os.getenv("MINDFUL_FINANCE_LOG_LEVEL", "WARNING")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class AnalyticsSettings:
    """Thresholds used by the analytics functions.

    Percent values are on a 0-100 scale; shares and ratios are fractions.
    """

    # Budget compliance tiers
    budget_warning_percent: float = 80.0
    budget_exceeded_percent: float = 100.0

    # 50/30/20 targets as a fraction of income
    rule_ratios: Mapping[str, float] = field(
        default_factory=lambda: {'needs': 0.5, 'wants': 0.3, 'savings': 0.2}
    )

    # Emotional spending insights
    stress_share_percent: float = 25.0
    sad_share_percent: float = 20.0
    weekend_share: float = 0.5
    late_night_hours: Tuple[int, ...] = (23, 0, 1, 2)
    spike_multiplier: float = 2.5
    spike_min_expenses: int = 5

    # Saving hacks
    savings_window_days: int = 30
    round_up_increment: float = 5.0
    hack_thresholds: Mapping[str, float] = field(
        default_factory=lambda: {
            'food': 300.0,
            'entertainment': 100.0,
            'shopping': 150.0,
            'transport': 200.0,
        }
    )
    hack_savings_ratios: Mapping[str, float] = field(
        default_factory=lambda: {
            'food': 0.4,
            'entertainment': 0.5,
            'shopping': 0.7,
            'transport': 0.6,
        }
    )

    # Forecast series
    history_months: int = 6
    projection_months: int = 2


DEFAULT_SETTINGS = AnalyticsSettings()


def _coerce_setting(key: str, value: Any, default: Any) -> Any:
    """Cast an override to the type of its default, merging mappings onto it."""
    if isinstance(default, Mapping):
        if not isinstance(value, dict):
            raise ValueError(f"Setting '{key}' must be an object")
        merged = dict(default)
        for name, item in value.items():
            merged[name] = _coerce_setting(f"{key}.{name}", item, 0.0)
        return merged
    if isinstance(default, tuple):
        if not isinstance(value, list):
            raise ValueError(f"Setting '{key}' must be a list")
        return tuple(_coerce_setting(key, item, 0) for item in value)
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"Setting '{key}' must be a number, got {value!r}")
    try:
        return type(default)(value)
    except ValueError:
        raise ValueError(f"Setting '{key}' must be a number, got {value!r}") from None


def load_settings(path: Optional[Union[str, Path]] = None) -> AnalyticsSettings:
    """Load threshold overrides from a JSON file and merge them onto the defaults.

    Args:
        path: JSON file to read.  Falls back to ``MINDFUL_FINANCE_SETTINGS``;
            when neither is set the defaults are returned unchanged.

    Returns:
        Merged settings.  Mapping fields (``rule_ratios``, ``hack_thresholds``,
        ``hack_savings_ratios``) are merged key by key.

    Raises:
        FileNotFoundError: If the settings file doesn't exist
        ValueError: If the file is not a JSON object, names unknown settings
            or gives a value that is not a number (or list or object of them)

    Example:
        >>> settings = load_settings('settings.json')
        >>> settings.budget_warning_percent
        75.0
    """
    target = path or SETTINGS_PATH
    if not target:
        return DEFAULT_SETTINGS

    target = Path(target)
    if not target.exists():
        raise FileNotFoundError(f"Settings file not found: {target}")

    with target.open('r', encoding='utf-8') as handle:
        data = json.load(handle)
    if not isinstance(data, dict):
        raise ValueError(f"Settings file must contain a JSON object: {target}")

    known = {f.name for f in fields(AnalyticsSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown settings in {target}: {', '.join(unknown)}")

    overrides: Dict[str, Any] = {}
    for key, value in data.items():
        overrides[key] = _coerce_setting(key, value, getattr(DEFAULT_SETTINGS, key))
    return replace(DEFAULT_SETTINGS, **overrides)


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for command-line scripts."""
    name = (level or LOG_LEVEL).upper()
    if not isinstance(logging.getLevelName(name), int):
        raise ValueError(f"Unknown log level '{name}'")
    logging.basicConfig(level=name, format=LOG_FORMAT)
