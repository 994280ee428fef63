"""Top‑level package for Mindful Finance analytics.

This package turns a snapshot of a user's transactions, budgets and
savings goals into the figures shown on the dashboard.  The primary
modules are:

* ``data_processing`` – record parsing, export loading and the shared
  transaction DataFrame
* ``budgets`` – budget compliance and the 50/30/20 rule
* ``forecast`` – run-rate and history-based expense forecasts
* ``emotional`` – mood/spending correlation and emotional-spending insights
* ``savings`` – rule-based saving suggestions
* ``analytics`` – :class:`SpendingAnalytics`, one snapshot evaluated at a
  single point in time

To print a report for an exported ledger from the command line:

```bash
python scripts/insights_report.py export.json
```
"""

from . import data_processing  # noqa: F401  # re-exported for convenience
from .analytics import SpendingAnalytics
from .categories import Category, Mood, TransactionType
from .config import DEFAULT_SETTINGS, AnalyticsSettings, load_settings
from .models import Budget, SavingsGoal, Transaction

__all__ = [
    "data_processing",
    "SpendingAnalytics",
    "Category",
    "Mood",
    "TransactionType",
    "AnalyticsSettings",
    "DEFAULT_SETTINGS",
    "load_settings",
    "Budget",
    "SavingsGoal",
    "Transaction",
]
