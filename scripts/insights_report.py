#!/usr/bin/env python3
"""Print the dashboard report for an exported ledger as JSON."""

from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from mindful_finance import SpendingAnalytics, load_settings
from mindful_finance.config import configure_logging
from mindful_finance.data_processing import load_export
from mindful_finance.report import report_to_dict


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Summarise an exported ledger.')
    parser.add_argument('export', type=Path, help='JSON export or CSV of transactions')
    parser.add_argument('--settings', type=Path, help='JSON file with threshold overrides')
    parser.add_argument('--as-of', help='Evaluate as of this ISO date/time instead of now')
    parser.add_argument('--insights', type=int, default=None, help='Maximum insights to include')
    parser.add_argument('--hacks', type=int, default=None, help='Maximum saving hacks to include')
    parser.add_argument('--lenient', action='store_true', help='Skip invalid records instead of failing')
    parser.add_argument('--output', type=Path, help='Write the report here instead of stdout')
    parser.add_argument('--log-level', default=None, help='Logging level (default from environment)')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        configure_logging(args.log_level)
        settings = load_settings(args.settings)
        export = load_export(args.export, strict=not args.lenient)
        now = datetime.fromisoformat(args.as_of) if args.as_of else None
    except (FileNotFoundError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    analytics = SpendingAnalytics(
        export.transactions, export.budgets, export.goals, now=now, settings=settings
    )
    report = report_to_dict(analytics.dashboard_report(args.insights, args.hacks))
    if export.skipped:
        report['skipped_records'] = export.skipped

    text = json.dumps(report, indent=2, ensure_ascii=False)
    if args.output:
        args.output.write_text(text + '\n', encoding='utf-8')
    else:
        print(text)
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
