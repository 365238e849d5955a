#!/usr/bin/env python3
"""Generate a demo loan book and write it to a JSON-file store.

The book is built in memory, then imported into the target directory
so the files match what an operator session would write.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from microcredit.book import MicrocreditBook
from microcredit.config import LedgerSettings
from microcredit.logging import setup_logging
from microcredit.scenarios import DemoPortfolioScenario
from microcredit.store import JsonFileKeyValueStore

logger = logging.getLogger(__name__)


def main() -> None:
    """Build the demo book and print its report."""
    settings = LedgerSettings.from_env()

    parser = argparse.ArgumentParser(description="Generate a demo microcredit loan book")
    parser.add_argument("--clients", type=int, default=20, help="Number of clients (default: 20)")
    parser.add_argument("--seed", type=int, default=settings.seed or 42, help="Random seed (default: 42)")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=settings.storage.data_dir,
        help="Directory for the JSON store (default: $MICROCREDIT_DATA_DIR or ./data)",
    )
    parser.add_argument("--log-format", choices=["standard", "json"], default="standard")
    args = parser.parse_args()

    setup_logging(settings.log_level, args.log_format, settings.log_file)

    scenario = DemoPortfolioScenario(num_clients=args.clients, seed=args.seed, settings=settings)
    snapshot = scenario.generate().export_database()

    book = MicrocreditBook.open(JsonFileKeyValueStore(args.output_dir), settings)
    book.import_database(snapshot)
    logger.info("Demo book written to %s", args.output_dir)

    report = book.report()
    summary = scenario.get_portfolio_summary()
    dashboard = report.dashboard()

    print("=" * 60)
    print(f"  Demo book  |  clients={args.clients}  seed={args.seed}")
    print("=" * 60)
    for key, value in summary.items():
        print(f"  {key:<22} {value}")
    print(f"  {'due_today':<22} {dashboard.due_today} ({dashboard.amount_due_today})")
    print(f"  {'amount_late':<22} {dashboard.amount_late}")

    print("\n  Top clients:")
    for stats in report.top_clients():
        print(f"    {stats.name:<30} {stats.loan_count} loans  {stats.total_lent}")

    print("\n  Late clients:")
    for stats in report.late_clients():
        risk = book.risk.classify_risk(stats.client_id)
        print(f"    {stats.name:<30} {stats.late_count} late  risk={risk.value}")


if __name__ == "__main__":
    main()
