#!/usr/bin/env python3
"""
Command-line reports and imports for an investment ledger data file.

Reads the portfolio from a backup-format JSON file, prints engine reports
as tables and applies bulk text imports.
"""

import argparse
import os
import sys
from pathlib import Path

import pandas as pd
from loguru import logger

from ledger.core.constants import (
    DATA_FILE_ENV_VAR,
    DEFAULT_DATA_FILE,
    DEFAULT_NET_WORTH_START_YEAR,
    DEFAULT_PROJECTION_YEARS,
)
from ledger.core.enums import LedgerSource
from ledger.core.exceptions.ledger import LedgerException
from ledger.core.models.portfolio import OperationResult, Portfolio
from ledger.infrastructure.reporting import (
    dividend_groups_frame,
    ledger_frame,
    monthly_dividend_frame,
    net_worth_frame,
    overlay_frame,
    period_statistics_frame,
    projection_frame,
    total_return_frame,
)
from ledger.infrastructure.storage import JsonFileRepository, dumps_backup

IMPORT_KINDS = ("transactions", "dividends", "donations", "prices")


def setup_logging(debug: bool = False):
    """Configure logging with loguru."""
    logger.remove()

    level = "DEBUG" if debug else "INFO"
    logger.add(
        sys.stderr,
        format=(
            "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
        ),
        level=level,
    )


def _emit(frame: pd.DataFrame, csv_path: str | None) -> None:
    if csv_path:
        frame.to_csv(csv_path, index=False)
        logger.info(f"Wrote {len(frame)} rows to {csv_path}")
    elif frame.empty:
        print("(no rows)")
    else:
        print(frame.to_string(index=frame.index.name is not None))


def _report_result(result: OperationResult) -> int:
    for error in result.errors:
        logger.warning(error)
    if not result.success:
        logger.error(result.message)
        return 1
    logger.success(result.message)
    return 0


# Commands


def cmd_summary(portfolio: Portfolio, args: argparse.Namespace) -> int:
    rows = portfolio.total_return_table(
        active_only=not args.all, sort_by=args.sort, descending=args.descending
    )
    _emit(total_return_frame(rows), args.csv)
    return 0


def cmd_stats(portfolio: Portfolio, args: argparse.Namespace) -> int:
    stats = portfolio.period_statistics(year=args.year, month=args.month)
    _emit(period_statistics_frame(stats), args.csv)
    return 0


def cmd_dividends(portfolio: Portfolio, args: argparse.Namespace) -> int:
    groups = portfolio.dividend_groups(year=args.year, held_only=args.held_only)
    frame = monthly_dividend_frame(groups) if args.monthly else dividend_groups_frame(groups)
    _emit(frame, args.csv)
    return 0


def cmd_budget(portfolio: Portfolio, args: argparse.Namespace) -> int:
    ledger = portfolio.budget_ledger()
    _emit(ledger_frame(ledger.filter_source(args.source)), args.csv)
    logger.info(f"Balance: {portfolio.snapshot.settings.format_amount(ledger.final_balance)}")
    return 0


def cmd_project(portfolio: Portfolio, args: argparse.Namespace) -> int:
    if args.strategy_id is None:
        for strategy in portfolio.lab_strategies():
            print(f"{strategy.id}\t{strategy.target_symbol}\t{strategy.name}")
        return 0
    points = portfolio.project_strategy(
        args.strategy_id, start_year=args.start_year, years=args.years
    )
    _emit(projection_frame(points), args.csv)
    return 0


def cmd_net_worth(portfolio: Portfolio, args: argparse.Namespace) -> int:
    if args.overlay:
        _emit(overlay_frame(portfolio.net_worth_overlay(args.start_year)), args.csv)
    else:
        _emit(net_worth_frame(portfolio.net_worth_series(args.start_year)), args.csv)
    return 0


def cmd_import_text(portfolio: Portfolio, args: argparse.Namespace) -> int:
    text = Path(args.file).read_text(encoding="utf-8")
    importer = {
        "transactions": portfolio.import_transactions_text,
        "dividends": portfolio.import_dividends_text,
        "donations": portfolio.import_donations_text,
        "prices": portfolio.import_prices_text,
    }[args.kind]
    return _report_result(importer(text))


def cmd_import_backup(portfolio: Portfolio, args: argparse.Namespace) -> int:
    return _report_result(portfolio.import_backup(Path(args.file).read_bytes()))


def cmd_export(portfolio: Portfolio, args: argparse.Namespace) -> int:
    Path(args.output).write_text(dumps_backup(portfolio.snapshot), encoding="utf-8")
    logger.success(f"Exported portfolio to {args.output}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="investment-ledger",
        description="Reports and imports for an investment ledger data file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  investment-ledger summary --sort total_pnl --descending
  investment-ledger stats --year 2024 --month 6
  investment-ledger import-text transactions trades.txt
  investment-ledger --data backup.json export snapshot.json
        """,
    )
    parser.add_argument(
        "--data",
        default=os.environ.get(DATA_FILE_ENV_VAR, DEFAULT_DATA_FILE),
        help=f"Portfolio JSON file (default: ${DATA_FILE_ENV_VAR} or {DEFAULT_DATA_FILE})",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    def report(name: str, help_text: str) -> argparse.ArgumentParser:
        sub = commands.add_parser(name, help=help_text)
        sub.add_argument("--csv", help="Write the table to this CSV file instead of printing")
        return sub

    summary = report("summary", "Total return per instrument")
    summary.add_argument("--all", action="store_true", help="Include fully sold instruments")
    summary.add_argument("--sort", default="symbol", help="Sort column")
    summary.add_argument("--descending", action="store_true", help="Sort descending")
    summary.set_defaults(handler=cmd_summary)

    stats = report("stats", "Portfolio figures at the end of a period")
    stats.add_argument("--year", type=int, help="Target year (default: all time)")
    stats.add_argument("--month", type=int, help="Month within the year")
    stats.set_defaults(handler=cmd_stats)

    dividends = report("dividends", "Distributions grouped by instrument")
    dividends.add_argument("--year", type=int, help="Only distributions of this year")
    dividends.add_argument("--held-only", action="store_true", help="Only instruments held")
    dividends.add_argument("--monthly", action="store_true", help="Pivot by month and symbol")
    dividends.set_defaults(handler=cmd_dividends)

    budget = report("budget", "Cash ledger with running balance")
    budget.add_argument(
        "--source", choices=[s.value for s in LedgerSource], help="Only rows of this source"
    )
    budget.set_defaults(handler=cmd_budget)

    project = report("project", "Compound growth projection of a strategy")
    project.add_argument("strategy_id", nargs="?", help="Strategy id; omit to list strategies")
    project.add_argument("--start-year", type=int, help="Default: current year")
    project.add_argument("--years", type=int, default=DEFAULT_PROJECTION_YEARS)
    project.set_defaults(handler=cmd_project)

    net_worth = report("net-worth", "Year-end net worth series")
    net_worth.add_argument("--start-year", type=int, default=DEFAULT_NET_WORTH_START_YEAR)
    net_worth.add_argument("--overlay", action="store_true", help="Compare with the baseline")
    net_worth.set_defaults(handler=cmd_net_worth)

    import_text = commands.add_parser("import-text", help="Bulk import records from text lines")
    import_text.add_argument("kind", choices=IMPORT_KINDS)
    import_text.add_argument("file", help="Text file with one record per line")
    import_text.set_defaults(handler=cmd_import_text)

    import_backup = commands.add_parser("import-backup", help="Replace data from a backup file")
    import_backup.add_argument("file", help="Backup JSON file")
    import_backup.set_defaults(handler=cmd_import_backup)

    export = commands.add_parser("export", help="Write a backup file")
    export.add_argument("output", help="Destination JSON file")
    export.set_defaults(handler=cmd_export)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.debug)

    try:
        portfolio = Portfolio(JsonFileRepository(args.data))
        return args.handler(portfolio, args)
    except LedgerException as e:
        logger.error(str(e))
        return 1
    except OSError as e:
        logger.error(f"File error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
