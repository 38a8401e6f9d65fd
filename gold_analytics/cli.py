"""
Command Line Interface

Usage:
    gold-analytics export [--format csv] [--output ./data/reports] [--as-of 2014-06-15]
    gold-analytics metrics
    gold-analytics validate

Every command loads the Gold Layer once from the configured warehouse
(override with --database-url).
"""

import argparse
import asyncio
import json
import sys
from datetime import date
from typing import List, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError

from gold_analytics import __version__
from gold_analytics.analytics.exploration import DataExplorer
from gold_analytics.analytics.gold_layer import GoldLayer
from gold_analytics.config.logging import configure_logging
from gold_analytics.database.connection import close_database, get_db, init_database
from gold_analytics.database.repository import GoldRepository
from gold_analytics.quality.validators import ValidationStatus, overall_status, validate_gold_layer
from gold_analytics.reports.exporter import SUPPORTED_FORMATS, ReportExporter

logger = structlog.get_logger(__name__)


async def load_gold_layer(database_url: Optional[str] = None) -> GoldLayer:
    """Open the warehouse, load the three Gold Layer tables and close it again"""
    await init_database(database_url)
    try:
        async with get_db() as db:
            return await GoldRepository(db).load()
    finally:
        await close_database()


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date (expected YYYY-MM-DD): {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gold-analytics",
        description="Analytics and reporting views over the Gold Layer",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--database-url", help="Async SQLAlchemy URL (default: from environment)")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
    parser.add_argument("--as-of", type=_parse_date, help="Reference date for ages and recency (default: today)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    export = subparsers.add_parser("export", help="Write every report to the export directory")
    export.add_argument("--format", choices=SUPPORTED_FORMATS, help="Output file format")
    export.add_argument("--output", help="Output directory")

    subparsers.add_parser("metrics", help="Print the key business metrics")
    subparsers.add_parser("validate", help="Print the data quality summary")

    return parser


def run_export(gold: GoldLayer, args: argparse.Namespace) -> int:
    exporter = ReportExporter(output_path=args.output, file_format=args.format)
    results = exporter.export_all(gold, as_of=args.as_of)

    for result in results:
        status = "ok" if result.succeeded else "FAILED"
        print(f"{result.name:<24} {result.rows:>8} rows  {status}  {result.output_path or ''}")

    return 0 if all(r.succeeded for r in results) else 1


def run_metrics(gold: GoldLayer, args: argparse.Namespace) -> int:
    metrics = DataExplorer(gold, as_of=args.as_of).key_metrics()
    for name, value in metrics.iter_rows():
        print(f"{name:<16} {value if value is not None else 'n/a'}")
    return 0


def run_validate(gold: GoldLayer, args: argparse.Namespace) -> int:
    results = validate_gold_layer(gold)
    status = overall_status(results)

    report = {
        "status": status.value,
        "tables": {name: result.summary() for name, result in results.items()},
    }
    print(json.dumps(report, indent=2))

    return 1 if status == ValidationStatus.FAILED else 0


COMMANDS = {
    "export": run_export,
    "metrics": run_metrics,
    "validate": run_validate,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, stream=sys.stderr)

    try:
        gold = asyncio.run(load_gold_layer(args.database_url))
    except (SQLAlchemyError, OSError) as e:
        logger.error("Could not load the Gold Layer", error=str(e))
        return 2

    return COMMANDS[args.command](gold, args)


if __name__ == "__main__":
    sys.exit(main())
