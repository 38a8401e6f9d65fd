"""
Unit Tests - Command Line Interface
"""
import json
import sys
from datetime import date

import polars as pl
import pytest
import structlog

from gold_analytics import cli


def log_to_stderr(*args, **kwargs):
    """Keep stdout free for the command output, as ``cli.main`` does"""
    structlog.reset_defaults()
    structlog.configure(logger_factory=structlog.PrintLoggerFactory(sys.stderr))


@pytest.fixture
def offline(monkeypatch, gold):
    """Serve the fixture Gold Layer instead of querying a warehouse"""
    async def load(database_url=None):
        return gold

    monkeypatch.setattr(cli, "load_gold_layer", load)
    monkeypatch.setattr(cli, "configure_logging", log_to_stderr)


class TestParser:
    def test_as_of_is_parsed(self):
        args = cli.build_parser().parse_args(["--as-of", "2014-06-15", "metrics"])

        assert args.as_of == date(2014, 6, 15)
        assert args.command == "metrics"

    def test_invalid_as_of(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["--as-of", "soon", "metrics"])

    def test_command_required(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])

    def test_unknown_format(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["export", "--format", "xlsx"])


class TestCommands:
    def test_metrics(self, offline, capsys):
        assert cli.main(["metrics"]) == 0

        out = capsys.readouterr().out
        assert "Total Sales" in out
        assert "11525.0" in out

    def test_validate_partial_exits_zero(self, offline, capsys):
        assert cli.main(["validate"]) == 0

        report = json.loads(capsys.readouterr().out)
        assert report["status"] == "partial"
        assert report["tables"]["fact_sales"]["warning_count"] == 2

    def test_validate_failure_exits_one(self, monkeypatch, gold, capsys):
        broken = gold.fact_sales.with_columns(pl.lit(None, dtype=pl.Utf8).alias("order_number"))

        async def load(database_url=None):
            return type(gold)(fact_sales=broken, customers=gold.customers, products=gold.products)

        monkeypatch.setattr(cli, "load_gold_layer", load)
        monkeypatch.setattr(cli, "configure_logging", log_to_stderr)

        assert cli.main(["validate"]) == 1

    def test_export(self, offline, tmp_path, capsys):
        code = cli.main(["--as-of", "2014-06-15", "export", "--format", "csv", "--output", str(tmp_path)])

        assert code == 0
        assert (tmp_path / "product_report.csv").exists()
        assert (tmp_path / "report_customers.csv").exists()

    def test_unreachable_warehouse(self, monkeypatch, capsys):
        async def load(database_url=None):
            raise OSError("connection refused")

        monkeypatch.setattr(cli, "load_gold_layer", load)
        monkeypatch.setattr(cli, "configure_logging", log_to_stderr)

        assert cli.main(["metrics"]) == 2
