"""
Unit Tests - Report Export
"""
from datetime import timezone

import polars as pl
import pytest

from gold_analytics.config import get_settings
from gold_analytics.reports.exporter import ReportExporter


class TestReportExporter:
    def test_unsupported_format(self, tmp_path):
        with pytest.raises(ValueError):
            ReportExporter(output_path=str(tmp_path), file_format="xlsx")

    def test_creates_output_directory(self, tmp_path):
        target = tmp_path / "nested" / "reports"

        ReportExporter(output_path=str(target), file_format="csv")

        assert target.is_dir()

    def test_write_csv(self, tmp_path):
        exporter = ReportExporter(output_path=str(tmp_path), file_format="csv")

        path = exporter.write(pl.DataFrame({"a": [1, 2]}), "sample")

        assert path.endswith("sample.csv")
        assert pl.read_csv(path)["a"].to_list() == [1, 2]

    def test_export_all_parquet(self, tmp_path, gold, as_of, rules):
        exporter = ReportExporter(output_path=str(tmp_path), file_format="parquet")

        results = exporter.export_all(gold, as_of=as_of, rules=rules)

        assert all(r.succeeded for r in results)
        by_name = {r.name: r for r in results}
        assert by_name["product_report"].rows == 3
        assert by_name["report_customers"].rows == 4
        assert by_name["key_metrics"].rows == 6

        customers = pl.read_parquet(tmp_path / "report_customers.parquet")
        assert customers["customer_name"][0] == "Jon Yang"

    def test_write_failure_is_reported(self, tmp_path, gold, as_of, rules, monkeypatch):
        exporter = ReportExporter(output_path=str(tmp_path), file_format="csv")

        def fail(df, name):
            raise OSError("disk full")

        monkeypatch.setattr(exporter, "write", fail)
        results = exporter.export_all(gold, as_of=as_of, rules=rules)

        assert not any(r.succeeded for r in results)
        assert results[0].errors == ["disk full"]

    def test_export_all_includes_rankings_and_distributions(self, tmp_path, gold, as_of, rules):
        exporter = ReportExporter(output_path=str(tmp_path), file_format="csv")

        by_name = {r.name: r for r in exporter.export_all(gold, as_of=as_of, rules=rules)}

        assert by_name["top_subcategories"].rows == 3
        assert by_name["least_active_customers"].rows == 3
        assert by_name["customers_by_country"].rows == 3
        assert by_name["customers_by_gender"].rows == 2
        assert by_name["products_by_category"].rows == 3
        assert (tmp_path / "least_active_customers.csv").exists()

    def test_ranking_sizes_follow_settings(self, tmp_path, gold, as_of, rules, monkeypatch):
        monkeypatch.setenv("ANALYTICS_TOP_SUBCATEGORIES", "2")
        monkeypatch.setenv("ANALYTICS_LEAST_ACTIVE_CUSTOMERS", "1")
        get_settings.cache_clear()
        try:
            exporter = ReportExporter(output_path=str(tmp_path), file_format="csv")
            by_name = {r.name: r for r in exporter.export_all(gold, as_of=as_of, rules=rules)}
        finally:
            get_settings.cache_clear()

        assert by_name["top_subcategories"].rows == 2
        assert by_name["least_active_customers"].rows == 1

    def test_timestamps_are_utc(self, tmp_path, gold, as_of, rules):
        exporter = ReportExporter(output_path=str(tmp_path), file_format="csv")

        result = exporter.export_all(gold, as_of=as_of, rules=rules)[0]

        assert result.started_at.tzinfo is timezone.utc
        assert result.completed_at >= result.started_at
