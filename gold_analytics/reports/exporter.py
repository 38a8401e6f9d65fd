"""
Report Exporter

Writes the reporting views and the supporting analyses to the export
directory as parquet or CSV files, one file per report.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List, Optional

import polars as pl
import structlog

from gold_analytics.analytics.business import BusinessReporter
from gold_analytics.analytics.exploration import DataExplorer
from gold_analytics.analytics.gold_layer import GoldLayer
from gold_analytics.analytics.segmentation import SegmentationRules, resolve_as_of
from gold_analytics.analytics.trends import TrendAnalyzer
from gold_analytics.config import get_settings
from gold_analytics.reports.customer_report import build_customer_report
from gold_analytics.reports.product_report import build_product_report

logger = structlog.get_logger(__name__)

SUPPORTED_FORMATS = ("parquet", "csv")


@dataclass
class ExportResult:
    """Result of writing one report"""
    name: str
    rows: int
    started_at: datetime
    completed_at: datetime
    duration_seconds: float
    output_path: Optional[str] = None
    errors: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.errors


class ReportExporter:
    """
    Export reports to the configured output directory.

    Example:
        exporter = ReportExporter(file_format="csv")
        results = exporter.export_all(gold)
    """

    def __init__(
        self,
        output_path: Optional[str] = None,
        file_format: Optional[str] = None,
    ):
        settings = get_settings()
        self.output_path = Path(output_path or settings.export.output_path)
        self.file_format = (file_format or settings.export.file_format).lower()

        if self.file_format not in SUPPORTED_FORMATS:
            raise ValueError(f"Export format must be one of: {list(SUPPORTED_FORMATS)}")

        self.output_path.mkdir(parents=True, exist_ok=True)

    def write(self, df: pl.DataFrame, name: str) -> str:
        """Write one report and return its path"""
        output_file = self.output_path / f"{name}.{self.file_format}"

        if self.file_format == "parquet":
            df.write_parquet(output_file)
        else:
            df.write_csv(output_file)

        logger.info("Report written", report=name, rows=df.height, path=str(output_file))
        return str(output_file)

    def _export_one(self, name: str, build: Callable[[], pl.DataFrame]) -> ExportResult:
        started_at = datetime.now(timezone.utc)
        rows = 0
        output_file = None
        errors = []

        try:
            df = build()
            rows = df.height
            output_file = self.write(df, name)
        except (OSError, pl.exceptions.PolarsError) as e:
            logger.error("Report export failed", report=name, error=str(e))
            errors.append(str(e))

        completed_at = datetime.now(timezone.utc)
        return ExportResult(
            name=name,
            rows=rows,
            started_at=started_at,
            completed_at=completed_at,
            duration_seconds=(completed_at - started_at).total_seconds(),
            output_path=output_file,
            errors=errors,
        )

    def export_all(
        self,
        gold: GoldLayer,
        as_of: Optional[date] = None,
        rules: Optional[SegmentationRules] = None,
    ) -> List[ExportResult]:
        """Export both reporting views and every supporting analysis"""
        as_of = resolve_as_of(as_of)
        rules = rules or SegmentationRules.from_settings()
        analytics = get_settings().analytics

        explorer = DataExplorer(gold, as_of=as_of)
        business = BusinessReporter(gold)
        trends = TrendAnalyzer(gold, rules=rules)

        jobs: Dict[str, Callable[[], pl.DataFrame]] = {
            "product_report": lambda: build_product_report(gold, as_of=as_of, rules=rules),
            "report_customers": lambda: build_customer_report(gold, as_of=as_of, rules=rules),
            "key_metrics": explorer.key_metrics,
            "yearly_sales": trends.yearly_sales,
            "monthly_sales": trends.monthly_sales,
            "cumulative_sales": trends.cumulative_sales,
            "product_performance": trends.product_performance,
            "category_contribution": trends.category_contribution,
            "cost_range_segments": trends.cost_range_segments,
            "customer_segments": trends.customer_segments,
            "customers_by_country": business.customers_by_country,
            "customers_by_gender": business.customers_by_gender,
            "products_by_category": business.products_by_category,
            "average_cost_by_category": business.average_cost_by_category,
            "revenue_by_category": business.revenue_by_category,
            "revenue_by_customer": business.revenue_by_customer,
            "quantity_by_country": business.quantity_by_country,
            "top_products": lambda: business.top_products(analytics.top_products),
            "bottom_products": lambda: business.bottom_products(analytics.bottom_products),
            "top_subcategories": lambda: business.top_subcategories(analytics.top_subcategories),
            "top_customers": lambda: business.top_customers(analytics.top_customers),
            "least_active_customers": lambda: business.least_active_customers(analytics.least_active_customers),
        }

        logger.info("Exporting reports", reports=len(jobs), format=self.file_format, as_of=str(as_of))
        results = [self._export_one(name, build) for name, build in jobs.items()]

        failed = sum(1 for r in results if not r.succeeded)
        logger.info("Report export complete", succeeded=len(results) - failed, failed=failed)
        return results
