"""
Advanced Analytics and Trend Analysis

Time-series, comparative and segmentation analysis over the Gold Layer:
- Sales trends over time (yearly, monthly)
- Running totals and moving averages
- Year-over-year and average-based product performance
- Proportional contribution of product categories
- Product and customer segmentation
"""

from typing import Optional

import polars as pl
import structlog

from gold_analytics.analytics.gold_layer import DIM_CUSTOMER_KEY, GoldLayer
from gold_analytics.analytics.segmentation import (
    SegmentationRules,
    cost_range,
    customer_segment,
    months_between,
)

logger = structlog.get_logger(__name__)

GRANULARITIES = {"year": "1y", "month": "1mo"}


def _period(granularity: str) -> pl.Expr:
    if granularity not in GRANULARITIES:
        raise ValueError(f"Granularity must be one of: {list(GRANULARITIES)}")
    return pl.col("order_date").dt.truncate(GRANULARITIES[granularity])


class TrendAnalyzer:
    """
    Trend and segmentation analysis over a Gold Layer snapshot.

    Example:
        analyzer = TrendAnalyzer(gold)
        analyzer.cumulative_sales(granularity="month")
    """

    def __init__(self, gold: GoldLayer, rules: Optional[SegmentationRules] = None):
        self.gold = gold
        self.rules = rules or SegmentationRules.from_settings()

    # =========================================================================
    # Sales over time
    # =========================================================================

    def _sales_over_time(self, period: pl.Expr, period_name: str) -> pl.DataFrame:
        return (
            self.gold.dated_sales()
            .group_by(period.alias(period_name))
            .agg(
                pl.col("sales_price").sum().alias("total_sales"),
                pl.col("customer_key").drop_nulls().n_unique().alias("total_customers"),
                pl.col("sales_quantity").sum().alias("total_quantity"),
            )
            .sort(period_name)
        )

    def yearly_sales(self) -> pl.DataFrame:
        return self._sales_over_time(pl.col("order_date").dt.year(), "order_year")

    def monthly_sales(self) -> pl.DataFrame:
        return self._sales_over_time(_period("month"), "order_month")

    def cumulative_sales(self, granularity: str = "year") -> pl.DataFrame:
        """
        Running total of sales and moving average of price per period.

        The moving average is the cumulative mean of the per-period
        average prices, not of the individual sales lines. Periods without
        any priced line are left out of that mean.
        """
        period = _period(granularity)
        per_period = (
            self.gold.dated_sales()
            .group_by(period.alias("order_date"))
            .agg(
                pl.col("sales_price").sum().alias("total_sales"),
                pl.col("sales_price").mean().alias("avg_price"),
            )
            .sort("order_date")
        )
        priced_periods = pl.col("avg_price").cum_count()
        return per_period.with_columns(
            pl.col("total_sales").cum_sum().alias("running_total_sales"),
            pl.when(priced_periods > 0)
            .then(pl.col("avg_price").fill_null(0).cum_sum() / priced_periods)
            .alias("moving_average_price"),
        ).select("order_date", "total_sales", "running_total_sales", "moving_average_price")

    # =========================================================================
    # Product performance
    # =========================================================================

    def product_performance(self) -> pl.DataFrame:
        """Yearly product sales compared with the previous year and the product average"""
        yearly = (
            self.gold.sales_with_products(dated_only=True)
            .group_by(
                pl.col("order_date").dt.year().alias("order_year"),
                "product_name",
            )
            .agg(pl.col("sales_price").sum().alias("current_sales"))
            .sort(["product_name", "order_year"], nulls_last=True)
        )

        # shift() over a partition follows row order, hence the sort above
        yearly = yearly.with_columns(
            pl.col("current_sales").shift(1).over("product_name").alias("prev_year_sales"),
            pl.col("current_sales").mean().over("product_name").alias("avg_sales"),
        ).with_columns(
            (pl.col("current_sales") - pl.col("prev_year_sales")).alias("yoy_difference"),
            (pl.col("current_sales") - pl.col("avg_sales")).alias("diff_from_avg"),
        )

        return yearly.with_columns(
            pl.when(pl.col("yoy_difference") > 0)
            .then(pl.lit("Increase"))
            .when(pl.col("yoy_difference") < 0)
            .then(pl.lit("Decrease"))
            .otherwise(pl.lit("No Change"))
            .alias("yoy_trend"),
            pl.when(pl.col("diff_from_avg") > 0)
            .then(pl.lit("Above Average"))
            .when(pl.col("diff_from_avg") < 0)
            .then(pl.lit("Below Average"))
            .otherwise(pl.lit("At Average"))
            .alias("avg_comparison"),
        ).select(
            "order_year",
            "product_name",
            "current_sales",
            "prev_year_sales",
            "yoy_difference",
            "yoy_trend",
            "avg_sales",
            "diff_from_avg",
            "avg_comparison",
        )

    # =========================================================================
    # Part-to-whole
    # =========================================================================

    def category_contribution(self) -> pl.DataFrame:
        """Share of overall sales per product category"""
        df = (
            self.gold.sales_with_products()
            .group_by("category")
            .agg(pl.col("sales_price").sum().alias("total_sales"))
            .with_columns(pl.col("total_sales").sum().alias("overall_sales"))
        )
        return df.with_columns(
            pl.when(pl.col("overall_sales") != 0)
            .then((pl.col("total_sales") / pl.col("overall_sales") * 100).round(2))
            .otherwise(None)
            .alias("percentage_of_total")
        ).sort(["total_sales", "category"], descending=[True, False], nulls_last=True)

    # =========================================================================
    # Segmentation
    # =========================================================================

    def cost_range_segments(self) -> pl.DataFrame:
        """Number of products per cost range"""
        return (
            self.gold.products
            .with_columns(cost_range(pl.col("cost")).alias("cost_range"))
            .group_by("cost_range")
            .agg(pl.col("product_key").count().alias("total_products"))
            .sort(["total_products", "cost_range"], descending=[True, False])
        )

    def customer_segments(self) -> pl.DataFrame:
        """
        Number of customers per VIP / Regular / New segment.

        Uses every sales line; lines whose customer is missing from the
        dimension form a null-key group that is not counted.
        """
        spending = (
            self.gold.sales_with_customers()
            .group_by(DIM_CUSTOMER_KEY)
            .agg(
                pl.col("sales_price").sum().alias("total_spending"),
                months_between(pl.col("order_date").min(), pl.col("order_date").max()).alias("lifespan"),
            )
        )
        segments = spending.with_columns(
            customer_segment(pl.col("lifespan"), pl.col("total_spending"), self.rules).alias("customer_segment")
        )
        result = (
            segments.group_by("customer_segment")
            .agg(pl.col(DIM_CUSTOMER_KEY).count().alias("customer_count"))
            .sort(["customer_count", "customer_segment"], descending=[True, False])
        )
        logger.debug("Customer segments computed", segments=result.height)
        return result
