"""
Product Report

Consolidates product-level metrics for dashboards:
- Product details (name, category, subcategory, cost)
- Performance tier (High-Performers / Mid-Range / Low-Performers)
- Orders, sales, quantity, distinct customers
- Recency (months since last sale)
- Average order revenue and average monthly revenue
"""

from datetime import date
from typing import Optional

import polars as pl
import structlog

from gold_analytics.analytics.gold_layer import DIM_PRODUCT_KEY, GoldLayer
from gold_analytics.analytics.segmentation import (
    SegmentationRules,
    months_between,
    product_segment,
    resolve_as_of,
)

logger = structlog.get_logger(__name__)

PRODUCT_REPORT_COLUMNS = [
    "product_key",
    "product_name",
    "category",
    "subcategory",
    "cost",
    "product_segment",
    "average_cost",
    "total_customers",
    "total_orders",
    "total_sales",
    "total_quantity",
    "last_sale_date",
    "recency_in_months",
    "avg_order_revenue",
    "avg_monthly_revenue",
]

PRODUCT_COLUMNS = [DIM_PRODUCT_KEY, "product_name", "category", "subcategory", "cost"]


def build_product_report(
    gold: GoldLayer,
    as_of: Optional[date] = None,
    rules: Optional[SegmentationRules] = None,
) -> pl.DataFrame:
    """
    Build the product report: one row per product with dated sales.

    Args:
        gold: Gold Layer snapshot
        as_of: Reference date for recency (defaults to the configured date or today)
        rules: Segmentation thresholds (defaults to settings)

    Returns:
        DataFrame with PRODUCT_REPORT_COLUMNS, ordered by product_key
    """
    as_of = resolve_as_of(as_of)
    rules = rules or SegmentationRules.from_settings()

    unit_price = (
        pl.when(pl.col("sales_quantity") != 0)
        .then(pl.col("sales_price") / pl.col("sales_quantity"))
        .otherwise(None)
    )

    aggregated = (
        gold.sales_with_products(dated_only=True)
        .group_by(PRODUCT_COLUMNS)
        .agg(
            pl.col("order_number").drop_nulls().n_unique().alias("total_orders"),
            pl.col("sales_price").sum().alias("total_sales"),
            pl.col("sales_quantity").sum().alias("total_quantity"),
            pl.col("customer_key").drop_nulls().n_unique().alias("total_customers"),
            pl.col("order_date").max().alias("last_sale_date"),
            months_between(pl.col("order_date").min(), pl.col("order_date").max()).alias("lifespan"),
            unit_price.mean().round(2).alias("average_cost"),
        )
        .rename({DIM_PRODUCT_KEY: "product_key"})
    )

    report = aggregated.with_columns(
        product_segment(pl.col("total_sales"), rules).alias("product_segment"),
        months_between(pl.col("last_sale_date"), as_of).alias("recency_in_months"),
        pl.when(pl.col("total_orders") == 0)
        .then(pl.lit(0.0))
        .otherwise(pl.col("total_sales") / pl.col("total_orders"))
        .alias("avg_order_revenue"),
        pl.when(pl.col("lifespan") == 0)
        .then(pl.col("total_sales"))
        .otherwise(pl.col("total_sales") / pl.col("lifespan"))
        .alias("avg_monthly_revenue"),
    )

    report = report.select(PRODUCT_REPORT_COLUMNS).sort("product_key", nulls_last=True)
    logger.info("Product report built", rows=report.height, as_of=str(as_of))
    return report
