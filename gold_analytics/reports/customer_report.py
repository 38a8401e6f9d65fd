"""
Customer Report

Consolidates customer-level metrics for dashboards:
- Demographics (name, age, age group)
- Segment (VIP / Regular / New) by tenure and spend
- Orders, sales, quantity, distinct products, lifespan
- Recency (months since last order)
- Average order value and average monthly spend
"""

from datetime import date
from typing import Optional

import polars as pl
import structlog

from gold_analytics.analytics.gold_layer import DIM_CUSTOMER_KEY, GoldLayer
from gold_analytics.analytics.segmentation import (
    SegmentationRules,
    age_group,
    customer_segment,
    months_between,
    resolve_as_of,
    years_between,
)

logger = structlog.get_logger(__name__)

CUSTOMER_REPORT_COLUMNS = [
    "customer_key",
    "customer_number",
    "customer_name",
    "age",
    "age_group",
    "customer_segment",
    "last_order_date",
    "recency",
    "total_orders",
    "total_sales",
    "total_quantity",
    "total_products",
    "lifespan",
    "avg_order_value",
    "avg_monthly_spend",
]

CUSTOMER_COLUMNS = [DIM_CUSTOMER_KEY, "customer_number", "customer_name", "age"]


def build_customer_report(
    gold: GoldLayer,
    as_of: Optional[date] = None,
    rules: Optional[SegmentationRules] = None,
) -> pl.DataFrame:
    """
    Build the customer report: one row per customer with dated sales.

    Sales lines whose customer is missing from the dimension are reported
    together under a null customer_key.

    Args:
        gold: Gold Layer snapshot
        as_of: Reference date for age and recency (defaults to the configured date or today)
        rules: Segmentation thresholds (defaults to settings)

    Returns:
        DataFrame with CUSTOMER_REPORT_COLUMNS, ordered by customer_key
    """
    as_of = resolve_as_of(as_of)
    rules = rules or SegmentationRules.from_settings()

    base = gold.sales_with_customers(dated_only=True).with_columns(
        pl.concat_str(
            [pl.col("first_name"), pl.lit(" "), pl.col("last_name")],
            ignore_nulls=True,
        ).alias("customer_name"),
        years_between(pl.col("birthdate"), as_of).alias("age"),
    )

    aggregated = (
        base.group_by(CUSTOMER_COLUMNS)
        .agg(
            pl.col("order_number").drop_nulls().n_unique().alias("total_orders"),
            pl.col("sales_price").sum().alias("total_sales"),
            pl.col("sales_quantity").sum().alias("total_quantity"),
            pl.col("product_key").drop_nulls().n_unique().alias("total_products"),
            pl.col("order_date").max().alias("last_order_date"),
            months_between(pl.col("order_date").min(), pl.col("order_date").max()).alias("lifespan"),
        )
        .rename({DIM_CUSTOMER_KEY: "customer_key"})
    )

    report = aggregated.with_columns(
        age_group(pl.col("age")).alias("age_group"),
        customer_segment(pl.col("lifespan"), pl.col("total_sales"), rules).alias("customer_segment"),
        months_between(pl.col("last_order_date"), as_of).alias("recency"),
        pl.when(pl.col("total_orders") == 0)
        .then(pl.lit(0.0))
        .otherwise(pl.col("total_sales") / pl.col("total_orders"))
        .alias("avg_order_value"),
        pl.when(pl.col("lifespan") == 0)
        .then(pl.col("total_sales"))
        .otherwise(pl.col("total_sales") / pl.col("lifespan"))
        .alias("avg_monthly_spend"),
    )

    report = report.select(CUSTOMER_REPORT_COLUMNS).sort("customer_key", nulls_last=True)
    logger.info("Customer report built", rows=report.height, as_of=str(as_of))
    return report
