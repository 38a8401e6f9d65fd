"""
Exploratory Data Analysis

Profiles the Gold Layer: dimension contents, the covered date range,
customer ages, and the headline business measures.
"""

from datetime import date
from typing import Any, Dict, Optional

import polars as pl
import structlog

from gold_analytics.analytics.gold_layer import GoldLayer
from gold_analytics.analytics.segmentation import months_between, resolve_as_of, years_between

logger = structlog.get_logger(__name__)


def _distinct_count(column: str) -> pl.Expr:
    return pl.col(column).drop_nulls().n_unique()


class DataExplorer:
    """
    Data profiling over a Gold Layer snapshot.

    Example:
        explorer = DataExplorer(gold)
        explorer.key_metrics()
    """

    def __init__(self, gold: GoldLayer, as_of: Optional[date] = None):
        self.gold = gold
        self.as_of = resolve_as_of(as_of)

    # =========================================================================
    # Dimension exploration
    # =========================================================================

    def distinct_countries(self) -> pl.DataFrame:
        return (
            self.gold.customers.select("country")
            .unique()
            .sort("country", nulls_last=True)
        )

    def product_hierarchy(self) -> pl.DataFrame:
        """Distinct category / subcategory / product combinations"""
        columns = ["category", "subcategory", "product_name"]
        return (
            self.gold.products.select(columns)
            .unique()
            .sort(columns, nulls_last=True)
        )

    # =========================================================================
    # Temporal exploration
    # =========================================================================

    def order_date_range(self) -> pl.DataFrame:
        """First and last order dates and the years/months they span"""
        first, last = pl.col("order_date").min(), pl.col("order_date").max()
        return self.gold.fact_sales.select(
            first.alias("first_order"),
            last.alias("last_order"),
            years_between(first, last).alias("sales_years"),
            months_between(first, last).alias("sales_months"),
        )

    def customer_age_range(self) -> pl.DataFrame:
        """Oldest and youngest customers by birthdate"""
        oldest, youngest = pl.col("birthdate").min(), pl.col("birthdate").max()
        return self.gold.customers.select(
            oldest.alias("oldest_bday"),
            years_between(oldest, self.as_of).alias("oldest_age"),
            youngest.alias("youngest_bday"),
            years_between(youngest, self.as_of).alias("youngest_age"),
        )

    # =========================================================================
    # Measure exploration
    # =========================================================================

    def sample_sales(self, limit: int = 100) -> pl.DataFrame:
        if limit < 0:
            raise ValueError("limit must be non-negative")
        return self.gold.fact_sales.head(limit)

    def measures(self) -> Dict[str, Any]:
        """Headline measures over all sales lines, dated or not"""
        sales = self.gold.fact_sales.select(
            pl.col("sales_price").sum().alias("total_sales"),
            pl.col("sales_quantity").sum().alias("total_quantity"),
            pl.col("sales_price").mean().alias("avg_price"),
            _distinct_count("order_number").alias("total_orders"),
            pl.col("product_key").count().alias("total_products_fact"),
            _distinct_count("customer_key").alias("customers_with_orders"),
        ).row(0, named=True)

        products = self.gold.products.select(_distinct_count("product_name")).item()
        customers = self.gold.customers.select(_distinct_count("customer_key")).item()

        measures = {
            "total_sales": sales["total_sales"],
            "total_quantity": sales["total_quantity"],
            "avg_price": sales["avg_price"],
            "total_orders": sales["total_orders"],
            "total_products": products,
            "total_products_fact": sales["total_products_fact"],
            "total_customers": customers,
            "customers_with_orders": sales["customers_with_orders"],
        }
        logger.debug("Measures computed", **measures)
        return measures

    def key_metrics(self) -> pl.DataFrame:
        """Summary report of key business metrics as measure_name / measure_value"""
        m = self.measures()
        rows = [
            ("Total Sales", m["total_sales"]),
            ("Total Quantity", m["total_quantity"]),
            ("Average Price", m["avg_price"]),
            ("Total Orders", m["total_orders"]),
            ("Total Products", m["total_products"]),
            ("Total Customers", m["total_customers"]),
        ]
        return pl.DataFrame(
            {
                "measure_name": [name for name, _ in rows],
                "measure_value": [None if value is None else float(value) for _, value in rows],
            },
            schema={"measure_name": pl.Utf8, "measure_value": pl.Float64},
        )
