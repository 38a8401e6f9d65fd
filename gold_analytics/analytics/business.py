"""
Business Questions Reporting

Answers recurring business questions over the Gold Layer:
- Customer demographics
- Product distribution and cost by category
- Revenue by category, customer and country
- Top/bottom product, subcategory and customer rankings
"""

from typing import List

import polars as pl

from gold_analytics.analytics.gold_layer import DIM_CUSTOMER_KEY, GoldLayer

CUSTOMER_COLUMNS = [DIM_CUSTOMER_KEY, "first_name", "last_name"]


def _rank(df: pl.DataFrame, measure: str, labels: List[str], descending: bool) -> pl.DataFrame:
    """Order by ``measure``, breaking ties by the labels ascending"""
    return df.sort(
        [measure, *labels],
        descending=[descending] + [False] * len(labels),
        nulls_last=True,
    )


def _check_limit(n: int) -> int:
    if n < 0:
        raise ValueError("n must be non-negative")
    return n


class BusinessReporter:
    """
    Ad-hoc business reporting over a Gold Layer snapshot.

    Example:
        reporter = BusinessReporter(gold)
        reporter.top_products(5)
    """

    def __init__(self, gold: GoldLayer):
        self.gold = gold

    # =========================================================================
    # Customer demographics
    # =========================================================================

    def customers_by_country(self) -> pl.DataFrame:
        df = self.gold.customers.group_by("country").agg(
            pl.col("customer_key").count().alias("total_customers")
        )
        return _rank(df, "total_customers", ["country"], descending=True)

    def customers_by_gender(self) -> pl.DataFrame:
        df = self.gold.customers.group_by("gender").agg(
            pl.col("customer_key").count().alias("total_customers")
        )
        return _rank(df, "total_customers", ["gender"], descending=True)

    # =========================================================================
    # Product distribution
    # =========================================================================

    def products_by_category(self) -> pl.DataFrame:
        df = self.gold.products.group_by("category").agg(
            pl.col("product_id").count().alias("total_products")
        )
        return _rank(df, "total_products", ["category"], descending=True)

    def average_cost_by_category(self) -> pl.DataFrame:
        df = self.gold.products.group_by("category").agg(
            pl.col("product_id").count().alias("total_products"),
            pl.col("cost").mean().alias("average_cost"),
        )
        return _rank(df, "total_products", ["category"], descending=True)

    # =========================================================================
    # Revenue analysis
    # =========================================================================

    def revenue_by_category(self) -> pl.DataFrame:
        df = self.gold.sales_with_products().group_by("category").agg(
            pl.col("sales_price").sum().alias("total_revenue")
        )
        return _rank(df, "total_revenue", ["category"], descending=True)

    def _customer_revenue(self) -> pl.DataFrame:
        return (
            self.gold.sales_with_customers()
            .group_by(CUSTOMER_COLUMNS)
            .agg(pl.col("sales_price").sum().alias("total_revenue"))
            .rename({DIM_CUSTOMER_KEY: "customer_key"})
        )

    def revenue_by_customer(self) -> pl.DataFrame:
        return _rank(self._customer_revenue(), "total_revenue", ["customer_key"], descending=True)

    def quantity_by_country(self) -> pl.DataFrame:
        """Distribution of items sold by customer country"""
        df = self.gold.sales_with_customers().group_by("country").agg(
            pl.col("sales_quantity").sum().alias("total_quantity_sold")
        )
        return _rank(df, "total_quantity_sold", ["country"], descending=True)

    # =========================================================================
    # Product performance
    # =========================================================================

    def _product_revenue(self, label: str) -> pl.DataFrame:
        return self.gold.sales_with_products().group_by(label).agg(
            pl.col("sales_price").sum().alias("total_revenue")
        )

    def top_products(self, n: int = 5) -> pl.DataFrame:
        """Best-selling products by revenue"""
        df = self._product_revenue("product_name")
        return _rank(df, "total_revenue", ["product_name"], descending=True).head(_check_limit(n))

    def bottom_products(self, n: int = 5) -> pl.DataFrame:
        """Worst-performing products by revenue"""
        df = self._product_revenue("product_name")
        return _rank(df, "total_revenue", ["product_name"], descending=False).head(_check_limit(n))

    def top_subcategories(self, n: int = 5) -> pl.DataFrame:
        df = self._product_revenue("subcategory")
        return _rank(df, "total_revenue", ["subcategory"], descending=True).head(_check_limit(n))

    # =========================================================================
    # Customer ranking
    # =========================================================================

    def top_customers(self, n: int = 10) -> pl.DataFrame:
        return self.revenue_by_customer().head(_check_limit(n))

    def least_active_customers(self, n: int = 3) -> pl.DataFrame:
        """Customers with the fewest distinct orders"""
        df = (
            self.gold.sales_with_customers()
            .group_by(CUSTOMER_COLUMNS)
            .agg(pl.col("order_number").drop_nulls().n_unique().alias("total_orders"))
            .rename({DIM_CUSTOMER_KEY: "customer_key"})
        )
        return _rank(df, "total_orders", ["customer_key"], descending=False).head(_check_limit(n))
