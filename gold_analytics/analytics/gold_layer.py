"""
Gold Layer Snapshot

In-memory view of the three star-schema tables as polars DataFrames, with
the LEFT JOIN helpers every analysis builds on.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Sequence

import polars as pl

FACT_SALES_SCHEMA: Dict[str, pl.DataType] = {
    "order_number": pl.Utf8,
    "order_date": pl.Date,
    "customer_key": pl.Int64,
    "product_key": pl.Int64,
    "sales_price": pl.Float64,
    "sales_quantity": pl.Int64,
}

CUSTOMERS_SCHEMA: Dict[str, pl.DataType] = {
    "customer_key": pl.Int64,
    "customer_number": pl.Utf8,
    "first_name": pl.Utf8,
    "last_name": pl.Utf8,
    "birthdate": pl.Date,
    "gender": pl.Utf8,
    "country": pl.Utf8,
}

PRODUCTS_SCHEMA: Dict[str, pl.DataType] = {
    "product_key": pl.Int64,
    "product_id": pl.Int64,
    "product_name": pl.Utf8,
    "category": pl.Utf8,
    "subcategory": pl.Utf8,
    "cost": pl.Float64,
}

# Dimension keys as seen from the dimension side of a LEFT JOIN.
# Null when the fact row has no matching dimension row.
DIM_CUSTOMER_KEY = "dim_customer_key"
DIM_PRODUCT_KEY = "dim_product_key"


def frame_from_records(records: Sequence[Any], schema: Mapping[str, pl.DataType]) -> pl.DataFrame:
    """
    Build a DataFrame with a fixed schema from dicts or row tuples.

    Empty input yields an empty frame that still carries every column.
    """
    if records and isinstance(records[0], Mapping):
        return pl.DataFrame([dict(r) for r in records], schema=dict(schema))
    return pl.DataFrame([tuple(r) for r in records], schema=dict(schema), orient="row")


@dataclass
class GoldLayer:
    """
    Snapshot of the Gold Layer tables.

    Example:
        gold = GoldLayer.from_records(sales_rows, customer_rows, product_rows)
        yearly = TrendAnalyzer(gold).yearly_sales()
    """
    fact_sales: pl.DataFrame
    customers: pl.DataFrame
    products: pl.DataFrame

    @classmethod
    def from_records(
        cls,
        fact_sales: Sequence[Any],
        customers: Sequence[Any],
        products: Sequence[Any],
    ) -> "GoldLayer":
        return cls(
            fact_sales=frame_from_records(fact_sales, FACT_SALES_SCHEMA),
            customers=frame_from_records(customers, CUSTOMERS_SCHEMA),
            products=frame_from_records(products, PRODUCTS_SCHEMA),
        )

    @property
    def row_counts(self) -> Dict[str, int]:
        return {
            "fact_sales": self.fact_sales.height,
            "dim_customers": self.customers.height,
            "dim_products": self.products.height,
        }

    def dated_sales(self) -> pl.DataFrame:
        """Sales lines with a known order date"""
        return self.fact_sales.filter(pl.col("order_date").is_not_null())

    def sales_with_products(self, dated_only: bool = False) -> pl.DataFrame:
        """Sales LEFT JOIN dim_products, with the dimension key in ``dim_product_key``"""
        sales = self.dated_sales() if dated_only else self.fact_sales
        products = self.products.with_columns(pl.col("product_key").alias(DIM_PRODUCT_KEY))
        return sales.join(products, on="product_key", how="left")

    def sales_with_customers(self, dated_only: bool = False) -> pl.DataFrame:
        """Sales LEFT JOIN dim_customers, with the dimension key in ``dim_customer_key``"""
        sales = self.dated_sales() if dated_only else self.fact_sales
        customers = self.customers.with_columns(pl.col("customer_key").alias(DIM_CUSTOMER_KEY))
        return sales.join(customers, on="customer_key", how="left")
