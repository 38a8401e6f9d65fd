"""
Database Models - Gold Layer Star Schema

Read-only mappings of the business-ready reporting layer of the warehouse.
The schema consists of:

Fact Tables:
- FactSales: One row per sales line item

Dimension Tables:
- DimCustomer: Customer demographics
- DimProduct: Product catalog with category hierarchy and cost

The tables live in the ``gold`` schema. Engines created by
``gold_analytics.database.connection`` translate that schema name to the
configured one, so the same models map onto engines without schemas.
"""

from datetime import date
from typing import Optional

from sqlalchemy import Date, Float, Index, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

GOLD_SCHEMA = "gold"


class Base(DeclarativeBase):
    """Base class for all database models"""
    pass


# =============================================================================
# DIMENSION TABLES
# =============================================================================

class DimCustomer(Base):
    """
    Customer Dimension

    One row per customer with demographic attributes.
    """
    __tablename__ = "dim_customers"
    __table_args__ = {"schema": GOLD_SCHEMA}

    customer_key: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    customer_number: Mapped[Optional[str]] = mapped_column(String(50))
    first_name: Mapped[Optional[str]] = mapped_column(String(50))
    last_name: Mapped[Optional[str]] = mapped_column(String(50))
    birthdate: Mapped[Optional[date]] = mapped_column(Date)
    gender: Mapped[Optional[str]] = mapped_column(String(20))
    country: Mapped[Optional[str]] = mapped_column(String(50))

    def __repr__(self) -> str:
        return f"<DimCustomer(key={self.customer_key}, number={self.customer_number})>"


class DimProduct(Base):
    """
    Product Dimension

    One row per product with its category hierarchy and unit cost.
    """
    __tablename__ = "dim_products"
    __table_args__ = (
        Index("ix_dim_products_category", "category", "subcategory"),
        {"schema": GOLD_SCHEMA},
    )

    product_key: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    product_id: Mapped[Optional[int]] = mapped_column(Integer)
    product_name: Mapped[Optional[str]] = mapped_column(String(100))
    category: Mapped[Optional[str]] = mapped_column(String(50))
    subcategory: Mapped[Optional[str]] = mapped_column(String(50))
    cost: Mapped[Optional[float]] = mapped_column(Float)

    def __repr__(self) -> str:
        return f"<DimProduct(key={self.product_key}, name={self.product_name})>"


# =============================================================================
# FACT TABLES
# =============================================================================

class FactSales(Base):
    """
    Sales Fact Table

    Grain: one row per order line (order number + product).
    customer_key and product_key reference the dimensions logically only;
    the Gold Layer is a set of views without enforced constraints, and
    analyses LEFT JOIN.
    """
    __tablename__ = "fact_sales"
    __table_args__ = (
        Index("ix_fact_sales_order_date", "order_date"),
        Index("ix_fact_sales_customer", "customer_key"),
        {"schema": GOLD_SCHEMA},
    )

    order_number: Mapped[str] = mapped_column(String(50), primary_key=True)
    product_key: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    customer_key: Mapped[Optional[int]] = mapped_column(Integer)
    order_date: Mapped[Optional[date]] = mapped_column(Date)
    sales_price: Mapped[Optional[float]] = mapped_column(Float)
    sales_quantity: Mapped[Optional[int]] = mapped_column(Integer)

    def __repr__(self) -> str:
        return f"<FactSales(order={self.order_number}, product={self.product_key})>"
