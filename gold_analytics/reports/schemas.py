"""
Reporting Contracts

Row models for the two derived reporting views. Downstream BI tools rely on
these column sets.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel


class ProductReportRow(BaseModel):
    """One product in the product report"""
    product_key: Optional[int]
    product_name: Optional[str]
    category: Optional[str]
    subcategory: Optional[str]
    cost: Optional[float]
    product_segment: str
    average_cost: Optional[float]
    total_customers: int
    total_orders: int
    total_sales: Optional[float]
    total_quantity: Optional[int]
    last_sale_date: Optional[date]
    recency_in_months: Optional[int]
    avg_order_revenue: Optional[float]
    avg_monthly_revenue: Optional[float]


class CustomerReportRow(BaseModel):
    """One customer in the customer report"""
    customer_key: Optional[int]
    customer_number: Optional[str]
    customer_name: Optional[str]
    age: Optional[int]
    age_group: str
    customer_segment: str
    last_order_date: Optional[date]
    recency: Optional[int]
    total_orders: int
    total_sales: Optional[float]
    total_quantity: Optional[int]
    total_products: int
    lifespan: Optional[int]
    avg_order_value: Optional[float]
    avg_monthly_spend: Optional[float]


class MeasureRow(BaseModel):
    """One line of the key metrics summary"""
    measure_name: str
    measure_value: Optional[float]
