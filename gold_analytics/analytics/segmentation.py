"""
Segmentation Rules

Rule-based classification of customers and products, expressed as polars
expressions so they compose into any aggregation:

- Customer segments: VIP / Regular / New by tenure and spend
- Product segments: High-Performers / Mid-Range / Low-Performers by sales
- Product cost ranges
- Customer age groups
- Calendar month/year differences used for lifespan, recency and age
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Union

import polars as pl

from gold_analytics.config import get_settings


class CustomerSegment(str, Enum):
    """Customer segment labels"""
    VIP = "VIP"
    REGULAR = "Regular"
    NEW = "New"


class ProductSegment(str, Enum):
    """Product performance tiers"""
    HIGH = "High-Performers"
    MID = "Mid-Range"
    LOW = "Low-Performers"


class CostRange(str, Enum):
    """Product cost buckets"""
    BELOW_100 = "Below 100"
    FROM_100_TO_500 = "100 - 500"
    FROM_500_TO_1000 = "500 - 1000"
    ABOVE_1000 = "Above 1000"


class AgeGroup(str, Enum):
    """Customer age buckets"""
    UNDER_20 = "Under 20"
    TWENTIES = "20-29"
    THIRTIES = "30-39"
    FORTIES = "40-49"
    FIFTY_PLUS = "50 and above"


@dataclass(frozen=True)
class SegmentationRules:
    """Thresholds for customer and product segmentation"""
    vip_min_lifespan_months: int = 12
    vip_spend_threshold: float = 5000
    high_performer_sales: float = 50000
    mid_range_sales: float = 10000

    @classmethod
    def from_settings(cls) -> "SegmentationRules":
        analytics = get_settings().analytics
        return cls(
            vip_min_lifespan_months=analytics.vip_min_lifespan_months,
            vip_spend_threshold=analytics.vip_spend_threshold,
            high_performer_sales=analytics.high_performer_sales,
            mid_range_sales=analytics.mid_range_sales,
        )


def resolve_as_of(as_of: Optional[date] = None) -> date:
    """Reference date for ages and recency: explicit, configured, or today"""
    if as_of is not None:
        return as_of
    return get_settings().analytics.as_of_date or date.today()


def _as_expr(value: Union[pl.Expr, date]) -> pl.Expr:
    return value if isinstance(value, pl.Expr) else pl.lit(value)


def months_between(start: Union[pl.Expr, date], end: Union[pl.Expr, date]) -> pl.Expr:
    """Number of month boundaries crossed from ``start`` to ``end``"""
    start, end = _as_expr(start), _as_expr(end)
    years = end.dt.year().cast(pl.Int64) - start.dt.year().cast(pl.Int64)
    months = end.dt.month().cast(pl.Int64) - start.dt.month().cast(pl.Int64)
    return years * 12 + months


def years_between(start: Union[pl.Expr, date], end: Union[pl.Expr, date]) -> pl.Expr:
    """Number of year boundaries crossed from ``start`` to ``end``"""
    start, end = _as_expr(start), _as_expr(end)
    return end.dt.year().cast(pl.Int64) - start.dt.year().cast(pl.Int64)


def customer_segment(lifespan: pl.Expr, total_sales: pl.Expr, rules: Optional[SegmentationRules] = None) -> pl.Expr:
    rules = rules or SegmentationRules()
    tenured = lifespan >= rules.vip_min_lifespan_months
    return (
        pl.when(tenured & (total_sales > rules.vip_spend_threshold))
        .then(pl.lit(CustomerSegment.VIP.value))
        .when(tenured & (total_sales <= rules.vip_spend_threshold))
        .then(pl.lit(CustomerSegment.REGULAR.value))
        .otherwise(pl.lit(CustomerSegment.NEW.value))
    )


def product_segment(total_sales: pl.Expr, rules: Optional[SegmentationRules] = None) -> pl.Expr:
    rules = rules or SegmentationRules()
    return (
        pl.when(total_sales > rules.high_performer_sales)
        .then(pl.lit(ProductSegment.HIGH.value))
        .when(total_sales >= rules.mid_range_sales)
        .then(pl.lit(ProductSegment.MID.value))
        .otherwise(pl.lit(ProductSegment.LOW.value))
    )


def cost_range(cost: pl.Expr) -> pl.Expr:
    # Bounds are inclusive on both ends; the first matching bucket wins.
    return (
        pl.when(cost < 100)
        .then(pl.lit(CostRange.BELOW_100.value))
        .when(cost.is_between(100, 500))
        .then(pl.lit(CostRange.FROM_100_TO_500.value))
        .when(cost.is_between(500, 1000))
        .then(pl.lit(CostRange.FROM_500_TO_1000.value))
        .otherwise(pl.lit(CostRange.ABOVE_1000.value))
    )


def age_group(age: pl.Expr) -> pl.Expr:
    return (
        pl.when(age < 20)
        .then(pl.lit(AgeGroup.UNDER_20.value))
        .when(age.is_between(20, 29))
        .then(pl.lit(AgeGroup.TWENTIES.value))
        .when(age.is_between(30, 39))
        .then(pl.lit(AgeGroup.THIRTIES.value))
        .when(age.is_between(40, 49))
        .then(pl.lit(AgeGroup.FORTIES.value))
        .otherwise(pl.lit(AgeGroup.FIFTY_PLUS.value))
    )
