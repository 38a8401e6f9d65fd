"""
Reporting View Endpoints

The product and customer reports consumed by BI tools.
"""

from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
import polars as pl

from gold_analytics.analytics.gold_layer import GoldLayer
from gold_analytics.analytics.segmentation import CustomerSegment, ProductSegment
from gold_analytics.reports.customer_report import build_customer_report
from gold_analytics.reports.product_report import build_product_report
from gold_analytics.reports.schemas import CustomerReportRow, ProductReportRow
from gold_analytics.serving.api.dependencies import get_as_of, get_gold_layer

router = APIRouter()


@router.get("/products", response_model=List[ProductReportRow])
async def product_report(
    segment: Optional[ProductSegment] = None,
    category: Optional[str] = None,
    gold: GoldLayer = Depends(get_gold_layer),
    as_of: date = Depends(get_as_of),
) -> List[Dict[str, Any]]:
    """
    Product report: one row per sold product with performance KPIs.

    Optionally filtered by performance tier and category.
    """
    df = build_product_report(gold, as_of=as_of)

    if segment is not None:
        df = df.filter(pl.col("product_segment") == segment.value)
    if category is not None:
        df = df.filter(pl.col("category") == category)

    return df.to_dicts()


@router.get("/customers", response_model=List[CustomerReportRow])
async def customer_report(
    segment: Optional[CustomerSegment] = None,
    min_orders: int = Query(0, ge=0),
    gold: GoldLayer = Depends(get_gold_layer),
    as_of: date = Depends(get_as_of),
) -> List[Dict[str, Any]]:
    """
    Customer report: one row per purchasing customer with behavior KPIs.

    Optionally filtered by segment and a minimum number of orders.
    """
    df = build_customer_report(gold, as_of=as_of)

    if segment is not None:
        df = df.filter(pl.col("customer_segment") == segment.value)
    if min_orders:
        df = df.filter(pl.col("total_orders") >= min_orders)

    return df.to_dicts()
