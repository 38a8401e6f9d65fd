"""
Analytics API Endpoints

Business questions and trend analyses over the Gold Layer.
"""

from typing import Any, Callable, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query
import polars as pl
import structlog

from gold_analytics.analytics.business import BusinessReporter
from gold_analytics.analytics.gold_layer import GoldLayer
from gold_analytics.analytics.trends import TrendAnalyzer
from gold_analytics.config import get_settings
from gold_analytics.serving.api.dependencies import get_gold_layer

router = APIRouter()
logger = structlog.get_logger(__name__)


def _rows(build: Callable[[], pl.DataFrame]) -> List[Dict[str, Any]]:
    try:
        return build().to_dicts()
    except ValueError as e:
        logger.warning("Invalid analysis parameters", error=str(e))
        raise HTTPException(status_code=422, detail=str(e))


def _limit(default: int) -> Any:
    return Query(default, ge=0, le=1000, description="Number of rows to return")


# =============================================================================
# BUSINESS QUESTIONS
# =============================================================================

@router.get("/customers/by-country")
async def customers_by_country(gold: GoldLayer = Depends(get_gold_layer)) -> List[Dict[str, Any]]:
    return _rows(BusinessReporter(gold).customers_by_country)


@router.get("/customers/by-gender")
async def customers_by_gender(gold: GoldLayer = Depends(get_gold_layer)) -> List[Dict[str, Any]]:
    return _rows(BusinessReporter(gold).customers_by_gender)


@router.get("/products/by-category")
async def products_by_category(gold: GoldLayer = Depends(get_gold_layer)) -> List[Dict[str, Any]]:
    return _rows(BusinessReporter(gold).products_by_category)


@router.get("/products/average-cost")
async def average_cost_by_category(gold: GoldLayer = Depends(get_gold_layer)) -> List[Dict[str, Any]]:
    return _rows(BusinessReporter(gold).average_cost_by_category)


@router.get("/revenue/by-category")
async def revenue_by_category(gold: GoldLayer = Depends(get_gold_layer)) -> List[Dict[str, Any]]:
    return _rows(BusinessReporter(gold).revenue_by_category)


@router.get("/revenue/by-customer")
async def revenue_by_customer(gold: GoldLayer = Depends(get_gold_layer)) -> List[Dict[str, Any]]:
    return _rows(BusinessReporter(gold).revenue_by_customer)


@router.get("/quantity/by-country")
async def quantity_by_country(gold: GoldLayer = Depends(get_gold_layer)) -> List[Dict[str, Any]]:
    return _rows(BusinessReporter(gold).quantity_by_country)


@router.get("/rankings/top-products")
async def top_products(
    n: int = _limit(get_settings().analytics.top_products),
    gold: GoldLayer = Depends(get_gold_layer),
) -> List[Dict[str, Any]]:
    return _rows(lambda: BusinessReporter(gold).top_products(n))


@router.get("/rankings/bottom-products")
async def bottom_products(
    n: int = _limit(get_settings().analytics.bottom_products),
    gold: GoldLayer = Depends(get_gold_layer),
) -> List[Dict[str, Any]]:
    return _rows(lambda: BusinessReporter(gold).bottom_products(n))


@router.get("/rankings/top-subcategories")
async def top_subcategories(
    n: int = _limit(get_settings().analytics.top_subcategories),
    gold: GoldLayer = Depends(get_gold_layer),
) -> List[Dict[str, Any]]:
    return _rows(lambda: BusinessReporter(gold).top_subcategories(n))


@router.get("/rankings/top-customers")
async def top_customers(
    n: int = _limit(get_settings().analytics.top_customers),
    gold: GoldLayer = Depends(get_gold_layer),
) -> List[Dict[str, Any]]:
    return _rows(lambda: BusinessReporter(gold).top_customers(n))


@router.get("/rankings/least-active-customers")
async def least_active_customers(
    n: int = _limit(get_settings().analytics.least_active_customers),
    gold: GoldLayer = Depends(get_gold_layer),
) -> List[Dict[str, Any]]:
    return _rows(lambda: BusinessReporter(gold).least_active_customers(n))


# =============================================================================
# TRENDS
# =============================================================================

@router.get("/trends/yearly")
async def yearly_sales(gold: GoldLayer = Depends(get_gold_layer)) -> List[Dict[str, Any]]:
    """Sales, customers and quantity per order year"""
    return _rows(TrendAnalyzer(gold).yearly_sales)


@router.get("/trends/monthly")
async def monthly_sales(gold: GoldLayer = Depends(get_gold_layer)) -> List[Dict[str, Any]]:
    """Sales, customers and quantity per order month"""
    return _rows(TrendAnalyzer(gold).monthly_sales)


@router.get("/trends/cumulative")
async def cumulative_sales(
    granularity: str = Query("year", description="year or month"),
    gold: GoldLayer = Depends(get_gold_layer),
) -> List[Dict[str, Any]]:
    """Running total of sales and moving average price"""
    return _rows(lambda: TrendAnalyzer(gold).cumulative_sales(granularity))


@router.get("/trends/product-performance")
async def product_performance(gold: GoldLayer = Depends(get_gold_layer)) -> List[Dict[str, Any]]:
    """Yearly product sales against the previous year and the product average"""
    return _rows(TrendAnalyzer(gold).product_performance)


@router.get("/trends/category-contribution")
async def category_contribution(gold: GoldLayer = Depends(get_gold_layer)) -> List[Dict[str, Any]]:
    return _rows(TrendAnalyzer(gold).category_contribution)


@router.get("/segments/cost-ranges")
async def cost_range_segments(gold: GoldLayer = Depends(get_gold_layer)) -> List[Dict[str, Any]]:
    return _rows(TrendAnalyzer(gold).cost_range_segments)


@router.get("/segments/customers")
async def customer_segments(gold: GoldLayer = Depends(get_gold_layer)) -> List[Dict[str, Any]]:
    return _rows(TrendAnalyzer(gold).customer_segments)
