"""
Exploration API Endpoints

Database structure and data profiling of the Gold Layer.
"""

from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import NoSuchTableError
import structlog

from gold_analytics.analytics.exploration import DataExplorer
from gold_analytics.analytics.gold_layer import GoldLayer
from gold_analytics.config import get_settings
from gold_analytics.database.repository import GoldRepository
from gold_analytics.reports.schemas import MeasureRow
from gold_analytics.serving.api.dependencies import get_as_of, get_gold_layer, get_repository

router = APIRouter()
logger = structlog.get_logger(__name__)


@router.get("/tables", response_model=List[str])
async def list_tables(repository: GoldRepository = Depends(get_repository)) -> List[str]:
    """Tables and views in the Gold Layer schema."""
    return await repository.list_tables()


@router.get("/tables/{table_name}/columns")
async def list_columns(
    table_name: str,
    repository: GoldRepository = Depends(get_repository),
) -> List[Dict[str, Any]]:
    """Columns of one table."""
    try:
        return await repository.list_columns(table_name)
    except NoSuchTableError:
        logger.info("Table not found", table=table_name)
        raise HTTPException(status_code=404, detail=f"Table '{table_name}' not found")


@router.get("/countries")
async def distinct_countries(gold: GoldLayer = Depends(get_gold_layer)) -> List[Dict[str, Any]]:
    return DataExplorer(gold).distinct_countries().to_dicts()


@router.get("/product-hierarchy")
async def product_hierarchy(gold: GoldLayer = Depends(get_gold_layer)) -> List[Dict[str, Any]]:
    return DataExplorer(gold).product_hierarchy().to_dicts()


@router.get("/date-range")
async def order_date_range(gold: GoldLayer = Depends(get_gold_layer)) -> Dict[str, Any]:
    return DataExplorer(gold).order_date_range().row(0, named=True)


@router.get("/customer-ages")
async def customer_age_range(
    gold: GoldLayer = Depends(get_gold_layer),
    as_of: date = Depends(get_as_of),
) -> Dict[str, Any]:
    return DataExplorer(gold, as_of=as_of).customer_age_range().row(0, named=True)


@router.get("/measures")
async def measures(gold: GoldLayer = Depends(get_gold_layer)) -> Dict[str, Any]:
    return DataExplorer(gold).measures()


@router.get("/key-metrics", response_model=List[MeasureRow])
async def key_metrics(gold: GoldLayer = Depends(get_gold_layer)) -> List[Dict[str, Any]]:
    """Summary report of key business metrics."""
    return DataExplorer(gold).key_metrics().to_dicts()


@router.get("/sample")
async def sample_sales(
    limit: Optional[int] = Query(None, ge=0, le=10000),
    repository: GoldRepository = Depends(get_repository),
) -> List[Dict[str, Any]]:
    """First rows of the sales fact table."""
    if limit is None:
        limit = get_settings().analytics.sample_rows
    return (await repository.sample_sales(limit)).to_dicts()
