"""
Shared API Dependencies
"""

from datetime import date
from typing import Optional

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from gold_analytics.analytics.gold_layer import GoldLayer
from gold_analytics.analytics.segmentation import resolve_as_of
from gold_analytics.database.connection import get_db_dependency
from gold_analytics.database.repository import GoldRepository


async def get_repository(db: AsyncSession = Depends(get_db_dependency)) -> GoldRepository:
    return GoldRepository(db)


async def get_gold_layer(repository: GoldRepository = Depends(get_repository)) -> GoldLayer:
    """Load the Gold Layer once per request"""
    return await repository.load()


def get_as_of(
    as_of: Optional[date] = Query(None, description="Reference date for ages and recency (default: today)"),
) -> date:
    return resolve_as_of(as_of)
