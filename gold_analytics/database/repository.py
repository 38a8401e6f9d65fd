"""
Gold Layer Repository

Read-only access to the star schema. Issues plain, dialect-portable SELECTs
and hands results over as polars DataFrames.
"""

import time
from typing import Any, Dict, List, Optional

import polars as pl
import structlog
from sqlalchemy import inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from gold_analytics.analytics.gold_layer import (
    CUSTOMERS_SCHEMA,
    FACT_SALES_SCHEMA,
    PRODUCTS_SCHEMA,
    GoldLayer,
    frame_from_records,
)
from gold_analytics.database.models import GOLD_SCHEMA, DimCustomer, DimProduct, FactSales

logger = structlog.get_logger(__name__)


def _gold_schema(sync_conn) -> Optional[str]:
    """Schema the ``gold`` models are translated to on this connection"""
    translate_map = sync_conn.get_execution_options().get("schema_translate_map") or {}
    return translate_map.get(GOLD_SCHEMA, GOLD_SCHEMA)


class GoldRepository:
    """
    Loads Gold Layer tables through an async session.

    Example:
        async with get_db() as db:
            gold = await GoldRepository(db).load()
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _fetch(self, model: Any, schema: Dict[str, pl.DataType], limit: Optional[int] = None) -> pl.DataFrame:
        columns = [getattr(model, name) for name in schema]
        stmt = select(*columns)
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self.session.execute(stmt)
        rows = result.all()
        return frame_from_records(rows, schema)

    async def load_fact_sales(self) -> pl.DataFrame:
        return await self._fetch(FactSales, FACT_SALES_SCHEMA)

    async def load_customers(self) -> pl.DataFrame:
        return await self._fetch(DimCustomer, CUSTOMERS_SCHEMA)

    async def load_products(self) -> pl.DataFrame:
        return await self._fetch(DimProduct, PRODUCTS_SCHEMA)

    async def sample_sales(self, limit: int = 100) -> pl.DataFrame:
        """First ``limit`` fact rows, for inspection"""
        if limit < 0:
            raise ValueError("limit must be non-negative")
        return await self._fetch(FactSales, FACT_SALES_SCHEMA, limit=limit)

    async def load(self) -> GoldLayer:
        """Load all three tables into a GoldLayer snapshot"""
        start = time.perf_counter()
        try:
            gold = GoldLayer(
                fact_sales=await self.load_fact_sales(),
                customers=await self.load_customers(),
                products=await self.load_products(),
            )
        except Exception as e:
            logger.error("Failed to load Gold Layer", error=str(e), error_type=type(e).__name__)
            raise

        logger.info(
            "Gold Layer loaded",
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
            **gold.row_counts,
        )
        return gold

    async def list_tables(self, schema: Optional[str] = None) -> List[str]:
        """Tables and views in ``schema`` (the Gold Layer schema when None)"""
        conn = await self.session.connection()

        def _inspect(sync_conn) -> List[str]:
            inspector = inspect(sync_conn)
            schema_name = schema or _gold_schema(sync_conn)
            return sorted(inspector.get_table_names(schema=schema_name) + inspector.get_view_names(schema=schema_name))

        return await conn.run_sync(_inspect)

    async def list_columns(self, table_name: str, schema: Optional[str] = None) -> List[Dict[str, Any]]:
        """Column name, type and nullability for one table"""
        conn = await self.session.connection()

        def _inspect(sync_conn) -> List[Dict[str, Any]]:
            inspector = inspect(sync_conn)
            schema_name = schema or _gold_schema(sync_conn)
            return [
                {
                    "column_name": column["name"],
                    "data_type": str(column["type"]),
                    "is_nullable": column.get("nullable", True),
                }
                for column in inspector.get_columns(table_name, schema=schema_name)
            ]

        return await conn.run_sync(_inspect)
