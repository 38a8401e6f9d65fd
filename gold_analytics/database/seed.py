"""
Gold Layer Seeding

Loads a GoldLayer snapshot into the star-schema tables. Intended for local
development and tests against a scratch database; the production warehouse
is only ever read.
"""

import asyncio
from pathlib import Path
from typing import Any, Dict, List

import polars as pl
import structlog
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from gold_analytics.analytics.gold_layer import (
    CUSTOMERS_SCHEMA,
    FACT_SALES_SCHEMA,
    PRODUCTS_SCHEMA,
    GoldLayer,
)
from gold_analytics.database.models import Base, DimCustomer, DimProduct, FactSales

logger = structlog.get_logger(__name__)


async def create_tables(engine: AsyncEngine) -> None:
    """Create the star-schema tables if they do not exist"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Gold Layer tables created")


async def execute_batch_insert(
    session: AsyncSession,
    model: Any,
    records: List[Dict[str, Any]],
    chunk_size: int = 1000,
) -> None:
    """Insert records in chunks using Core insert"""
    if not records:
        return

    for i in range(0, len(records), chunk_size):
        chunk = records[i:i + chunk_size]
        await session.execute(insert(model), chunk)

    logger.info("Inserted records", table=model.__tablename__, rows=len(records))


async def seed_gold_layer(session: AsyncSession, gold: GoldLayer, chunk_size: int = 1000) -> Dict[str, int]:
    """
    Insert a Gold Layer snapshot and commit.

    Returns:
        Rows inserted per table
    """
    await execute_batch_insert(session, DimCustomer, gold.customers.to_dicts(), chunk_size)
    await execute_batch_insert(session, DimProduct, gold.products.to_dicts(), chunk_size)
    await execute_batch_insert(session, FactSales, gold.fact_sales.to_dicts(), chunk_size)
    await session.commit()

    logger.info("Gold Layer seeded", **gold.row_counts)
    return gold.row_counts


def read_gold_layer_csv(directory: Path) -> GoldLayer:
    """Read fact_sales.csv, dim_customers.csv and dim_products.csv from a directory"""
    def read(name: str, schema: Dict[str, pl.DataType]) -> pl.DataFrame:
        return pl.read_csv(directory / f"{name}.csv", schema=schema, try_parse_dates=True)

    return GoldLayer(
        fact_sales=read("fact_sales", FACT_SALES_SCHEMA),
        customers=read("dim_customers", CUSTOMERS_SCHEMA),
        products=read("dim_products", PRODUCTS_SCHEMA),
    )


async def main(directory: str = "./data/generated") -> None:
    from gold_analytics.config.logging import configure_logging
    from gold_analytics.database.connection import close_database, get_db, get_engine, init_database

    configure_logging()
    logger.info("Starting Gold Layer seeding", source=directory)

    await init_database()
    try:
        await create_tables(get_engine())
        gold = read_gold_layer_csv(Path(directory))
        async with get_db() as db:
            await seed_gold_layer(db, gold)
        logger.info("Gold Layer seeding completed")
    except Exception as e:
        logger.error("Seeding failed", error=str(e))
        raise
    finally:
        await close_database()


if __name__ == "__main__":
    asyncio.run(main())
