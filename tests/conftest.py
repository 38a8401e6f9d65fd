"""
Test Suite Configuration

The fixture star schema is small enough to check every analysis by hand:

    customers 1..4 (AW00011000..AW00011003), customer 99 is missing
    products 1..5, products 4 and 5 never sold
    8 sales lines over 7 orders, SO5 has no order date

All date-relative results use AS_OF = 2014-06-15.
"""
from datetime import date
from typing import AsyncGenerator

import pytest
import structlog
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from gold_analytics.analytics.gold_layer import GoldLayer
from gold_analytics.analytics.segmentation import SegmentationRules
from gold_analytics.config import Settings
from gold_analytics.database.connection import create_engine_for_url
from gold_analytics.database.seed import create_tables

AS_OF = date(2014, 6, 15)

CUSTOMERS = [
    (1, "AW00011000", "Jon", "Yang", date(1971, 10, 6), "Male", "Australia"),
    (2, "AW00011001", "Eugene", "Huang", date(1976, 5, 10), "Male", "United States"),
    (3, "AW00011002", "Ruben", "Torres", date(2008, 2, 9), "Male", "Australia"),
    (4, "AW00011003", "Christy", "Zhu", date(1999, 2, 15), "Female", "Germany"),
]

PRODUCTS = [
    (1, 210, "Road-150 Red", "Bikes", "Road Bikes", 2171.0),
    (2, 211, "Mountain-200 Black", "Bikes", "Mountain Bikes", 1252.0),
    (3, 212, "Sport-100 Helmet", "Accessories", "Helmets", 13.0),
    (4, 213, "Touring Tire", "Accessories", "Tires and Tubes", 500.0),
    (5, 214, "Long-Sleeve Jersey", "Clothing", "Jerseys", 38.0),
]

FACT_SALES = [
    ("SO1", date(2011, 1, 10), 1, 1, 3000.0, 1),
    ("SO2", date(2012, 3, 5), 1, 2, 2500.0, 1),
    ("SO2", date(2012, 3, 5), 1, 3, 30.0, 2),
    ("SO3", date(2013, 2, 20), 2, 3, 35.0, 1),
    ("SO4", date(2013, 12, 1), 3, 1, 3500.0, 1),
    ("SO5", None, 2, 2, 2400.0, 1),
    ("SO6", date(2013, 4, 11), 99, 3, 40.0, 2),
    ("SO7", date(2012, 11, 15), 3, 3, 20.0, 1),
]


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Keep structlog configuration made by one test from leaking into the next"""
    yield
    structlog.reset_defaults()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(app_env="testing")


@pytest.fixture
def as_of() -> date:
    return AS_OF


@pytest.fixture
def rules() -> SegmentationRules:
    return SegmentationRules()


@pytest.fixture
def gold() -> GoldLayer:
    """Fixture Gold Layer snapshot"""
    return GoldLayer.from_records(FACT_SALES, CUSTOMERS, PRODUCTS)


@pytest.fixture
def empty_gold() -> GoldLayer:
    return GoldLayer.from_records([], [], [])


@pytest.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with the Gold Layer tables created"""
    engine = create_engine_for_url("sqlite+aiosqlite:///:memory:", schema_name=None)
    await create_tables(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
async def test_db(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session"""
    session_factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()
