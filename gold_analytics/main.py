"""
FastAPI Application

Main entry point for the Gold Layer Analytics API.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
import structlog

from gold_analytics.config import get_settings
from gold_analytics.config.logging import configure_logging
from gold_analytics.database.connection import close_database, init_database
from gold_analytics.serving.api.main import create_api_app

settings = get_settings()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    configure_logging()
    logger.info("Starting Gold Layer Analytics API", environment=settings.app_env)

    try:
        await init_database()
    except Exception as e:
        logger.warning("Database init failed", error=str(e))

    yield

    logger.info("Shutting down")
    await close_database()


app = create_api_app(lifespan=lifespan)


@app.get("/api/v1/info")
async def api_info():
    """API information endpoint."""
    return {
        "name": "Gold Layer Analytics API",
        "version": settings.version,
        "environment": settings.app_env,
        "documentation": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
