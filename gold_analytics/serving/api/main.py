"""
FastAPI Application Factory

Creates and configures the main API application.
"""

from typing import Any, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from gold_analytics.config import get_settings
from gold_analytics.serving.api.middleware import RequestLoggingMiddleware
from gold_analytics.serving.api.routes import (
    analytics_router,
    exploration_router,
    health_router,
    quality_router,
    reports_router,
)


def create_api_app(lifespan: Optional[Any] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        lifespan: Optional lifespan context manager (startup/shutdown)

    Returns:
        Configured FastAPI app instance
    """
    settings = get_settings()

    app = FastAPI(
        title="Gold Layer Analytics API",
        description="Read-only statistics, trends, segments and reporting views over the Gold Layer",
        version=settings.version,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(health_router, prefix="/api/v1", tags=["Health"])
    app.include_router(exploration_router, prefix="/api/v1/exploration", tags=["Exploration"])
    app.include_router(analytics_router, prefix="/api/v1/analytics", tags=["Analytics"])
    app.include_router(reports_router, prefix="/api/v1/reports", tags=["Reports"])
    app.include_router(quality_router, prefix="/api/v1/quality", tags=["Quality"])

    return app
