"""
API Routes Module
"""
from .analytics import router as analytics_router
from .exploration import router as exploration_router
from .health import router as health_router
from .quality import router as quality_router
from .reports import router as reports_router

__all__ = [
    "analytics_router",
    "exploration_router",
    "health_router",
    "quality_router",
    "reports_router",
]
