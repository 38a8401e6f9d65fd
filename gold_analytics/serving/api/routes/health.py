"""
Health Check Endpoints

Liveness, readiness and an overall status for load balancers and
orchestrators.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Response
from pydantic import BaseModel

from gold_analytics.config import get_settings
from gold_analytics.database.connection import check_database_health, get_db
from gold_analytics.database.models import Base
from gold_analytics.database.repository import GoldRepository

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    version: str
    environment: str
    timestamp: datetime
    checks: Dict[str, Any]


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Always answers; ``degraded`` when the warehouse cannot be queried"""
    settings = get_settings()
    database = await check_database_health()

    return HealthResponse(
        status="healthy" if database["status"] == "healthy" else "degraded",
        version=settings.version,
        environment=settings.app_env,
        timestamp=datetime.now(timezone.utc),
        checks={"database": database},
    )


@router.get("/health/live")
async def liveness_check() -> Dict[str, str]:
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness_check(response: Response) -> Dict[str, Any]:
    """503 until the warehouse answers and holds all three Gold Layer tables"""
    if (await check_database_health())["status"] != "healthy":
        response.status_code = 503
        return {"status": "not_ready", "reason": "database_unavailable"}

    async with get_db() as db:
        present = set(await GoldRepository(db).list_tables())
    missing = sorted({table.name for table in Base.metadata.sorted_tables} - present)

    if missing:
        response.status_code = 503
        return {"status": "not_ready", "reason": "gold_tables_missing", "missing": missing}

    return {"status": "ready"}
