"""Root API router with health endpoints and module mounting."""

from datetime import UTC, datetime

import structlog
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from orgmanager.api.dependencies import AppDatabase
from orgmanager.core.auth.routes import router as auth_router
from orgmanager.core.database import DatabaseNotConnected
from orgmanager.modules.organizations.routes import router as organizations_router


logger = structlog.get_logger()


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    timestamp: datetime


class ReadinessResponse(BaseModel):
    """Readiness check response schema."""

    status: str
    checks: dict[str, str]


api_router = APIRouter()
health_router = APIRouter(tags=["health"])


@health_router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Returns 200 with the current server time if the process is running.",
)
async def liveness() -> HealthResponse:
    """Liveness probe endpoint."""
    return HealthResponse(status="ok", timestamp=datetime.now(UTC))


@health_router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description="Checks database connectivity.",
)
async def readiness(database: AppDatabase) -> JSONResponse:
    """Readiness probe endpoint."""
    checks: dict[str, str] = {}

    try:
        await database.ping()
        checks["database"] = "ok"
    except (DatabaseNotConnected, SQLAlchemyError, OSError) as exc:
        logger.warning("readiness_check_failed", check="database", error=str(exc))
        checks["database"] = "unavailable"

    all_ok = all(v == "ok" for v in checks.values())
    return JSONResponse(
        status_code=status.HTTP_200_OK if all_ok else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if all_ok else "degraded",
            "checks": checks,
        },
    )


api_router.include_router(health_router)
api_router.include_router(organizations_router)
api_router.include_router(auth_router)
