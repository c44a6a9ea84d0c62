"""
Health check endpoints.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from ...application.ports.repositories.clinic_repositories import ClinicRepositories
from ...core.config import get_settings
from ..deps import get_repositories
from ..schemas.common import ApiResponse
from ..utils.responses import ok

router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    timestamp: datetime
    version: str
    service: str


@router.get("", response_model=ApiResponse[HealthResponse])
async def health_check(request: Request):
    """
    Health check endpoint.

    Returns the current status of the service.
    """
    settings = get_settings()
    return ok(request, data=HealthResponse(
        status="healthy",
        timestamp=datetime.utcnow(),
        version=settings.app_version,
        service=settings.app_name,
    ), message="OK")


@router.get("/ready", response_model=ApiResponse[dict])
async def readiness_check(request: Request, repositories: ClinicRepositories = Depends(get_repositories)):
    """
    Readiness check endpoint.

    Reports whether persistence is reachable and which backends are configured.
    """
    settings = get_settings()
    checks = {}

    try:
        checks["database"] = "ok" if await repositories.is_available() else "unreachable"
    except Exception as e:
        checks["database"] = f"error: {str(e)[:50]}"

    checks["database_backend"] = settings.database.backend
    checks["azure_openai"] = "configured" if settings.azure_openai.is_configured else "not_configured"
    checks["rag_server"] = settings.retrieval.base_url

    ready = checks["database"] == "ok"
    return ok(request, data={"ready": ready, "checks": checks}, message="READY" if ready else "NOT_READY")
