"""
Health and readiness endpoints for load balancers and Kubernetes.
No auth required; keep payload minimal for fast checks.
"""

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from core.dependencies import DatabaseDep, SettingsDep

router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    """Minimal health payload for probes."""

    status: str = "ok"
    service: str = "qtmap-settings"


class ReadinessResponse(BaseModel):
    """Readiness: one entry per dependency."""

    ready: bool = True
    checks: dict[str, str] = {}

    model_config = {"extra": "forbid"}


@router.get("", response_model=HealthResponse)
async def health(settings: SettingsDep) -> HealthResponse:
    """Liveness: is the process alive."""
    return HealthResponse(service=settings.APP_NAME)


@router.get("/ready", response_model=ReadinessResponse)
async def ready(database: DatabaseDep, response: Response) -> ReadinessResponse:
    """Readiness: 503 until the account store answers."""
    store_ok = await database.ping()
    checks = {"config": "loaded", "database": "ok" if store_ok else "unreachable"}
    if not store_ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return ReadinessResponse(ready=store_ok, checks=checks)


@router.get("/live")
async def live(response: Response) -> None:
    """
    Minimal live check: 200 with no body. For Nginx/Cloudflare health checks.
    """
    response.status_code = 200
