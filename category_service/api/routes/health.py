"""Health check endpoints.

Provides health status for container probes and monitoring.
"""

from fastapi import APIRouter, Request, Response, status

from category_service import __version__
from category_service.infra.logging import get_logger
from category_service.schemas.common import HealthResponse

router = APIRouter()
logger = get_logger(__name__)

SERVICE_NAME = "category-service"


def _health(request: Request, status_text: str, checks: dict[str, bool]) -> HealthResponse:
    return HealthResponse(
        status=status_text,
        service=SERVICE_NAME,
        version=__version__,
        environment=request.app.state.settings.environment,
        checks=checks,
    )


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    """Basic health check.

    Returns 200 if service is running. No dependency checks.
    """
    return _health(request, "healthy", {})


@router.get("/health/ready", response_model=HealthResponse)
async def health_ready(request: Request, response: Response) -> HealthResponse:
    """Readiness check.

    Verifies the database answers. Returns 503 when it does not so the
    instance is taken out of rotation.
    """
    checks = {"database": await request.app.state.db.verify_connection()}

    all_healthy = all(checks.values())
    if not all_healthy:
        logger.warning("Readiness check failed", checks=checks)
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return _health(request, "healthy" if all_healthy else "degraded", checks)


@router.get("/health/live", response_model=HealthResponse)
async def health_live(request: Request) -> HealthResponse:
    """Liveness check.

    Basic check that service is responding.
    """
    return _health(request, "healthy", {"alive": True})
