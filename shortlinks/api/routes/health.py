"""Health check endpoints for monitoring application status."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from shortlinks.api import schemas
from shortlinks.api.dependencies import get_link_store
from shortlinks.core.config import settings
from shortlinks.repositories.base import LinkStore

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=schemas.HealthResponse,
    summary="Get system health status",
    responses={503: {"model": schemas.HealthResponse, "description": "Storage unreachable"}},
)
async def health_check(link_store: LinkStore = Depends(get_link_store)):
    """Check that the link store is reachable."""
    healthy = await link_store.ping()
    body = schemas.HealthResponse(
        status="healthy" if healthy else "unhealthy",
        version=settings.APP_VERSION,
        storage=type(link_store).__name__,
    )
    if not healthy:
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body.model_dump())
    return body


@router.get(
    "/health/live", 
    status_code=status.HTTP_200_OK,
    summary="Liveness probe",
)
async def liveness_probe():
    """Simple check that application is running."""
    return {"alive": True}
