"""
Health check endpoints.
"""

from fastapi import APIRouter, Request, Response, status
from pydantic import BaseModel

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str


class ReadinessResponse(BaseModel):
    """Readiness check response with shard status."""

    status: str
    shards: int
    synced: bool


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check endpoint."""
    return HealthResponse(status="healthy")


@router.get("/health/live", response_model=HealthResponse)
async def liveness_check() -> HealthResponse:
    """Liveness probe for Kubernetes."""
    return HealthResponse(status="alive")


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(request: Request, response: Response) -> ReadinessResponse:
    """
    Readiness probe for Kubernetes.

    Ready once every shard finished its initial listing.
    """
    exporter = request.app.state.exporter
    synced = exporter.synced

    if not synced:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return ReadinessResponse(
        status="ready" if synced else "not_ready",
        shards=len(exporter.shards),
        synced=synced,
    )
