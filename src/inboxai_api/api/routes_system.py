"""
Service-level routes: liveness and Prometheus metrics.
"""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from inboxai_api.api.models import StatusResponse

router = APIRouter()
metrics_router = APIRouter()


@router.get("/health", response_model=StatusResponse, summary="Service liveness")
async def health() -> StatusResponse:
    """Process is up and serving requests."""
    return StatusResponse(status="ok")


@metrics_router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Prometheus exposition of the default registry."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
