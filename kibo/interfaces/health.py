"""
Health check router.

Liveness probe for the demo app. Its JSON response goes through the
envelope like any other route.
"""

from fastapi import APIRouter, Request

from kibo.interfaces.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse, summary="Health check")
def health_check(request: Request) -> HealthResponse:
    """Report status and the running app version."""
    return HealthResponse(status="ok", version=request.app.version)
