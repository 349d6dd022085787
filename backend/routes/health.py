"""
Liveness probe for the PG Community backend.

GET /health is mounted at the root (no /api prefix) and skips
authentication so deploy checks can reach it before any user exists.
"""

from fastapi import APIRouter, Request

from backend.config import settings
from backend.schemas.health import HealthResponse

router = APIRouter(tags=["system"])


@router.get("/health", response_model=HealthResponse, summary="Liveness probe")
async def health_check(request: Request) -> HealthResponse:
    return HealthResponse(environment=settings.ENVIRONMENT, version=request.app.version)
