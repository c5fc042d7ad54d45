"""
Liveness endpoint.

No authentication; no dependency checks (there is no external dependency
to check - sessions live in process memory).
"""
import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from medpanel import __version__
from medpanel.core.datetime_utils import format_iso, utc_now
from medpanel.core.dependencies import get_session_store
from medpanel.services.session_store import SessionStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """Response model for /health endpoint."""
    status: str  # "healthy"
    version: str
    timestamp: str  # ISO 8601 UTC
    live_sessions: int


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Check if the application is running. Returns immediately.",
)
async def health_check(store: SessionStore = Depends(get_session_store)) -> HealthResponse:
    """Liveness probe - always 200 while the process is up."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=format_iso(utc_now()),
        live_sessions=len(store),
    )
