"""
Health endpoint.

  GET /health -- Liveness probe (always returns 200 if process is alive)
"""

import time

from fastapi import APIRouter, Request

from ... import __version__
from ..models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def liveness(request: Request) -> HealthResponse:
    """Liveness probe -- returns 200 if the process is running."""
    engine = request.app.state.engine
    start_time = getattr(request.app.state, "start_time", time.time())
    return HealthResponse(
        status="healthy",
        version=__version__,
        oracle_enabled=engine.oracle_active,
        uptime_seconds=round(time.time() - start_time, 1),
    )
