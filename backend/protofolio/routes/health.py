"""
Protofolio Backend — Health Check Route
=========================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Pings the record store with SELECT 1 and reports the result.

Status levels:
    - healthy:   Store answered the ping
    - unhealthy: Store unreachable (the endpoint itself still answers 200 so
                 the caller can read storeConnected)
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from protofolio import __version__
from protofolio.database import Database
from protofolio.schemas.record import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    database: Database | None = getattr(request.app.state, "database", None)
    connected = await database.ping() if database is not None else False
    if not connected:
        logger.warning("Health check: record store unreachable")

    started_at = getattr(request.app.state, "started_at", time.time())
    return HealthResponse(
        status="healthy" if connected else "unhealthy",
        store_connected=connected,
        version=__version__,
        timestamp=datetime.now(timezone.utc),
        uptime_seconds=round(time.time() - started_at, 2),
    )
