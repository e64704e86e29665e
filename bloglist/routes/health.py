"""
Bloglist Backend: Health Check Route
=====================================

What:  Health check endpoint for monitoring and load balancer health checks.
How:   Pings the database with SELECT 1 and reports aggregate status.
Who:   Called by container health checks, load balancers and monitoring.

Status levels:
    - healthy:   Database reachable (HTTP 200)
    - unhealthy: Database unreachable (HTTP 503, stop routing traffic)
"""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from bloglist import __version__
from bloglist.schemas.blog import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(request: Request):
    """Check database connectivity and return aggregate status with uptime."""
    database = request.app.state.database
    connected = await database.ping()

    health = HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )

    if not connected:
        logger.warning("Health check: database unreachable")
        return JSONResponse(status_code=503, content=health.model_dump())
    return health
