"""
Blog API — Health Check Route
===============================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Runs SELECT 1 against the store through the application's Database
       handle. 200 when reachable, 503 when not.
"""

import logging

from fastapi import APIRouter, Request, Response, status

from blogapi import __version__
from blogapi.schemas.post import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    database = getattr(request.app.state, "database", None)
    connected = database is not None and await database.ping()

    if not connected:
        logger.warning("Health check: database unreachable")
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
    )
