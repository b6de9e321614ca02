"""
Fauna API: Health Check Route
================================

What:  Health check endpoint for monitoring and container probes.
How:   Sends `ping` to MongoDB through the application's client and reports
       the aggregate status with the service version and uptime.

Status levels:
    healthy:    store answered the ping (HTTP 200)
    unhealthy:  store unreachable or client not initialized (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from fauna_api import __version__
from fauna_api.database import ping
from fauna_api.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Store unreachable", "model": HealthResponse}},
    summary="Service health check",
    description="Returns the health of the service and its MongoDB connection.",
)
async def health_check(request: Request) -> JSONResponse:
    client = getattr(request.app.state, "mongo_client", None)
    connected = client is not None and await ping(client)
    if not connected:
        logger.warning("Health check: database unreachable")

    body = HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    return JSONResponse(status_code=200 if connected else 503, content=body.model_dump())
