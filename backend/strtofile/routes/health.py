"""
StrToFile Backend — Health Check Route
========================================

What:  Liveness endpoint for container health checks and load balancers,
       plus the root redirect to the interactive API docs.
How:   The service has no external dependencies, so "healthy" means the
       process is up and answering.
"""

import logging
import time

from fastapi import APIRouter
from fastapi.responses import RedirectResponse

from strtofile import __version__
from strtofile.schemas.responses import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=__version__,
        uptime_seconds=round(time.time() - _start_time, 2),
    )


@router.get("/", include_in_schema=False)
async def root() -> RedirectResponse:
    return RedirectResponse(url="/docs")
