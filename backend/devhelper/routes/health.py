"""
DevHelper Backend — Health Check Route
========================================

Status levels:
    healthy    store and text generator reachable (200)
    degraded   text generator unreachable; CRUD still works (200)
    unhealthy  store unreachable (503)
"""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from devhelper import __version__
from devhelper.schemas.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/health", response_model=HealthResponse, summary="Service health check")
async def health_check(request: Request):
    database = request.app.state.database
    generator = request.app.state.generator

    db_ok = await database.ping()
    try:
        generator_ok = await generator.health_check()
    except Exception as e:
        logger.warning("Health check: text generator raised: %s", str(e))
        generator_ok = False

    if not db_ok:
        overall = "unhealthy"
    elif not generator_ok:
        overall = "degraded"
    else:
        overall = "healthy"

    body = HealthResponse(
        status=overall,
        version=__version__,
        database="connected" if db_ok else "disconnected",
        generator="available" if generator_ok else "unavailable",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    return JSONResponse(
        status_code=503 if overall == "unhealthy" else 200,
        content=body.model_dump(),
    )
