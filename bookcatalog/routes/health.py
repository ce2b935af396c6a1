"""
Book Catalog API: Health Check Route
====================================

What:  Liveness/readiness probe for Docker and load balancers.
How:   Pings MongoDB through the lifespan's connection.

Status levels:
    - healthy:   store answered the ping
    - unhealthy: store not connected or not answering (still HTTP 200, so
                 the probe itself never errors; monitors read `status`)
"""

import logging
import time
from typing import Optional

from fastapi import APIRouter, Depends

from bookcatalog import __version__
from bookcatalog.database import MongoConnection
from bookcatalog.dependencies import get_mongo_connection
from bookcatalog.schemas.book import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    mongo: Optional[MongoConnection] = Depends(get_mongo_connection),
) -> HealthResponse:
    reachable = mongo is not None and await mongo.ping()
    if not reachable:
        logger.warning("Health check: database unreachable")

    return HealthResponse(
        status="healthy" if reachable else "unhealthy",
        version=__version__,
        database="connected" if reachable else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
