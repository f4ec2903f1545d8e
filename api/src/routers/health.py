"""
Health endpoints for orchestrator probes.

Liveness answers as long as the process serves HTTP. Readiness also
requires a working database connection.
"""

import structlog
from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from api.src.database import PostgresProbe
from api.src.dependencies import get_probe
from api.src.models.common import HealthResponse

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/v1", tags=["Health"])


@router.get("/liveness", response_class=Response)
async def liveness() -> Response:
    """Unconditional 200 with an empty body."""
    return Response(status_code=status.HTTP_200_OK)


@router.get(
    "/readiness",
    response_model=HealthResponse,
    responses={500: {"model": HealthResponse, "description": "Database unreachable"}}
)
async def readiness(probe: PostgresProbe = Depends(get_probe)) -> JSONResponse:
    """
    Readiness check endpoint.

    Pings the database through the connection pool.
    """
    try:
        await probe.check()
    except Exception as e:
        logger.error("readiness_check_failed", error=str(e))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"status": "db not ready"}
        )

    return JSONResponse(status_code=status.HTTP_200_OK, content={"status": "ok"})
