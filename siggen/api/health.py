"""Health endpoints: liveness and readiness."""
import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from siggen.services.generator_state import get_worker

router = APIRouter(tags=["health"])
logger = logging.getLogger("siggen.health")


@router.get("/health/live")
async def liveness():
    """Liveness: process is running. No dependencies checked."""
    return {"status": "ok"}


@router.get("/health/ready")
async def readiness():
    """Readiness: the stream listener is bound and the ticker is running."""
    try:
        status = get_worker().stats["status"]
    except RuntimeError as e:
        logger.warning("Readiness check failed: %s", e)
        status = "uninitialized"
    if status != "running":
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "worker": status},
        )
    return {"status": "ok"}
