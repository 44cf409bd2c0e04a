"""
NotePolish Backend - Health Check Route
=========================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Checks the database (SELECT 1) and the completion provider (model list).

Status levels:
    - healthy:   All dependencies operational (HTTP 200)
    - degraded:  Provider unreachable; notes can still be saved and listed (HTTP 200)
    - unhealthy: Database unreachable (HTTP 200 with status flag)
"""

import logging
import time

from fastapi import APIRouter
from sqlalchemy import text

from notepolish import __version__
from notepolish.database import engine
from notepolish.schemas.note import HealthResponse
from notepolish.services.openrouter_service import openrouter_provider

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/", summary="Service banner")
async def root() -> dict:
    return {
        "success": True,
        "message": "AI Notes Beautifier & Summarizer Backend is running.",
    }


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    db_status = "connected"
    provider_status = "available"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    if not await openrouter_provider.health_check():
        provider_status = "unavailable"
        overall = "degraded" if overall != "unhealthy" else overall

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        completion_provider=provider_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
