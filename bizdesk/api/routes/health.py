"""
Health check endpoints.
"""

import time

from fastapi import APIRouter, Request

from bizdesk import __version__
from bizdesk.application.dto.responses import ComponentHealthResponse, HealthResponse

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


async def _database_health() -> ComponentHealthResponse:
    from bizdesk.infrastructure.storage.sqlite import get_connection_pool

    try:
        pool = await get_connection_pool()
    except Exception as e:
        return ComponentHealthResponse(name="sqlite", available=False, error=str(e))

    health = await pool.check()
    return ComponentHealthResponse(
        name="sqlite",
        available=health.available,
        latency_ms=health.latency_ms,
        in_use=health.in_use,
        error=health.error,
    )


def _scheduler_health(request: Request) -> ComponentHealthResponse:
    scheduler = getattr(request.app.state, "scheduler", None)
    if scheduler is None:
        return ComponentHealthResponse(
            name="reminder_sweep", available=False, error="scheduler disabled"
        )
    last = scheduler.last_result
    return ComponentHealthResponse(
        name="reminder_sweep",
        available=scheduler.running,
        latency_ms=last.duration_ms if last is not None else None,
    )


@router.get("", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """
    Service health check.

    Reports database reachability and whether the reminder sweep is ticking.
    """
    database = await _database_health()
    scheduler = _scheduler_health(request)

    if not database.available:
        overall = "unhealthy"
    elif not scheduler.available:
        overall = "degraded"
    else:
        overall = "healthy"

    return HealthResponse(
        status=overall,
        version=__version__,
        uptime_seconds=time.time() - _start_time,
        database=database,
        scheduler=scheduler,
    )
