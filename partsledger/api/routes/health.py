"""
Health check endpoints.
"""

import time

from fastapi import APIRouter

from partsledger import __version__
from partsledger.application.dto.responses import HealthResponse

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check with uptime."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
    )


@router.get("/db", response_model=HealthResponse)
async def db_health() -> HealthResponse:
    """
    Database health check.

    Tests SQLite connectivity and reports the schema version.
    """
    from partsledger.infrastructure.storage.sqlite import get_connection
    from partsledger.infrastructure.storage.sqlite.migrations.migrator import (
        get_current_version,
    )

    start = time.time()
    try:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM ledger_entries")
            row = await cursor.fetchone()
            schema_version = await get_current_version(conn)
        database = {
            "available": True,
            "latency_ms": round((time.time() - start) * 1000, 2),
            "schema_version": schema_version,
            "ledger_entries": row[0],
        }
        status = "healthy"
    except Exception as e:
        database = {"available": False, "error": str(e)}
        status = "unhealthy"

    return HealthResponse(
        status=status,
        version=__version__,
        uptime_seconds=time.time() - _start_time,
        database=database,
    )
