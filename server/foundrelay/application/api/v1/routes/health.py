"""Health check endpoint."""

import time
from datetime import UTC, datetime

from fastapi import APIRouter

router = APIRouter(tags=["health"])

_PROCESS_STARTED = time.monotonic()


@router.get("/health")
async def health() -> dict:
    """Liveness probe. Unauthenticated and independent of the store."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "uptime": round(time.monotonic() - _PROCESS_STARTED, 3),
    }
