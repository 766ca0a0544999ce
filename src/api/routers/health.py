"""Health check: DB, Redis and scanner state."""

from __future__ import annotations

import time

from fastapi import APIRouter, Depends
from loguru import logger
from pydantic import BaseModel

from src.api.dependencies import get_context
from src.db.redis import ping_redis
from src.scanner.context import ScannerContext
from src.scanner.exceptions import StoreError

router = APIRouter(prefix="/api", tags=["health"])


class HealthResponse(BaseModel):
    status: str
    timestamp: int
    db_ok: bool
    redis_ok: bool | None
    scanning: bool
    uptime_sec: int


@router.get("/health", response_model=HealthResponse)
async def health_check(context: ScannerContext = Depends(get_context)) -> HealthResponse:
    """Check DB and Redis connectivity. Redis is ``null`` when not configured."""
    db_ok = False
    try:
        await context.store.ping()
        db_ok = True
    except StoreError as e:
        logger.warning(f"[API] Health DB check failed: {e}")

    redis_ok = await ping_redis(context.redis)

    summary = context.metrics.get_summary()
    return HealthResponse(
        status="ok" if db_ok and redis_ok is not False else "degraded",
        timestamp=int(time.time() * 1000),
        db_ok=db_ok,
        redis_ok=redis_ok,
        scanning=context.scan_loop.is_running,
        uptime_sec=summary["uptime_sec"],
    )
