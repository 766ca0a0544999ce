"""Scan control: start, stop, status."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from config.settings import settings
from src.api.app import limiter
from src.api.dependencies import get_scan_loop
from src.scanner.scan_loop import ScanLoop

router = APIRouter(prefix="/api/scan", tags=["scan"])


@router.post("/start")
@limiter.limit(settings.api_scan_rate_limit)
async def start_scan(
    request: Request,
    filters: dict[str, Any] | None = Body(None),
    scan_loop: ScanLoop = Depends(get_scan_loop),
) -> dict[str, Any]:
    """Start scanning; ``filters`` is a partial policy merged into the current one.

    A malformed override raises PolicyValidationError (422) and the scan
    does not start. Starting while already scanning keeps the active policy.
    """
    policy = await scan_loop.start(filters)
    return {"status": "scanning", "filters": policy.to_public()}


@router.post("/stop")
@limiter.limit(settings.api_scan_rate_limit)
async def stop_scan(
    request: Request,
    scan_loop: ScanLoop = Depends(get_scan_loop),
) -> dict[str, Any]:
    await scan_loop.stop()
    return {"status": "stopped"}


@router.get("/status")
async def scan_status(scan_loop: ScanLoop = Depends(get_scan_loop)) -> dict[str, Any]:
    return scan_loop.status()
