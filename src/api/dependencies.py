"""FastAPI dependency injection: scanner context, store, scan loop."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from src.scanner.context import ScannerContext
from src.scanner.scan_loop import ScanLoop
from src.scanner.store import Store


def get_context(request: Request) -> ScannerContext:
    """Return the scanner context built at startup."""
    context = getattr(request.app.state, "scanner", None)
    if context is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Scanner not initialized",
        )
    return context


def get_store(request: Request) -> Store:
    return get_context(request).store


def get_scan_loop(request: Request) -> ScanLoop:
    return get_context(request).scan_loop
