"""API server: runs uvicorn inside the existing asyncio event loop."""

from __future__ import annotations

import uvicorn
from fastapi import FastAPI

from config.settings import settings


def build_server(app: FastAPI | None = None) -> uvicorn.Server:
    """Create a uvicorn server for the scanner API.

    ``uvicorn.Server.serve()`` is fully async, so the caller can run it as
    an asyncio task alongside other work.
    """
    if app is None:
        from src.api.app import create_app

        app = create_app()
    config = uvicorn.Config(
        app=app,
        host=settings.api_host,
        port=settings.api_port,
        log_level="warning",
        loop="none",  # use the existing event loop
        ws="websockets",
    )
    return uvicorn.Server(config)

