"""FastAPI application factory for the scanner API."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.middleware.cors import CORSMiddleware

from config.settings import settings
from src.api.middleware import SecurityHeadersMiddleware
from src.scanner.context import ScannerContext, build_context
from src.scanner.exceptions import PolicyValidationError, StoreError

# Rate limiter (shared instance)
limiter = Limiter(key_func=get_remote_address)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the scanner context on startup unless one was injected."""
    owns_resources = getattr(app.state, "scanner", None) is None
    if owns_resources:
        from src.db.database import async_session_factory, init_db
        from src.db.redis import get_redis

        await init_db()
        redis = await get_redis()
        app.state.scanner = build_context(async_session_factory, redis=redis)
        logger.info("[API] Scanner context ready")

    try:
        yield
    finally:
        context: ScannerContext = app.state.scanner
        await context.scan_loop.stop()
        if owns_resources:
            from src.db.database import engine
            from src.db.redis import close_redis

            await close_redis()
            await engine.dispose()
        logger.info("[API] Shutdown complete")


async def _policy_error_handler(_request: Request, exc: PolicyValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"error": str(exc), "details": exc.errors},
    )


async def _store_error_handler(_request: Request, exc: StoreError) -> JSONResponse:
    logger.error(f"[API] Store error: {exc}")
    return JSONResponse(status_code=500, content={"error": str(exc)})


def create_app(context: ScannerContext | None = None) -> FastAPI:
    """Build and configure the FastAPI application.

    ``context`` injects a prebuilt scanner context (tests, embedding); when
    omitted the lifespan builds one from settings.
    """
    app = FastAPI(
        title="Solana Token Scanner API",
        version="0.1.0",
        docs_url="/api/docs" if settings.api_debug else None,
        redoc_url=None,
        openapi_url="/api/openapi.json" if settings.api_debug else None,
        lifespan=lifespan,
    )
    if context is not None:
        app.state.scanner = context

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(PolicyValidationError, _policy_error_handler)
    app.add_exception_handler(StoreError, _store_error_handler)

    # Security headers
    app.add_middleware(SecurityHeadersMiddleware)

    origins = [o.strip() for o in settings.api_cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # Import and include routers
    from src.api.routers.alerts import router as alerts_router
    from src.api.routers.health import router as health_router
    from src.api.routers.scan import router as scan_router
    from src.api.routers.stats import router as stats_router
    from src.api.routers.tokens import router as tokens_router
    from src.api.routers.ws import router as ws_router

    app.include_router(health_router)
    app.include_router(tokens_router)
    app.include_router(alerts_router)
    app.include_router(stats_router)
    app.include_router(scan_router)
    app.include_router(ws_router)

    return app
