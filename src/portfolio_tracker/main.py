"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from portfolio_tracker.app_context import AppContext
from portfolio_tracker.config.logging_config import setup_logging
from portfolio_tracker.api.routers import (
    auth_router,
    investments_router,
    quotes_router,
    transactions_router,
)
from portfolio_tracker.core.exceptions import AppError, NotFoundError, PermissionDeniedError


def _status_for(exc: AppError) -> int:
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, PermissionDeniedError):
        return 403
    return 400


def create_app(context: Optional[AppContext] = None) -> FastAPI:
    """Build the API around a context (a default one is created if omitted)."""
    context = context or AppContext()
    settings = context.settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        # Startup
        setup_logging(settings)
        if settings.refresh_enabled:
            context.scheduler.start()
        yield
        # Shutdown
        await context.aclose()

    app = FastAPI(
        title=settings.app_name,
        description="Shared two-user portfolio tracker with multi-provider quotes",
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.context = context

    # Include routers
    app.include_router(auth_router)
    app.include_router(quotes_router)
    app.include_router(investments_router)
    app.include_router(transactions_router)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """Global handler for application errors."""
        return JSONResponse(
            status_code=_status_for(exc),
            content={"error": exc.code, "message": exc.message},
        )

    @app.get("/health")
    def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.get("/")
    def root() -> dict[str, str]:
        """Root endpoint with API info."""
        return {
            "app": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs",
        }

    return app
