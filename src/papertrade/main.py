"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from papertrade.app_context import TradingContext
from papertrade.config.settings import get_settings
from papertrade.config.logging_config import setup_logging
from papertrade.api.routers import accounts_router, trades_router, analytics_router, quotes_router
from papertrade.core.exceptions import AppError


def create_app(context: Optional[TradingContext] = None) -> FastAPI:
    """Build the app; a prepared context can be supplied (tests do)."""
    settings = context.settings if context is not None else get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        setup_logging(settings.log_level)
        ctx = context or TradingContext(settings)
        ctx.start()
        app.state.context = ctx
        yield
        ctx.close()

    app = FastAPI(
        title=settings.app_name,
        description="Paper trading ledger with day-trading compliance and portfolio analytics",
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.include_router(accounts_router)
    app.include_router(trades_router)
    app.include_router(analytics_router)
    app.include_router(quotes_router)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """Global handler for application errors."""
        return JSONResponse(
            status_code=exc.status_code,
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


app = create_app()
