"""FastAPI application factory for the API preview service."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from apipreview import __version__
from apipreview.api.deps import build_services, get_services, init_services, reset_services
from apipreview.api.middleware import RequestBodyLimitMiddleware, RequestTimingMiddleware
from apipreview.api.routers import document, preview
from apipreview.api.schemas import HealthResponse
from apipreview.settings import Settings

logger = logging.getLogger("apipreview.api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Build services, start health polling, and load the document in preview mode."""
    settings: Settings = app.state.settings
    services = build_services(settings)
    init_services(services)
    services.health.start()
    if settings.mode == "preview":
        await services.controller.load_latest()
    try:
        yield
    finally:
        await services.health.stop()
        await services.controller.drain()
        reset_services()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="API Preview",
        description="Builds YAML API descriptions live and reports classified diagnostics.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Middleware
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(RequestBodyLimitMiddleware)

    app.include_router(document.router, tags=["document"])
    app.include_router(preview.router, prefix="/preview", tags=["preview"])

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(
            status="ok",
            version=__version__,
            backend_healthy=get_services().health.is_healthy(),
        )

    return app


def main() -> None:
    """Run the REST API server using settings from environment / .env file."""
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    logger.info(
        "API Preview Server v%s starting (host=%s, port=%d, mode=%s)",
        __version__, settings.api_server_host, settings.effective_port, settings.mode,
    )

    uvicorn.run(
        "apipreview.api.app:create_app",
        factory=True,
        host=settings.api_server_host,
        port=settings.effective_port,
        log_level=settings.log_level.lower(),
    )
