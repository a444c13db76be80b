"""
FastAPI application serving the exporter's metrics.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST

from config.settings import AppSettings, get_settings
from kubestate.exporter import Exporter, build_exporter
from kubestate.utils.logging import get_logger, setup_logging

from .routes import health

logger = get_logger(__name__)


def create_app(
    settings: AppSettings | None = None,
    exporter: Exporter | None = None,
) -> FastAPI:
    """
    Create the exporter application.

    Args:
        settings: Application settings (cached settings if None)
        exporter: Pre-built exporter; built from settings if None
    """
    settings = settings or get_settings()
    if exporter is None:
        exporter = build_exporter(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Start shard sync on startup, stop it on shutdown."""
        logger.info("Starting kube-state exporter", env=settings.env)
        exporter.start()

        yield

        logger.info("Shutting down kube-state exporter")
        exporter.stop()

    app = FastAPI(
        title="Kube State Exporter",
        description="Kubernetes object state as Prometheus metrics",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url=None,
    )
    app.state.exporter = exporter

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler."""
        logger.exception("Unhandled exception", path=request.url.path, error=str(exc))
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    @app.get("/metrics")
    def prometheus_metrics() -> Response:
        """Prometheus metrics endpoint."""
        return Response(content=exporter.generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(health.router)

    return app


def main() -> None:
    """Entry point for running the exporter."""
    import uvicorn

    settings = get_settings()
    setup_logging(settings)

    uvicorn.run(
        "kubestate.api.main:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
