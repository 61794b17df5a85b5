"""
FastAPI application serving the exporter's metrics and health endpoints.

- ``GET {metrics_path}``: Prometheus exposition of every sink that has been
  observed at least once.  Reading the registry never triggers a fetch.
- ``GET /health``: JSON poll status from PollHealth.

The poll loop runs as a background task for the lifetime of the app: it is
started in the lifespan and stopped by setting its shutdown event when the
server exits.

CHANGELOG:
- 2026-10-15: Initial creation (STORY-009)

TODO:
- None
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import APIRouter, FastAPI, Request, Response
from prometheus_client.exposition import choose_encoder

from exporter.src.config import ExporterSettings
from exporter.src.fetcher import Fetcher
from exporter.src.health import PollHealth
from exporter.src.main import poll_loop
from exporter.src.sinks import SinkRegistry, build_collector_registry

logger = logging.getLogger(__name__)

health_router = APIRouter(tags=["health"])


@health_router.get("/health")
async def health(request: Request) -> dict[str, Any]:
    """Return the poll status.

    Returns:
        dict: PollHealth snapshot.  ``status`` is ``"ok"`` after a
        successful tick and ``"degraded"`` while ticks are failing.
    """
    return request.app.state.health.snapshot()


def _metrics_router(path: str) -> APIRouter:
    router = APIRouter(tags=["metrics"])

    @router.get(path)
    def metrics(request: Request) -> Response:
        """Render the sink registry in the format the scraper accepts."""
        encoder, content_type = choose_encoder(request.headers.get("accept"))
        return Response(
            content=encoder(request.app.state.collector_registry),
            media_type=content_type,
        )

    return router


def create_app(
    settings: ExporterSettings,
    *,
    registry: SinkRegistry | None = None,
    health: PollHealth | None = None,
    fetcher: Fetcher | None = None,
    run_poller: bool = True,
) -> FastAPI:
    """Build the exporter application.

    Args:
        settings: Loaded exporter configuration.
        registry: Sinks to expose; a fresh registry when omitted.
        health: Health tracker; built from ``settings.health_path`` when
            omitted.
        fetcher: Device fetcher; built from ``settings.fetch_timeout_s`` when
            omitted.
        run_poller: Start the poll loop in the lifespan.  Disabled in tests
            that only exercise the endpoints.

    Returns:
        FastAPI: The configured application.
    """
    registry = registry if registry is not None else SinkRegistry()
    health = health if health is not None else PollHealth(settings.health_path or None)
    fetcher = fetcher if fetcher is not None else Fetcher(timeout_s=settings.fetch_timeout_s)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Start the poll loop on startup and stop it on shutdown."""
        if not run_poller:
            yield
            return

        shutdown_event = asyncio.Event()
        task = asyncio.create_task(
            poll_loop(
                fetcher=fetcher,
                url=settings.device_url,
                registry=registry,
                poll_interval_s=settings.poll_interval_s,
                shutdown_event=shutdown_event,
                health=health,
            )
        )
        logger.info("Exporter ready, serving metrics on %s", settings.metrics_path)
        try:
            yield
        finally:
            logger.info("Exporter shutting down")
            shutdown_event.set()
            await task

    app = FastAPI(
        title="StecaGrid Exporter",
        description="Prometheus exporter for StecaGrid inverter measurements.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.registry = registry
    app.state.collector_registry = build_collector_registry(registry)
    app.state.health = health

    app.include_router(health_router)
    app.include_router(_metrics_router(settings.metrics_path))
    return app
