"""
Exporter main loop for the StecaGrid Prometheus exporter.

Runs one asyncio poll loop: on every tick the Fetcher downloads
``/measurements.xml`` and the mapper applies it to the SinkRegistry.  Ticks
never overlap; a tick that runs longer than the poll interval delays the next
one.  A failed tick (FetchError or ParseError) is logged and skipped, and the
sinks keep their last-known values.

The metrics endpoint is served by FastAPI/uvicorn (see ``exporter.src.app``),
which starts the poll loop in its lifespan and reads the registry on every
scrape without ever triggering a fetch.

Structured JSON logging is used for all events.

CHANGELOG:
- 2026-10-15: Wire FastAPI app and uvicorn into the entrypoint (STORY-009)
- 2026-10-14: Record tick outcomes in PollHealth (STORY-008)
- 2026-10-14: Initial creation (STORY-007)

TODO:
- None
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from exporter.src.errors import FetchError, ParseError
from exporter.src.mapper import ingest

if TYPE_CHECKING:
    from exporter.src.fetcher import Fetcher
    from exporter.src.health import PollHealth
    from exporter.src.sinks import SinkRegistry

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Structured JSON logging setup
# ---------------------------------------------------------------------------


class JsonFormatter(logging.Formatter):
    """Minimal JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False)


def configure_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging for the exporter.

    Sets up the root logger with a JSON-formatted handler writing to stderr.

    Args:
        level: Root log level name, e.g. ``"INFO"``.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


# ---------------------------------------------------------------------------
# Startup config logging
# ---------------------------------------------------------------------------


def log_config_summary(settings: object) -> None:
    """Log a config summary at startup.

    Args:
        settings: An ExporterSettings instance (or any object with the same attrs).
    """
    logger.info(
        "Exporter starting with config: "
        "device_url=%s, poll_interval_s=%s, fetch_timeout_s=%s, "
        "listen_address=%s, listen_port=%s, metrics_path=%s, health_path=%s",
        settings.device_url,  # type: ignore[attr-defined]
        settings.poll_interval_s,  # type: ignore[attr-defined]
        settings.fetch_timeout_s,  # type: ignore[attr-defined]
        settings.listen_address,  # type: ignore[attr-defined]
        settings.listen_port,  # type: ignore[attr-defined]
        settings.metrics_path,  # type: ignore[attr-defined]
        settings.health_path or None,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Single-tick function (easily testable)
# ---------------------------------------------------------------------------


async def _poll_once(
    *,
    fetcher: Fetcher,
    url: str,
    registry: SinkRegistry,
    health: PollHealth | None,
) -> int | None:
    """Execute a single fetch-then-map tick.

    Catches all exceptions so that the caller's loop is never broken.  On
    any failure the registry is left untouched.

    Args:
        fetcher: The HTTP fetcher.
        url: Device URL to fetch.
        registry: Sinks to update.
        health: PollHealth instance, or None to skip health tracking.

    Returns:
        Number of sinks updated, or ``None`` if the tick failed.
    """
    try:
        body = await fetcher.fetch(url)
        document, updated = ingest(body, registry)
    except (FetchError, ParseError) as exc:
        logger.warning("Poll %s error: %s", exc.kind, exc)
        _record_failure(health, exc.kind, str(exc))
        return None
    except Exception as exc:
        logger.error("Poll cycle error", exc_info=True)
        _record_failure(health, "unexpected", repr(exc))
        return None

    logger.debug("Poll success: %d sinks updated", updated)
    if health is not None:
        try:
            health.record_success(updated, document.device)
        except Exception:
            logger.warning("Failed to write health file", exc_info=True)
    return updated


def _record_failure(health: PollHealth | None, kind: str, detail: str) -> None:
    if health is None:
        return
    try:
        health.record_failure(kind, detail)
    except Exception:
        logger.warning("Failed to write health file", exc_info=True)


# ---------------------------------------------------------------------------
# Loop runner
# ---------------------------------------------------------------------------


async def poll_loop(
    *,
    fetcher: Fetcher,
    url: str,
    registry: SinkRegistry,
    poll_interval_s: float,
    shutdown_event: asyncio.Event,
    health: PollHealth | None = None,
) -> None:
    """Run the poll loop until shutdown_event is set.

    Executes _poll_once, then waits for the remainder of poll_interval_s,
    checking the shutdown event between iterations.

    Args:
        fetcher: The HTTP fetcher.
        url: Device URL to fetch.
        registry: Sinks to update.
        poll_interval_s: Seconds between the starts of consecutive ticks.
        shutdown_event: Event to signal graceful shutdown.
        health: PollHealth instance, or None to skip health tracking.
    """
    logger.info("Poll loop started (interval=%ss, url=%s)", poll_interval_s, url)
    loop = asyncio.get_running_loop()
    while not shutdown_event.is_set():
        started = loop.time()
        await _poll_once(fetcher=fetcher, url=url, registry=registry, health=health)
        remaining = max(0.0, poll_interval_s - (loop.time() - started))
        # Use wait with timeout so we can check shutdown between sleeps
        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(shutdown_event.wait(), timeout=remaining)
    logger.info("Poll loop stopped")


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main() -> None:
    """Synchronous entrypoint: load config, build the app, serve it.

    uvicorn handles SIGTERM/SIGINT; the app lifespan then stops the poll
    loop.  Failure to bind the listen port is fatal.
    """
    import uvicorn

    from exporter.src.app import create_app
    from exporter.src.config import ExporterSettings

    settings = ExporterSettings()
    configure_logging(settings.log_level)
    log_config_summary(settings)

    app = create_app(settings)
    uvicorn.run(
        app,
        host=settings.listen_address,
        port=settings.listen_port,
        log_config=None,
        access_log=False,
    )


if __name__ == "__main__":
    main()
