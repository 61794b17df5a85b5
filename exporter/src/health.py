"""
Poll health tracker for the exporter.

Keeps the outcome of the most recent poll ticks in memory so the ``/health``
endpoint can report them:

- last_poll_ts: ISO timestamp of the most recent tick, success or failure.
- last_success_ts: ISO timestamp of the most recent successful tick.
- consecutive_failures: Failed ticks since the last success.
- last_error: Kind and detail of the most recent failure, or None.
- sinks_updated: Sinks updated by the most recent successful tick.
- device: Identity block of the last successfully parsed document.

When a path is configured the same JSON is rewritten on every change, which
gives Docker HEALTHCHECK a file to inspect.  The file is replaced atomically
through a sibling temp file.

CHANGELOG:
- 2026-10-14: Initial creation (STORY-008)

TODO:
- None
"""

from __future__ import annotations

import json
import os
import threading
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from exporter.src.models import DeviceInfo


class PollHealth:
    """Records poll outcomes and optionally mirrors them to a JSON file.

    Args:
        path: Optional filesystem path for the health JSON file.  Accepts
            str or Path.  Nothing is written when ``None``.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path else None
        self._lock = threading.Lock()
        self._last_poll_ts: str | None = None
        self._last_success_ts: str | None = None
        self._consecutive_failures: int = 0
        self._last_error: dict[str, str] | None = None
        self._sinks_updated: int | None = None
        self._device: dict[str, str | None] | None = None

    def record_success(self, updated: int, device: DeviceInfo | None = None) -> None:
        """Record a successful tick and write the health file.

        Args:
            updated: Number of sinks updated by the tick.
            device: Identity block of the parsed document, if any.
        """
        now = datetime.now(tz=UTC).isoformat()
        with self._lock:
            self._last_poll_ts = now
            self._last_success_ts = now
            self._consecutive_failures = 0
            self._last_error = None
            self._sinks_updated = updated
            if device is not None:
                self._device = device.model_dump()
        self._write()

    def record_failure(self, kind: str, detail: str) -> None:
        """Record a failed tick and write the health file.

        Args:
            kind: Error kind, e.g. ``"fetch"`` or ``"parse"``.
            detail: Human-readable cause.
        """
        with self._lock:
            self._last_poll_ts = datetime.now(tz=UTC).isoformat()
            self._consecutive_failures += 1
            self._last_error = {"kind": kind, "detail": detail}
        self._write()

    def snapshot(self) -> dict[str, Any]:
        """Return the current health state as a JSON-serialisable dict."""
        with self._lock:
            return {
                "status": "ok" if self._consecutive_failures == 0 else "degraded",
                "last_poll_ts": self._last_poll_ts,
                "last_success_ts": self._last_success_ts,
                "consecutive_failures": self._consecutive_failures,
                "last_error": self._last_error,
                "sinks_updated": self._sinks_updated,
                "device": self._device,
            }

    def _write(self) -> None:
        if self.path is None:
            return
        # Readers must never see a half-written file.
        tmp_path = self.path.with_name(f".{self.path.name}.tmp")
        tmp_path.write_text(json.dumps(self.snapshot()))
        os.replace(tmp_path, self.path)
