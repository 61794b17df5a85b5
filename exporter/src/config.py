"""
Exporter configuration loaded from environment variables.

Uses Pydantic BaseSettings for automatic env var loading and validation.
All configuration values come from environment variables or .env files;
only the inverter host is required.

CHANGELOG:
- 2026-10-12: Initial creation (STORY-001)

TODO:
- None
"""

import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings


class ExporterSettings(BaseSettings):
    """StecaGrid exporter configuration.

    Attributes:
        stecagrid_host: Inverter IP address / hostname on the local LAN.
        stecagrid_path: Path of the measurement document on the inverter.
        stecagrid_scheme: ``http`` or ``https``.  HTTPS certificates are not
            verified.
        poll_interval_s: Seconds between poll ticks (min 1).
        fetch_timeout_s: Per-request timeout in seconds.
        listen_address: Address the metrics server binds to.
        listen_port: Port the metrics server binds to.
        metrics_path: Path under which metrics are exposed.
        log_level: Root log level name.
        health_path: Optional JSON health file path; empty disables it.
    """

    stecagrid_host: str
    stecagrid_path: str = "/measurements.xml"
    stecagrid_scheme: str = "http"
    poll_interval_s: float = 5
    fetch_timeout_s: float = 3.0
    listen_address: str = "0.0.0.0"
    listen_port: int = 9101
    metrics_path: str = "/metrics"
    log_level: str = "INFO"
    health_path: str = ""

    @property
    def device_url(self) -> str:
        """Full URL of the measurement document."""
        return f"{self.stecagrid_scheme}://{self.stecagrid_host}{self.stecagrid_path}"

    @field_validator("stecagrid_host")
    @classmethod
    def stecagrid_host_must_not_be_empty(cls, v: str) -> str:
        """Reject blank hosts and hosts given with a scheme."""
        v = v.strip()
        if not v:
            raise ValueError("STECAGRID_HOST must not be empty")
        if "://" in v:
            raise ValueError("STECAGRID_HOST must be a host, set the scheme via STECAGRID_SCHEME")
        return v

    @field_validator("stecagrid_scheme")
    @classmethod
    def stecagrid_scheme_must_be_http(cls, v: str) -> str:
        v = v.lower()
        if v not in ("http", "https"):
            raise ValueError("STECAGRID_SCHEME must be 'http' or 'https'")
        return v

    @field_validator("stecagrid_path", "metrics_path")
    @classmethod
    def path_must_be_absolute(cls, v: str) -> str:
        """Validate that URL paths start with a slash."""
        if not v.startswith("/"):
            raise ValueError("Paths must start with '/'")
        return v

    @field_validator("metrics_path")
    @classmethod
    def metrics_path_must_not_clash(cls, v: str) -> str:
        if v.rstrip("/") in ("", "/health"):
            raise ValueError("METRICS_PATH must not be '/' or '/health'")
        return v

    @field_validator("poll_interval_s")
    @classmethod
    def poll_interval_must_be_positive(cls, v: float) -> float:
        """Minimum 1-second interval to avoid hammering the inverter."""
        if v < 1:
            raise ValueError("POLL_INTERVAL_S must be >= 1")
        return v

    @field_validator("fetch_timeout_s")
    @classmethod
    def fetch_timeout_must_be_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("FETCH_TIMEOUT_S must be > 0")
        return v

    @field_validator("listen_port")
    @classmethod
    def listen_port_must_be_valid(cls, v: int) -> int:
        """Validate TCP port is in valid range."""
        if v < 1 or v > 65535:
            raise ValueError("LISTEN_PORT must be between 1 and 65535")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"LOG_LEVEL '{v}' is not a known level")
        return level

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}
