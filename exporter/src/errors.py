"""
Error taxonomy for the exporter poll cycle.

Three error kinds are raised while polling the inverter, all recovered inside a
single tick by the driving loop:

- FetchError: network failure, timeout, or non-2xx HTTP status.
- ParseError: the response body is not a well-formed measurement document.
- ConversionError: a recognised record carries a Value that is not a number.

CHANGELOG:
- 2026-10-12: Initial creation (STORY-003)

TODO:
- None
"""

from __future__ import annotations


class ExporterError(Exception):
    """Base exception for the StecaGrid exporter."""

    kind: str = "exporter"


class FetchError(ExporterError):
    """The device could not be fetched.

    Network and timeout failures are chained to the underlying ``httpx``
    exception (available as ``__cause__``).

    Args:
        message: Human-readable description of the failure.
        status: HTTP status code for non-2xx responses, else ``None``.
        url: The URL that was requested.
        timeout: True when the request exceeded the fetch timeout.
    """

    kind = "fetch"

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        url: str | None = None,
        timeout: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.url = url
        self.timeout = timeout

    def __str__(self) -> str:
        base = self.message
        if self.status is not None:
            base += f" (status={self.status})"
        if self.url:
            base += f" url={self.url}"
        return base


class ParseError(ExporterError):
    """The response body is not a valid measurement document."""

    kind = "parse"


class ConversionError(ExporterError):
    """A measurement Value attribute could not be converted to a number.

    Args:
        label: The record's Type label.
        raw_value: The offending Value attribute text.
    """

    kind = "conversion"

    def __init__(self, label: str, raw_value: str) -> None:
        super().__init__(f"Measurement '{label}': value {raw_value!r} is not a number")
        self.label = label
        self.raw_value = raw_value
