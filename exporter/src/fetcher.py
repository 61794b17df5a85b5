"""
HTTP fetcher for the StecaGrid ``/measurements.xml`` status document.

Issues a single GET per call with a bounded timeout and returns the raw body.
Every failure is raised as a :class:`~exporter.src.errors.FetchError`:

- non-2xx status: ``status`` is set to the response code.
- timeout: ``timeout`` is True and the httpx exception is chained.
- any other transport error, or a URL httpx cannot parse: the httpx
  exception is chained.

Inverter firmware serves HTTPS with self-signed certificates, so certificate
verification is disabled on this fetcher's own client only.  No global TLS
setting is touched.

CHANGELOG:
- 2026-10-13: Initial creation (STORY-006)

TODO:
- None
"""

from __future__ import annotations

import logging

import httpx

from exporter.src.errors import FetchError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S: float = 3.0
"""Default per-request timeout in seconds."""


class Fetcher:
    """Fetches the raw measurement document from the inverter.

    Args:
        timeout_s: Timeout in seconds applied to connect, read, write and
            pool acquisition.
        transport: Optional httpx transport, used by tests to stub the
            network.

    Usage::

        fetcher = Fetcher(timeout_s=3.0)
        body = await fetcher.fetch("http://192.168.1.50/measurements.xml")
    """

    def __init__(
        self,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout_s = timeout_s
        self._transport = transport

    @property
    def timeout_s(self) -> float:
        return self._timeout_s

    async def fetch(self, url: str) -> bytes:
        """GET *url* and return the response body.

        Args:
            url: Full device URL, e.g. ``http://host/measurements.xml``.

        Returns:
            The raw response body.

        Raises:
            FetchError: On timeout, transport error, or non-2xx status.
        """
        try:
            async with httpx.AsyncClient(
                verify=False,
                timeout=self._timeout_s,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(url)
        except httpx.TimeoutException as exc:
            raise FetchError(
                f"Timed out after {self._timeout_s}s", url=url, timeout=True
            ) from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"GET error: {exc!r}", url=url) from exc
        except httpx.InvalidURL as exc:
            raise FetchError(f"Invalid URL: {exc}", url=url) from exc

        if not response.is_success:
            raise FetchError("Unexpected HTTP status", status=response.status_code, url=url)

        logger.debug("Fetched %d bytes from %s", len(response.content), url)
        return response.content
