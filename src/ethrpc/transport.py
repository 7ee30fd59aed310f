"""
HTTP transport for JSON-RPC requests.

One HttpTransport owns one httpx.Client for its whole lifetime, so the
underlying connection is reused across calls. Every call builds a fresh
httpx.Request; nothing set for one call is visible to the next.
"""

from __future__ import annotations

import logging
import ssl
import threading
from typing import Optional, Protocol

import certifi
import httpx

from .errors import TransportError

DEFAULT_TIMEOUT = 30.0
JSON_HEADERS = {"Content-Type": "application/json"}


class Transport(Protocol):
    def post(self, url: str, body: str) -> str:
        ...


# ============ Process-wide TLS context ============

# Built at most once per process, on first use, and shared by every
# HttpTransport. Guarded by a lock so concurrent first use still builds one.
_ssl_context: Optional[ssl.SSLContext] = None
_ssl_context_lock = threading.Lock()


def shared_ssl_context() -> ssl.SSLContext:
    """Return the process-wide verifying TLS context (CA bundle from certifi)."""
    global _ssl_context
    with _ssl_context_lock:
        if _ssl_context is None:
            context = ssl.create_default_context(cafile=certifi.where())
            context.check_hostname = True
            context.verify_mode = ssl.CERT_REQUIRED
            _ssl_context = context
        return _ssl_context


# ============ httpx Transport ============


class HttpTransport:
    """
    POST JSON bodies to a node over HTTP(S).

    Attributes:
        timeout: Seconds before connect/read/write give up
        logger: Sink for failure diagnostics
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        logger: Optional[logging.Logger] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.timeout = timeout
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self._client: Optional[httpx.Client] = httpx.Client(
            timeout=timeout,
            verify=shared_ssl_context(),
            transport=transport,
        )

    @property
    def is_open(self) -> bool:
        return self._client is not None and not self._client.is_closed

    def post(self, url: str, body: str) -> str:
        """
        Send ``body`` as an HTTP POST and return the response text.

        Raises:
            TransportError: If the client is closed, the URL is invalid, the
                request fails at the network level, or the status is outside
                [200, 300)
        """
        if not self.is_open:
            self.logger.error("HTTP client is not initialized.")
            raise TransportError("HTTP client is not initialized")

        self.logger.debug("POST %s %s", url, body)

        try:
            request = self._client.build_request(
                "POST",
                url,
                content=body.encode("utf-8"),
                headers=JSON_HEADERS,
            )
            response = self._client.send(request)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            self.logger.error(f"HTTP error: {exc}")
            raise TransportError(f"HTTP error: {exc}") from exc

        if not 200 <= response.status_code < 300:
            self.logger.error(
                f"HTTP request to {url} failed with status {response.status_code}"
            )
            raise TransportError(
                f"HTTP status {response.status_code}",
                status_code=response.status_code,
            )

        return response.text

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = [
    "DEFAULT_TIMEOUT",
    "JSON_HEADERS",
    "HttpTransport",
    "Transport",
    "shared_ssl_context",
]
