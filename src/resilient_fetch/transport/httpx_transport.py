"""
httpx transport implementation.

Performs one GET per ``send`` call using a persistent httpx AsyncClient.
Supports:
- Connection pooling (shared AsyncClient, httpx.Limits)
- Per-attempt timeout
- Redirect following
- Mapping of httpx exceptions onto TransportError subclasses
"""

import time
from typing import Dict, Optional

import httpx
import structlog

from resilient_fetch.config import Settings, settings as default_settings
from resilient_fetch.models.response import RawResponse
from resilient_fetch.monitoring.metrics import transport_latency_seconds
from resilient_fetch.transport.base_transport import BaseTransport
from resilient_fetch.transport.exceptions import (
    TransportConnectionError,
    TransportRequestError,
    TransportTimeoutError,
)


logger = structlog.get_logger(__name__)


class HttpxTransport(BaseTransport):
    """
    Transport backed by httpx.AsyncClient.

    The client is created lazily on first use and reused for every
    subsequent call, so one HttpxTransport can be shared by many
    concurrent fetches. It never retries: every ``send`` is one round trip.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None,
        connection_limits: Optional[httpx.Limits] = None,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize httpx transport.

        Args:
            timeout: Per-attempt timeout in seconds (default: TRANSPORT_TIMEOUT)
            headers: Extra default request headers
            connection_limits: httpx connection pool limits
            settings: Application settings (default: module settings)
            client: Pre-built AsyncClient; the transport will not close it
        """
        self.settings = settings or default_settings
        self.timeout = timeout if timeout is not None else self.settings.TRANSPORT_TIMEOUT

        if connection_limits is None:
            connection_limits = httpx.Limits(
                max_keepalive_connections=self.settings.TRANSPORT_MAX_KEEPALIVE,
                max_connections=self.settings.TRANSPORT_MAX_CONNECTIONS,
                keepalive_expiry=self.settings.TRANSPORT_KEEPALIVE_EXPIRY,
            )
        self._connection_limits = connection_limits

        self.headers = {
            "Accept": "application/json",
            "User-Agent": self.settings.TRANSPORT_USER_AGENT,
        }
        if headers:
            self.headers.update(headers)

        self._client = client
        self._owns_client = client is None

        logger.info(
            "httpx transport initialized",
            timeout=self.timeout,
            connection_limits=str(connection_limits),
            external_client=not self._owns_client,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                limits=self._connection_limits,
                headers=self.headers,
                follow_redirects=True,
            )
            self._owns_client = True
            logger.debug("Created new httpx AsyncClient")
        return self._client

    async def send(self, target: str) -> RawResponse:
        """
        GET ``target`` once.

        Returns:
            RawResponse for any status code (including 4xx/5xx)

        Raises:
            TransportTimeoutError: Connect/read/write/pool timeout
            TransportConnectionError: Network or remote protocol errors
            TransportRequestError: Invalid URL, unsupported scheme, redirect loop
        """
        start_time = time.monotonic()

        try:
            client = await self._get_client()
            response = await client.get(target)

        except httpx.TimeoutException as e:
            raise TransportTimeoutError(
                f"Request timeout after {self.timeout}s",
                details={"target": target, "timeout": self.timeout, "error_type": type(e).__name__},
            ) from e

        except (httpx.UnsupportedProtocol, httpx.LocalProtocolError, httpx.TooManyRedirects) as e:
            raise TransportRequestError(
                f"Request rejected before completion: {e}",
                details={"target": target, "error_type": type(e).__name__},
            ) from e

        except httpx.InvalidURL as e:
            raise TransportRequestError(
                f"Invalid URL: {e}",
                details={"target": target, "error_type": type(e).__name__},
            ) from e

        except httpx.HTTPError as e:
            # NetworkError, RemoteProtocolError, ProxyError, DecodingError
            raise TransportConnectionError(
                f"Network error: {e}",
                details={"target": target, "error_type": type(e).__name__},
            ) from e

        latency_ms = int((time.monotonic() - start_time) * 1000)
        raw = RawResponse(
            status_code=response.status_code,
            body=response.content,
            headers=dict(response.headers),
            url=str(response.url),
            latency_ms=latency_ms,
        )

        if self.settings.PROMETHEUS_ENABLED:
            transport_latency_seconds.labels(status_class=raw.status_class).observe(
                latency_ms / 1000.0
            )

        logger.debug(
            "Round trip completed",
            target=target,
            status_code=raw.status_code,
            latency_ms=latency_ms,
            body_bytes=len(raw.body),
        )
        return raw

    async def close(self):
        """Close the HTTP client connection if this transport created it."""
        if self._client is not None and self._owns_client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed httpx transport connection")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(timeout={self.timeout}s)"
