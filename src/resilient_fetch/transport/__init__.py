"""
Transports: one request/response round trip per call.

BaseTransport is the interface the fetcher consumes; HttpxTransport is the
default implementation over a pooled httpx.AsyncClient.
"""

from resilient_fetch.transport.base_transport import BaseTransport
from resilient_fetch.transport.exceptions import (
    TransportConnectionError,
    TransportError,
    TransportRequestError,
    TransportStatusError,
    TransportTimeoutError,
)
from resilient_fetch.transport.httpx_transport import HttpxTransport

__all__ = [
    "BaseTransport",
    "HttpxTransport",
    "TransportConnectionError",
    "TransportError",
    "TransportRequestError",
    "TransportStatusError",
    "TransportTimeoutError",
]
