"""
Custom exceptions for the transport layer.

These exceptions let the failure classifier distinguish network-level
failures that are worth retrying from request problems that will never
succeed, without depending on the underlying HTTP library's exception types.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from resilient_fetch.models.response import RawResponse


class TransportError(Exception):
    """
    Base exception for all transport errors.

    All transport-specific exceptions inherit from this to allow catching
    any transport failure with a single except clause.
    """

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class TransportConnectionError(TransportError):
    """
    Raised when the round trip fails at the network layer.

    Includes connection refused, connection reset, DNS failures and
    protocol errors. Classified as transient.
    """
    pass


class TransportTimeoutError(TransportConnectionError):
    """
    Raised when a single attempt exceeds the transport's timeout.

    Separate from generic connection errors so logs and metrics can tell
    them apart. Classified as transient.
    """
    pass


class TransportRequestError(TransportError):
    """
    Raised when the request cannot be sent at all.

    Examples:
    - Malformed URL
    - Unsupported scheme
    - Invalid header values

    Retrying will not help, so this is classified as fatal.
    """
    pass


class TransportStatusError(TransportError):
    """
    A response arrived but its status is outside the 2xx range.

    Transports return non-2xx responses as RawResponse; the fetcher wraps
    them in this error so the outcome's ``last_error`` always holds an
    exception.
    """

    def __init__(self, response: "RawResponse"):
        self.response = response
        self.status_code = response.status_code
        super().__init__(
            f"HTTP {response.status_code} from {response.url or 'remote'}",
            details={"status": response.status_code, "body": response.text_snippet()},
        )
