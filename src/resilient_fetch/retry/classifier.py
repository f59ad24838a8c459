"""
Failure classification.

Decides, once per attempt, whether a failure is transient (worth waiting
and retrying) or fatal (terminal on first occurrence).

Policy:
    - Network errors and timeouts, including built-in OSError subclasses
      (TimeoutError, ConnectionResetError, socket.gaierror): transient
    - HTTP 408, 425, 429, 500, 502, 503, 504: transient
    - Any other non-2xx status (other 4xx, 3xx, 501, 505, ...): fatal
    - Requests that could not be sent (bad URL, scheme): fatal
    - Anything else (programming errors): fatal
"""

from typing import Iterable, Optional

from resilient_fetch.models.enums import Classification
from resilient_fetch.transport.exceptions import (
    TransportConnectionError,
    TransportStatusError,
)

DEFAULT_TRANSIENT_STATUS_CODES = frozenset({408, 425, 429, 500, 502, 503, 504})


class FailureClassifier:
    """
    Two-tier classifier for attempt failures.

    Attributes:
        transient_status_codes: HTTP statuses treated as transient
    """

    def __init__(self, transient_status_codes: Optional[Iterable[int]] = None):
        if transient_status_codes is None:
            transient_status_codes = DEFAULT_TRANSIENT_STATUS_CODES
        self.transient_status_codes = frozenset(transient_status_codes)

    def classify_status(self, status_code: int) -> Classification:
        """Classify a non-2xx HTTP status."""
        if status_code in self.transient_status_codes:
            return Classification.TRANSIENT
        return Classification.FATAL

    def classify(self, error: BaseException) -> Classification:
        """
        Classify an attempt failure.

        Args:
            error: Exception raised by the transport, or a TransportStatusError
                wrapping a non-2xx response

        Returns:
            Classification.TRANSIENT or Classification.FATAL
        """
        if isinstance(error, TransportStatusError):
            return self.classify_status(error.status_code)

        if isinstance(error, TransportConnectionError):
            return Classification.TRANSIENT

        # Custom transports that enforce their own timeouts or talk to sockets
        # directly surface these without wrapping
        if isinstance(error, OSError):
            return Classification.TRANSIENT

        return Classification.FATAL

    def __repr__(self) -> str:
        return f"FailureClassifier(transient_status_codes={sorted(self.transient_status_codes)})"
