"""
Decoding exceptions.

A DecodeError means a response arrived but could not be turned into the
requested shape. The fetcher treats it as terminal: the payload will not
change by retrying.
"""

from typing import Any


class DecodeError(Exception):
    """
    Raised when a response body cannot be decoded.

    Attributes:
        message: Human-readable error description
        details: Structured error data for logging
    """

    def __init__(
        self,
        message: str,
        raw_content: bytes | None = None,
        errors: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize decode error.

        Args:
            message: Error description
            raw_content: Offending body; only the first 500 bytes are kept
            errors: Individual parser/validator messages
            details: Any other structured context
        """
        details = dict(details or {})
        if raw_content:
            details["content_snippet"] = raw_content[:500].decode("utf-8", errors="replace")
        if errors:
            details["errors"] = errors[:10]

        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message
