"""
Enumerations shared by the fetcher, classifier and outcome models.
"""

from enum import Enum


class FailureKind(str, Enum):
    """Terminal failure categories reported in a Failure outcome."""

    INVALID_ARGUMENT = "invalid_argument"
    TRANSIENT_EXHAUSTED = "transient_exhausted"
    DECODE_ERROR = "decode_error"
    FATAL = "fatal"


class Classification(str, Enum):
    """Per-attempt verdict on whether a failure is worth retrying."""

    TRANSIENT = "transient"
    FATAL = "fatal"


class CancelReason(str, Enum):
    """Why a fetch was abandoned before reaching a result."""

    CALLER = "caller"
    DEADLINE = "deadline"


class FetchState(str, Enum):
    """States of a single fetch call."""

    IDLE = "idle"
    ATTEMPTING = "attempting"
    WAITING = "waiting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (FetchState.SUCCEEDED, FetchState.FAILED, FetchState.CANCELLED)
