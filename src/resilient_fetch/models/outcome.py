"""
Fetch outcome models.

Every call to ResilientFetcher.fetch produces exactly one of:

- Success: the body was fetched and decoded
- Failure: the call ended without a value (see FailureKind)
- Cancelled: the caller or the deadline abandoned the call

Outcomes are frozen dataclasses so they can carry arbitrary decoded values
and exception objects. Each carries the per-attempt history for audit trails.
"""

from dataclasses import dataclass, field
from typing import Generic, Optional, TypeVar, Union

from resilient_fetch.models.enums import CancelReason, Classification, FailureKind

T = TypeVar("T")


@dataclass(frozen=True)
class AttemptRecord:
    """
    One failed attempt, as recorded in an outcome's history.

    Attributes:
        attempt: Attempt number (1-indexed)
        classification: Transient or fatal verdict for this failure
        error_type: Exception class name
        message: Human-readable error message
        status_code: HTTP status if the failure came from a response
    """

    attempt: int
    classification: Classification
    error_type: str
    message: str
    status_code: Optional[int] = None

    def __post_init__(self) -> None:
        if self.attempt < 1:
            raise ValueError("attempt must be >= 1")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Decoded value plus call metadata."""

    value: T
    attempts_made: int
    elapsed_ms: int = 0
    history: list[AttemptRecord] = field(default_factory=list)

    ok = True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    """
    Terminal failure returned as data.

    Attributes:
        kind: Failure category
        last_error: Error from the final attempt (None for invalid arguments
            detected before any attempt)
        attempts_made: Attempts started before the call ended
        elapsed_ms: Wall time spent in the call
        history: Every failed attempt in order
    """

    kind: FailureKind
    last_error: Optional[BaseException]
    attempts_made: int
    elapsed_ms: int = 0
    history: list[AttemptRecord] = field(default_factory=list)

    ok = False

    def __post_init__(self) -> None:
        if self.attempts_made < 0:
            raise ValueError("attempts_made must be >= 0")
        if self.kind is FailureKind.INVALID_ARGUMENT and self.attempts_made != 0:
            raise ValueError("invalid_argument failures never consume an attempt")

    def unwrap(self):
        from resilient_fetch.retry.exceptions import FetchFailedError

        raise FetchFailedError(self)


@dataclass(frozen=True)
class Cancelled:
    """Call abandoned by the caller or by the overall deadline."""

    reason: CancelReason
    attempts_made: int
    elapsed_ms: int = 0
    history: list[AttemptRecord] = field(default_factory=list)

    ok = False

    def unwrap(self):
        from resilient_fetch.retry.exceptions import FetchFailedError

        raise FetchFailedError(self)


FetchOutcome = Union[Success[T], Failure, Cancelled]
