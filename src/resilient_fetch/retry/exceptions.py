"""
Retry layer exceptions.

The fetcher never raises for transport, status or decode failures; those
are returned as Failure outcomes. The exceptions here cover the two cases
that do raise: a caller explicitly unwrapping a non-success outcome, and a
programming error in the state machine.
"""

from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from resilient_fetch.models.enums import FetchState
    from resilient_fetch.models.outcome import Cancelled, Failure


class FetchFailedError(Exception):
    """
    Raised by ``unwrap()`` on a Failure or Cancelled outcome.

    Attributes:
        outcome: The non-success outcome that was unwrapped
    """

    def __init__(self, outcome: Union["Failure", "Cancelled"]) -> None:
        self.outcome = outcome

        label = getattr(outcome, "kind", None) or getattr(outcome, "reason")
        last_error = getattr(outcome, "last_error", None)
        message = f"Fetch ended with {label.value} after {outcome.attempts_made} attempt(s)"
        if last_error is not None:
            message += f": {type(last_error).__name__}: {last_error}"
        super().__init__(message)


class InvalidTransitionError(RuntimeError):
    """Raised when code attempts a state transition the fetch state machine forbids."""

    def __init__(self, current: "FetchState", target: "FetchState") -> None:
        self.current = current
        self.target = target
        super().__init__(f"Illegal fetch state transition: {current.value} -> {target.value}")
