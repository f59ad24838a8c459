"""
Per-call fetch state machine.

    IDLE -> ATTEMPTING -> SUCCEEDED
                       -> WAITING -> ATTEMPTING
                       -> FAILED
    IDLE -> FAILED                          (invalid argument)
    ATTEMPTING | WAITING -> CANCELLED       (caller or deadline)

SUCCEEDED, FAILED and CANCELLED are absorbing. A FetchRun is created for
every fetch call and never shared between calls.
"""

import time
from typing import Optional

from resilient_fetch.models.enums import Classification, FetchState
from resilient_fetch.models.outcome import AttemptRecord
from resilient_fetch.retry.exceptions import InvalidTransitionError
from resilient_fetch.transport.exceptions import TransportStatusError

ALLOWED_TRANSITIONS: dict[FetchState, frozenset[FetchState]] = {
    FetchState.IDLE: frozenset({FetchState.ATTEMPTING, FetchState.FAILED}),
    FetchState.ATTEMPTING: frozenset(
        {FetchState.SUCCEEDED, FetchState.WAITING, FetchState.FAILED, FetchState.CANCELLED}
    ),
    FetchState.WAITING: frozenset({FetchState.ATTEMPTING, FetchState.CANCELLED}),
    FetchState.SUCCEEDED: frozenset(),
    FetchState.FAILED: frozenset(),
    FetchState.CANCELLED: frozenset(),
}


class FetchRun:
    """
    Mutable bookkeeping for one fetch call.

    Attributes:
        target: URL being fetched
        max_attempts: Attempt bound from the policy
        state: Current FetchState
        attempts_made: Attempts started so far (never decremented)
        history: Failed attempts in order
        transitions: Every state visited, starting with IDLE
    """

    def __init__(self, target: str, max_attempts: int):
        self.target = target
        self.max_attempts = max_attempts
        self.state = FetchState.IDLE
        self.attempts_made = 0
        self.history: list[AttemptRecord] = []
        self.transitions: list[FetchState] = [FetchState.IDLE]
        self._started = time.monotonic()

    def transition(self, target_state: FetchState) -> None:
        if target_state not in ALLOWED_TRANSITIONS[self.state]:
            raise InvalidTransitionError(self.state, target_state)
        self.state = target_state
        self.transitions.append(target_state)

    def start_attempt(self) -> int:
        """Enter ATTEMPTING and return the new 1-indexed attempt number."""
        if self.attempts_made >= self.max_attempts:
            raise InvalidTransitionError(self.state, FetchState.ATTEMPTING)
        self.transition(FetchState.ATTEMPTING)
        self.attempts_made += 1
        return self.attempts_made

    @property
    def attempts_remaining(self) -> bool:
        return self.attempts_made < self.max_attempts

    def record_failure(self, error: BaseException, classification: Classification) -> AttemptRecord:
        status_code: Optional[int] = None
        if isinstance(error, TransportStatusError):
            status_code = error.status_code

        record = AttemptRecord(
            attempt=self.attempts_made,
            classification=classification,
            error_type=type(error).__name__,
            message=getattr(error, "message", None) or str(error),
            status_code=status_code,
        )
        self.history.append(record)
        return record

    @property
    def elapsed_ms(self) -> int:
        return int((time.monotonic() - self._started) * 1000)

    def __repr__(self) -> str:
        return (
            f"FetchRun(target={self.target!r}, state={self.state.value}, "
            f"attempts={self.attempts_made}/{self.max_attempts})"
        )
