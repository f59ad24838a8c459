"""
Unit tests for the per-call FetchRun state machine.
"""

import pytest

from resilient_fetch.models.enums import Classification, FetchState
from resilient_fetch.models.response import RawResponse
from resilient_fetch.retry.exceptions import InvalidTransitionError
from resilient_fetch.retry.state_machine import FetchRun
from resilient_fetch.transport.exceptions import TransportConnectionError, TransportStatusError


def test_starts_idle():
    run = FetchRun("https://api.example.com", max_attempts=3)

    assert run.state is FetchState.IDLE
    assert run.attempts_made == 0
    assert run.transitions == [FetchState.IDLE]


def test_retry_cycle_then_success():
    """Test IDLE -> ATTEMPTING -> WAITING -> ATTEMPTING -> SUCCEEDED."""
    run = FetchRun("https://api.example.com", max_attempts=3)

    assert run.start_attempt() == 1
    run.transition(FetchState.WAITING)
    assert run.start_attempt() == 2
    run.transition(FetchState.SUCCEEDED)

    assert run.transitions == [
        FetchState.IDLE,
        FetchState.ATTEMPTING,
        FetchState.WAITING,
        FetchState.ATTEMPTING,
        FetchState.SUCCEEDED,
    ]
    assert run.attempts_made == 2


@pytest.mark.parametrize("terminal", [FetchState.SUCCEEDED, FetchState.FAILED, FetchState.CANCELLED])
def test_terminal_states_are_absorbing(terminal):
    run = FetchRun("https://api.example.com", max_attempts=3)
    run.start_attempt()
    run.transition(terminal)

    for state in FetchState:
        with pytest.raises(InvalidTransitionError):
            run.transition(state)


def test_waiting_cannot_fail_directly():
    """Test failures are only decided while attempting, never while waiting."""
    run = FetchRun("https://api.example.com", max_attempts=3)
    run.start_attempt()
    run.transition(FetchState.WAITING)

    with pytest.raises(InvalidTransitionError) as exc_info:
        run.transition(FetchState.FAILED)

    assert "waiting -> failed" in str(exc_info.value)


def test_cannot_exceed_max_attempts():
    run = FetchRun("https://api.example.com", max_attempts=1)
    run.start_attempt()
    run.transition(FetchState.WAITING)

    assert run.attempts_remaining is False
    with pytest.raises(InvalidTransitionError):
        run.start_attempt()


def test_record_failure_captures_status_code():
    run = FetchRun("https://api.example.com", max_attempts=3)
    run.start_attempt()

    record = run.record_failure(
        TransportStatusError(RawResponse(status_code=503, body=b"busy")), Classification.TRANSIENT
    )

    assert record.attempt == 1
    assert record.status_code == 503
    assert record.error_type == "TransportStatusError"
    assert run.history == [record]


def test_record_failure_uses_error_message():
    run = FetchRun("https://api.example.com", max_attempts=3)
    run.start_attempt()

    record = run.record_failure(TransportConnectionError("Connection reset"), Classification.TRANSIENT)

    assert record.message == "Connection reset"
    assert record.status_code is None
