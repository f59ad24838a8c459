"""Shared test fixtures and configuration for all tests.

This conftest.py provides settings, a scriptable fake transport and
response builders used across unit and integration tests.
"""

import asyncio
import json
from typing import Any, Callable, Optional, Union

import pytest

from resilient_fetch.config import Settings
from resilient_fetch.models.response import RawResponse
from resilient_fetch.transport.base_transport import BaseTransport
from resilient_fetch.transport.exceptions import TransportConnectionError


ScriptStep = Union[RawResponse, BaseException, Callable[[], Any]]


class FakeTransport(BaseTransport):
    """Transport that replays a script of responses and errors.

    Each ``send`` consumes the next step; the last step repeats once the
    script runs out. A step may be a RawResponse (returned), an exception
    (raised) or a zero-argument coroutine function (awaited, its result
    returned). Every call is recorded with the loop time it started at.
    """

    def __init__(self, script: list[ScriptStep]):
        self.script = list(script)
        self.calls: list[str] = []
        self.call_times: list[float] = []
        self.closed = False

    async def send(self, target: str) -> RawResponse:
        self.calls.append(target)
        self.call_times.append(asyncio.get_running_loop().time())

        index = min(len(self.calls) - 1, len(self.script) - 1)
        step = self.script[index]
        if isinstance(step, BaseException):
            raise step
        if callable(step):
            return await step()
        return step

    async def close(self):
        self.closed = True

    @property
    def call_count(self) -> int:
        return len(self.calls)


def json_response(payload: Any, status_code: int = 200) -> RawResponse:
    """RawResponse with a JSON-encoded body."""
    return RawResponse(
        status_code=status_code,
        body=json.dumps(payload).encode("utf-8"),
        headers={"content-type": "application/json"},
        url="https://api.example.com/items/7",
    )


def status_response(status_code: int, body: bytes = b"") -> RawResponse:
    """RawResponse with an arbitrary status and raw body."""
    return RawResponse(status_code=status_code, body=body, url="https://api.example.com/items/7")


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with fast retries and metrics disabled.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.FETCH_MAX_ATTEMPTS = 5
    """
    return Settings(
        APP_NAME="resilient-fetch (Test)",
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",
        FETCH_MAX_ATTEMPTS=3,
        FETCH_DELAY_MS=0,
        TRANSPORT_TIMEOUT=5.0,
        PROMETHEUS_ENABLED=False,  # Disable metrics in tests unless explicitly needed
    )


@pytest.fixture
def make_transport() -> Callable[..., FakeTransport]:
    """Factory fixture to build a FakeTransport from script steps.

    Usage:
        def test_something(make_transport):
            transport = make_transport(TransportConnectionError("reset"), json_response({"id": 7}))
    """
    def _create(*steps: ScriptStep) -> FakeTransport:
        return FakeTransport(list(steps))

    return _create


@pytest.fixture
def ok_json() -> Callable[..., RawResponse]:
    return json_response


@pytest.fixture
def http_status() -> Callable[..., RawResponse]:
    return status_response


@pytest.fixture
def transient_error() -> Callable[[Optional[str]], TransportConnectionError]:
    def _create(message: Optional[str] = None) -> TransportConnectionError:
        return TransportConnectionError(message or "Connection reset by peer")

    return _create
