"""Integration test fixtures.

Wires the real HttpxTransport to an in-process httpx.MockTransport that
serves a scripted sequence of responses, so the full stack runs without
an external server.
"""

from typing import Callable

import httpx
import pytest

from resilient_fetch.transport.httpx_transport import HttpxTransport


@pytest.fixture
def scripted_server(test_settings) -> Callable[..., tuple[HttpxTransport, list[httpx.Request]]]:
    """Factory fixture: HttpxTransport whose responses follow ``steps``.

    Each step is an httpx.Response or an exception class from httpx to
    raise; the last step repeats. Returns the transport and the list of
    requests it received.
    """
    def _create(*steps):
        received: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            received.append(request)
            step = steps[min(len(received) - 1, len(steps) - 1)]
            if isinstance(step, type) and issubclass(step, Exception):
                raise step("scripted failure", request=request)
            return step

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return HttpxTransport(settings=test_settings, client=client), received

    return _create
