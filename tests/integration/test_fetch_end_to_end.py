"""
Integration tests for the full fetch stack.

ResilientFetcher + HttpxTransport + ModelDecoder against a scripted
in-process HTTP handler.
"""

import httpx
import pytest
from pydantic import BaseModel

from resilient_fetch.models.enums import Classification, FailureKind
from resilient_fetch.models.outcome import Failure, Success
from resilient_fetch.models.policy import RetryPolicy
from resilient_fetch.retry.fetcher import ResilientFetcher
from resilient_fetch.transport.exceptions import TransportTimeoutError

TARGET = "https://api.example.com/projects/7"


class ProjectSummary(BaseModel):
    id: int
    name: str
    active: bool = True


@pytest.mark.asyncio
async def test_recovers_from_5xx_and_timeout(scripted_server, test_settings):
    transport, received = scripted_server(
        httpx.Response(503, text="maintenance"),
        httpx.ReadTimeout,
        httpx.Response(200, json={"id": 7, "name": "Apollo"}),
    )
    fetcher = ResilientFetcher(transport, settings=test_settings)

    outcome = await fetcher.fetch_as(TARGET, ProjectSummary, RetryPolicy(max_attempts=3, delay_between_attempts=0.01))

    assert isinstance(outcome, Success)
    assert outcome.value == ProjectSummary(id=7, name="Apollo")
    assert outcome.attempts_made == 3
    assert len(received) == 3
    assert [r.status_code for r in outcome.history] == [503, None]
    assert outcome.history[1].error_type == TransportTimeoutError.__name__


@pytest.mark.asyncio
async def test_not_found_is_fatal(scripted_server, test_settings):
    transport, received = scripted_server(httpx.Response(404, json={"error": "no such project"}))
    fetcher = ResilientFetcher(transport, settings=test_settings)

    outcome = await fetcher.fetch_as(TARGET, ProjectSummary, RetryPolicy(max_attempts=3, delay_between_attempts=0))

    assert isinstance(outcome, Failure)
    assert outcome.kind is FailureKind.FATAL
    assert outcome.history[0].classification is Classification.FATAL
    assert "no such project" in outcome.last_error.details["body"]
    assert len(received) == 1


@pytest.mark.asyncio
async def test_connection_refused_exhausts(scripted_server, test_settings):
    transport, received = scripted_server(httpx.ConnectError)
    fetcher = ResilientFetcher(transport, settings=test_settings)

    outcome = await fetcher.fetch_as(TARGET, ProjectSummary, RetryPolicy(max_attempts=4, delay_between_attempts=0))

    assert outcome.kind is FailureKind.TRANSIENT_EXHAUSTED
    assert outcome.attempts_made == 4
    assert len(received) == 4


@pytest.mark.asyncio
async def test_schema_drift_is_decode_error(scripted_server, test_settings):
    transport, received = scripted_server(httpx.Response(200, json={"project_id": 7}))
    fetcher = ResilientFetcher(transport, settings=test_settings)

    outcome = await fetcher.fetch_as(TARGET, ProjectSummary, RetryPolicy(max_attempts=3, delay_between_attempts=0))

    assert outcome.kind is FailureKind.DECODE_ERROR
    assert outcome.attempts_made == 1
    assert len(received) == 1


@pytest.mark.asyncio
async def test_metrics_recorded_when_enabled(scripted_server, test_settings):
    from prometheus_client import REGISTRY

    test_settings.PROMETHEUS_ENABLED = True
    transport, _ = scripted_server(httpx.Response(200, json={"id": 1, "name": "x"}))
    fetcher = ResilientFetcher(transport, settings=test_settings)

    before = REGISTRY.get_sample_value("fetch_outcomes_total", {"kind": "success"}) or 0.0
    await fetcher.fetch_as(TARGET, ProjectSummary)
    after = REGISTRY.get_sample_value("fetch_outcomes_total", {"kind": "success"})

    assert after == before + 1
