"""Unit test fixtures (fetcher wiring and decoders).

Provides a fetcher over a fake transport for testing without network access.
"""

import pytest
from pydantic import BaseModel

from resilient_fetch.decoding.decoders import JSONDecoder, ModelDecoder
from resilient_fetch.retry.fetcher import ResilientFetcher


class Item(BaseModel):
    """Minimal decoded shape used throughout the fetcher tests."""

    id: int


@pytest.fixture
def item_decoder() -> ModelDecoder[Item]:
    return ModelDecoder(Item)


@pytest.fixture
def json_decoder() -> JSONDecoder:
    return JSONDecoder()


@pytest.fixture
def make_fetcher(test_settings):
    """Factory fixture: ResilientFetcher over the given transport with test settings."""
    def _create(transport, **kwargs) -> ResilientFetcher:
        return ResilientFetcher(transport, settings=test_settings, **kwargs)

    return _create
