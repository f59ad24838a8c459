"""
Bounded retry of a single remote fetch.

Main Components:
    - ResilientFetcher: Fetch/classify/retry/decode loop
    - FailureClassifier: Transient vs fatal verdict per attempt
    - FetchRun: Per-call attempt counter and state machine
    - FetchFailedError: Raised when unwrapping a non-success outcome

Usage:
    >>> from resilient_fetch.retry import ResilientFetcher
    >>> fetcher = ResilientFetcher(transport)
    >>> outcome = await fetcher.fetch(url, JSONDecoder(), RetryPolicy(max_attempts=3))
"""

from resilient_fetch.retry.classifier import FailureClassifier
from resilient_fetch.retry.exceptions import FetchFailedError, InvalidTransitionError
from resilient_fetch.retry.fetcher import ResilientFetcher
from resilient_fetch.retry.state_machine import FetchRun

__all__ = [
    "FailureClassifier",
    "FetchFailedError",
    "FetchRun",
    "InvalidTransitionError",
    "ResilientFetcher",
]
