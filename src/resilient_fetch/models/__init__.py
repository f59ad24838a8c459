"""
Data models for the fetch call: policy, raw response and outcomes.
"""

from resilient_fetch.models.enums import CancelReason, Classification, FailureKind, FetchState
from resilient_fetch.models.outcome import AttemptRecord, Cancelled, Failure, FetchOutcome, Success
from resilient_fetch.models.policy import RetryPolicy
from resilient_fetch.models.response import RawResponse

__all__ = [
    "AttemptRecord",
    "CancelReason",
    "Cancelled",
    "Classification",
    "Failure",
    "FailureKind",
    "FetchOutcome",
    "FetchState",
    "RawResponse",
    "RetryPolicy",
    "Success",
]
