"""
Resilient remote-data fetcher.

Requests a resource from a network endpoint, classifies failures, retries
transient ones with a delay policy, and decodes a successful response into
a caller-specified shape. Every call returns a FetchOutcome:

- Success: decoded value
- Failure: invalid argument, transient exhaustion, decode error or fatal error
- Cancelled: caller cancellation or deadline

Architecture: ResilientFetcher over an injected Transport (httpx by default)
and Decoder (JSON / pydantic TypeAdapter).
"""

__version__ = "0.1.0"
