"""
Unit tests for resilient-fetch.

Test individual components in isolation:
- Models (policy constraints, outcomes, raw responses)
- Decoders (JSON, typed shapes)
- Failure classifier and state machine
- Fetcher retry loop over a fake transport
- httpx transport over httpx.MockTransport
"""
