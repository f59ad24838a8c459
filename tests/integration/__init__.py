"""
Integration tests for resilient-fetch.

Run the fetcher, the real httpx transport and the typed decoder together
against an in-process scripted HTTP handler.
"""
