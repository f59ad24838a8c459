"""
Raw transport response model.

This is what a Transport hands back for one round trip. It is intentionally
undecoded: turning the body into a typed value is the Decoder's job.
"""

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


class RawResponse(BaseModel):
    """
    Result of a single request/response round trip.

    Non-2xx responses are returned as RawResponse too; classifying them
    is up to the fetcher.
    """

    model_config = ConfigDict(frozen=True)

    status_code: int = Field(..., ge=100, le=599, description="HTTP status code")
    body: bytes = Field(default=b"", description="Undecoded response body")
    headers: Dict[str, str] = Field(default_factory=dict, description="Response headers")
    url: str = Field(default="", description="Final URL after redirects")
    latency_ms: int = Field(default=0, ge=0, description="Round trip latency in milliseconds")

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def status_class(self) -> str:
        """Status family label, e.g. ``"2xx"``."""
        return f"{self.status_code // 100}xx"

    def text_snippet(self, limit: int = 200) -> str:
        """First ``limit`` characters of the body, for logs and error details."""
        return self.body[:limit].decode("utf-8", errors="replace")
