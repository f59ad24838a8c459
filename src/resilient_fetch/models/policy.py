"""
Retry policy model.

A RetryPolicy is immutable for the lifetime of one fetch call. The default
policy makes 3 attempts with a fixed 1 second wait between them; the
backoff multiplier and delay cap are an opt-in extension.
"""

from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from resilient_fetch.config import Settings


class RetryPolicy(BaseModel):
    """
    Bounded retry policy for a single fetch call.

    Attributes:
        max_attempts: Total attempts allowed, including the first one
        delay_between_attempts: Wait in seconds inserted between attempts
        backoff_multiplier: Growth factor applied to the wait after each attempt
        max_delay: Upper bound for the computed wait (seconds)
        deadline: Overall time budget for the call (seconds); exceeding it
            cancels the call
    """

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=3, ge=1, description="Total attempts including the first")
    delay_between_attempts: float = Field(
        default=1.0, ge=0.0, description="Wait between attempts in seconds"
    )
    backoff_multiplier: float = Field(
        default=1.0, ge=1.0, description="1.0 keeps the inter-attempt wait fixed"
    )
    max_delay: Optional[float] = Field(default=None, ge=0.0, description="Cap for the computed wait")
    deadline: Optional[float] = Field(default=None, gt=0.0, description="Overall call deadline in seconds")

    def delay_after(self, attempt: int) -> float:
        """
        Wait to apply after a transient failure on ``attempt`` (1-indexed).

        Returns ``delay_between_attempts`` unchanged unless a backoff
        multiplier is configured.
        """
        delay = self.delay_between_attempts * self.backoff_multiplier ** (attempt - 1)
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return delay

    @classmethod
    def from_settings(cls, settings: "Settings") -> "RetryPolicy":
        """Build the default policy from application settings."""
        max_delay = settings.FETCH_MAX_DELAY_MS
        return cls(
            max_attempts=settings.FETCH_MAX_ATTEMPTS,
            delay_between_attempts=settings.FETCH_DELAY_MS / 1000.0,
            backoff_multiplier=settings.FETCH_BACKOFF_MULTIPLIER,
            max_delay=max_delay / 1000.0 if max_delay is not None else None,
            deadline=settings.FETCH_DEADLINE_SECONDS,
        )
