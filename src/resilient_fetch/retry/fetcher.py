"""
Resilient fetcher: bounded retry of a single remote resource.

This module implements ResilientFetcher, the single entry point for
fetching a remote resource with failure classification, bounded retries
and decoding into a caller-specified shape.

Retry Policy:
    1. Empty target or an override the policy rejects: Failure(INVALID_ARGUMENT), no attempt
    2. 2xx response: decode; success returns at once, decode failure is terminal
    3. Transient failure: wait, then retry (up to max_attempts)
    4. Fatal failure: terminal on first occurrence, no wait
    5. Caller cancellation or deadline: Cancelled, no further attempts

Usage:
    fetcher = ResilientFetcher(HttpxTransport())
    outcome = await fetcher.fetch_as(url, Order, RetryPolicy(max_attempts=5))
    if outcome.ok:
        order = outcome.value
"""

import asyncio
from typing import Any, Optional, TypeVar

import structlog
from pydantic import ValidationError

from resilient_fetch.config import Settings, settings as default_settings
from resilient_fetch.decoding.decoders import Decoder, ModelDecoder
from resilient_fetch.decoding.exceptions import DecodeError
from resilient_fetch.models.enums import CancelReason, Classification, FailureKind, FetchState
from resilient_fetch.models.outcome import Cancelled, Failure, FetchOutcome, Success
from resilient_fetch.models.policy import RetryPolicy
from resilient_fetch.monitoring.metrics import (
    fetch_attempts_total,
    fetch_duration_seconds,
    fetch_outcomes_total,
)
from resilient_fetch.retry.classifier import FailureClassifier
from resilient_fetch.retry.state_machine import FetchRun
from resilient_fetch.transport.base_transport import BaseTransport
from resilient_fetch.transport.exceptions import TransportStatusError

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# Marks a keyword override the caller did not pass
UNSET: Any = object()


class ResilientFetcher:
    """
    Fetch, classify, retry, decode.

    The fetcher owns no per-call state: every call builds its own FetchRun,
    so one instance can serve many concurrent fetches over a shared
    transport.

    Attributes:
        transport: Performs one round trip per attempt
        classifier: Decides transient vs fatal for each failure
        settings: Application settings
        default_policy: Policy used when a call does not pass one
    """

    def __init__(
        self,
        transport: BaseTransport,
        classifier: Optional[FailureClassifier] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the fetcher.

        Args:
            transport: Transport used for every attempt
            classifier: Failure classifier (default: built from settings)
            settings: Application settings (default: module settings)
        """
        self.transport = transport
        self.settings = settings or default_settings
        self.classifier = classifier or FailureClassifier(self.settings.TRANSIENT_STATUS_CODES)
        self.default_policy = RetryPolicy.from_settings(self.settings)

        logger.info(
            "ResilientFetcher initialized",
            transport=repr(transport),
            max_attempts=self.default_policy.max_attempts,
            delay_between_attempts=self.default_policy.delay_between_attempts,
            deadline=self.default_policy.deadline,
        )

    async def fetch(
        self,
        target: str,
        decoder: Decoder[T],
        policy: Optional[RetryPolicy] = None,
        *,
        max_attempts: Any = UNSET,
        delay_between_attempts: Any = UNSET,
        deadline: Any = UNSET,
    ) -> FetchOutcome[T]:
        """
        Fetch ``target`` and decode it with ``decoder``.

        Keyword overrides replace the matching field of ``policy`` (or of
        the default policy) for this call only. An omitted override keeps
        the policy value; ``deadline=None`` removes the policy's deadline
        for this call.

        Args:
            target: URL of the remote resource
            decoder: Converts the 2xx response body into the result value
            policy: Retry policy for this call
            max_attempts: Override for policy.max_attempts
            delay_between_attempts: Override for policy.delay_between_attempts (seconds)
            deadline: Override for policy.deadline (seconds, or None for no deadline)

        Returns:
            Success, Failure or Cancelled. Never raises for invalid input,
            transport, status or decode failures.
        """
        base_policy = policy or self.default_policy

        if not isinstance(target, str) or not target.strip():
            return self._reject(target, base_policy, ValueError("target must be a non-empty string"))

        updates = {
            name: value
            for name, value in (
                ("max_attempts", max_attempts),
                ("delay_between_attempts", delay_between_attempts),
                ("deadline", deadline),
            )
            if value is not UNSET
        }
        try:
            call_policy = (
                RetryPolicy.model_validate({**base_policy.model_dump(), **updates})
                if updates
                else base_policy
            )
        except ValidationError as e:
            return self._reject(target, base_policy, e)

        run = FetchRun(target, call_policy.max_attempts)

        logger.info(
            "Starting fetch",
            target=target,
            max_attempts=call_policy.max_attempts,
            delay_between_attempts=call_policy.delay_between_attempts,
            deadline=call_policy.deadline,
            decoder=repr(decoder),
        )

        try:
            async with asyncio.timeout(call_policy.deadline):
                outcome = await self._run_attempts(run, decoder, call_policy)

        except TimeoutError:
            outcome = self._cancel(run, CancelReason.DEADLINE)

        except asyncio.CancelledError:
            task = asyncio.current_task()
            if task is not None:
                task.uncancel()
            outcome = self._cancel(run, CancelReason.CALLER)

        self._record_outcome(outcome)
        return outcome

    async def fetch_as(
        self,
        target: str,
        shape: type[T],
        policy: Optional[RetryPolicy] = None,
        **overrides: Any,
    ) -> FetchOutcome[T]:
        """Fetch ``target`` and validate the JSON body into ``shape``."""
        return await self.fetch(target, ModelDecoder(shape), policy, **overrides)

    def fetch_sync(
        self,
        target: str,
        decoder: Decoder[T],
        policy: Optional[RetryPolicy] = None,
        **overrides: Any,
    ) -> FetchOutcome[T]:
        """
        Blocking wrapper around ``fetch`` for code without an event loop.

        Runs the fetch in a fresh event loop and closes the transport's
        connections before that loop shuts down.
        """

        async def _run() -> FetchOutcome[T]:
            try:
                return await self.fetch(target, decoder, policy, **overrides)
            finally:
                await self.transport.close()

        return asyncio.run(_run())

    async def _run_attempts(
        self, run: FetchRun, decoder: Decoder[T], policy: RetryPolicy
    ) -> FetchOutcome[T]:
        while True:
            attempt = run.start_attempt()
            logger.debug("Fetch attempt", target=run.target, attempt=attempt, max_attempts=run.max_attempts)

            try:
                response = await self.transport.send(run.target)
            except Exception as e:
                error: BaseException = e
            else:
                if response.is_success:
                    return self._decode(run, decoder, response.body)
                error = TransportStatusError(response)

            classification = self.classifier.classify(error)
            record = run.record_failure(error, classification)
            self._record_attempt(classification.value)

            logger.warning(
                f"Attempt {attempt} failed",
                target=run.target,
                attempt=attempt,
                max_attempts=run.max_attempts,
                classification=classification.value,
                error_type=record.error_type,
                error=record.message,
                status_code=record.status_code,
            )

            if classification is Classification.FATAL:
                run.transition(FetchState.FAILED)
                return Failure(
                    kind=FailureKind.FATAL,
                    last_error=error,
                    attempts_made=run.attempts_made,
                    elapsed_ms=run.elapsed_ms,
                    history=list(run.history),
                )

            if not run.attempts_remaining:
                run.transition(FetchState.FAILED)
                return Failure(
                    kind=FailureKind.TRANSIENT_EXHAUSTED,
                    last_error=error,
                    attempts_made=run.attempts_made,
                    elapsed_ms=run.elapsed_ms,
                    history=list(run.history),
                )

            delay = policy.delay_after(attempt)
            run.transition(FetchState.WAITING)
            logger.info(
                f"Retrying after {delay}s (attempt {attempt + 1}/{run.max_attempts})",
                target=run.target,
                next_attempt=attempt + 1,
                delay_seconds=delay,
            )
            await asyncio.sleep(delay)

    def _decode(self, run: FetchRun, decoder: Decoder[T], body: bytes) -> FetchOutcome[T]:
        try:
            value = decoder.decode(body)
        except Exception as e:
            error = e
            if not isinstance(error, DecodeError):
                error = DecodeError(
                    f"Decoder raised {type(e).__name__}: {e}",
                    raw_content=body,
                    details={"decoder": repr(decoder)},
                )
                error.__cause__ = e

            # Malformed payloads will not change by retrying
            run.record_failure(error, Classification.FATAL)
            self._record_attempt("decode_error")
            run.transition(FetchState.FAILED)
            logger.warning(
                "Response could not be decoded",
                target=run.target,
                attempt=run.attempts_made,
                decoder=repr(decoder),
                error=error.message,
                details=error.details,
            )
            return Failure(
                kind=FailureKind.DECODE_ERROR,
                last_error=error,
                attempts_made=run.attempts_made,
                elapsed_ms=run.elapsed_ms,
                history=list(run.history),
            )

        self._record_attempt("success")
        run.transition(FetchState.SUCCEEDED)
        return Success(
            value=value,
            attempts_made=run.attempts_made,
            elapsed_ms=run.elapsed_ms,
            history=list(run.history),
        )

    def _cancel(self, run: FetchRun, reason: CancelReason) -> Cancelled:
        if not run.state.is_terminal:
            run.transition(FetchState.CANCELLED)
        logger.warning(
            "Fetch cancelled",
            target=run.target,
            reason=reason.value,
            attempts_made=run.attempts_made,
            state_at_cancel=run.transitions[-2].value if len(run.transitions) > 1 else None,
        )
        return Cancelled(
            reason=reason,
            attempts_made=run.attempts_made,
            elapsed_ms=run.elapsed_ms,
            history=list(run.history),
        )

    def _reject(self, target: Any, policy: RetryPolicy, error: ValueError) -> Failure:
        """Report unusable call input as INVALID_ARGUMENT without any attempt."""
        if isinstance(error, ValidationError):
            reason = "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in error.errors()
            )
        else:
            reason = str(error)
        logger.warning("Rejected fetch call", target=target, reason=reason)

        run = FetchRun(target if isinstance(target, str) else "", policy.max_attempts)
        run.transition(FetchState.FAILED)
        outcome = Failure(
            kind=FailureKind.INVALID_ARGUMENT,
            last_error=error,
            attempts_made=0,
            elapsed_ms=run.elapsed_ms,
        )
        self._record_outcome(outcome)
        return outcome

    def _record_attempt(self, result: str) -> None:
        if self.settings.PROMETHEUS_ENABLED:
            fetch_attempts_total.labels(result=result).inc()

    def _record_outcome(self, outcome: FetchOutcome[Any]) -> None:
        if isinstance(outcome, Success):
            kind = "success"
        elif isinstance(outcome, Failure):
            kind = outcome.kind.value
        else:
            kind = f"cancelled_{outcome.reason.value}"

        log = logger.info if outcome.ok else logger.error
        log(
            "Fetch finished",
            outcome=kind,
            attempts_made=outcome.attempts_made,
            elapsed_ms=outcome.elapsed_ms,
            failed_attempts=len(outcome.history),
        )

        if self.settings.PROMETHEUS_ENABLED:
            fetch_outcomes_total.labels(kind=kind).inc()
            fetch_duration_seconds.labels(kind=kind).observe(outcome.elapsed_ms / 1000.0)
