"""
Abstract base transport.

Defines the interface the fetcher consumes for a single request/response
round trip. This abstraction allows swapping the HTTP backend (or using a
fake in tests) without changing the retry logic.
"""

from abc import ABC, abstractmethod

import structlog

from resilient_fetch.models.response import RawResponse


logger = structlog.get_logger(__name__)


class BaseTransport(ABC):
    """
    Abstract base class for transports.

    Responsibilities:
    - Perform exactly one round trip per ``send`` call
    - Return any HTTP response (2xx or not) as RawResponse
    - Map network/request failures onto TransportError subclasses
    - Enforce a per-attempt timeout

    Does NOT handle:
    - Retries (that's ResilientFetcher's job)
    - Status classification (that's FailureClassifier's job)
    - Decoding (that's the Decoder's job)

    Implementations must be safe to call concurrently for different targets.
    """

    @abstractmethod
    async def send(self, target: str) -> RawResponse:
        """
        Perform one round trip to ``target``.

        Args:
            target: URL of the remote resource

        Returns:
            RawResponse for any status code

        Raises:
            TransportConnectionError: Network errors, resets
            TransportTimeoutError: Attempt exceeded the timeout
            TransportRequestError: Request could not be built or sent
        """
        pass

    async def health_check(self, target: str) -> bool:
        """
        Check whether ``target`` answers at all.

        Returns:
            True if any response came back, False otherwise

        Note:
            This should NOT raise exceptions - return False on error.
        """
        try:
            await self.send(target)
            return True
        except Exception as e:
            logger.warning("Transport health check failed", target=target, error=str(e))
            return False

    async def close(self):
        """
        Release transport resources.

        Default implementation does nothing. Subclasses holding persistent
        connections should override.
        """
        logger.debug("Closing transport", transport_class=self.__class__.__name__)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
