"""
Retry utilities for handling transient fetch failures.

Every network fetch of a run goes through a RetryPolicy: an explicit,
bounded loop of attempts separated by a delay computed by an injectable
backoff strategy. The sleep function is injectable too, so tests can run
the loop against a fake clock.

Exception Handling:
- By default, retries on RetryableException, httpx.HTTPError and
  connection/timeout errors
- Anything else (logic errors, NonRetryableException) propagates immediately
- Exhausting the budget raises RetryExhaustedException
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional, Tuple, Type, TypeVar

import httpx

from poll_auditor.shared.exceptions import (
    RetryableException,
    RetryExhaustedException,
)
from poll_auditor.shared.logging import get_logger

T = TypeVar("T")

logger = get_logger(__name__)

DEFAULT_RETRYABLE_EXCEPTIONS: Tuple[Type[Exception], ...] = (
    RetryableException,  # Includes APIException
    httpx.HTTPError,
    ConnectionError,
    TimeoutError,
)

SleepFn = Callable[[float], Awaitable[Any]]
BackoffFn = Callable[[int], float]


class FixedDelay:
    """Backoff strategy returning the same delay for every retry."""

    def __init__(self, delay: float):
        self.delay = delay

    def __call__(self, attempt: int) -> float:
        return self.delay


class RetryPolicy:
    """
    Bounded retry loop shared by the API clients.

    Args:
        max_retries: Retries after the first attempt (total attempts = max_retries + 1)
        backoff: Callable mapping the 1-based retry number to a delay in seconds
        sleep: Awaitable sleep function (default: asyncio.sleep)
        retryable_exceptions: Exception types to retry on

    Example:
        policy = RetryPolicy(max_retries=3, backoff=FixedDelay(10.0))
        data = await policy.run(client.get, url, operation_name="signers")
    """

    def __init__(
        self,
        max_retries: int = 3,
        backoff: Optional[BackoffFn] = None,
        sleep: Optional[SleepFn] = None,
        retryable_exceptions: Optional[Tuple[Type[Exception], ...]] = None,
    ):
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self.max_retries = max_retries
        self.backoff = backoff or FixedDelay(1.0)
        self.sleep = sleep or asyncio.sleep
        self.retryable_exceptions = (
            retryable_exceptions or DEFAULT_RETRYABLE_EXCEPTIONS
        )

    @classmethod
    def fixed(
        cls, max_retries: int, delay: float, sleep: Optional[SleepFn] = None
    ) -> "RetryPolicy":
        """Policy with a fixed inter-attempt delay."""
        return cls(max_retries=max_retries, backoff=FixedDelay(delay), sleep=sleep)

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    async def run(
        self,
        operation: Callable[..., Awaitable[T]],
        *args: Any,
        operation_name: Optional[str] = None,
        **kwargs: Any,
    ) -> T:
        """
        Await operation(*args, **kwargs), retrying transient failures.

        Returns:
            Result of the first successful attempt

        Raises:
            RetryExhaustedException: If every attempt failed with a retryable error
        """
        name = operation_name or getattr(operation, "__name__", "operation")

        for attempt in range(1, self.max_attempts + 1):
            try:
                return await operation(*args, **kwargs)
            except self.retryable_exceptions as e:
                if attempt >= self.max_attempts:
                    raise RetryExhaustedException(name, attempt, e) from e

                delay = self.backoff(attempt)
                logger.warning(
                    f"Attempt {attempt}/{self.max_attempts} failed for "
                    f"{name}: {e}. Retrying in {delay:.1f}s..."
                )
                await self.sleep(delay)

        raise RuntimeError(
            "Unexpected state: no exception but all attempts exhausted"
        )
