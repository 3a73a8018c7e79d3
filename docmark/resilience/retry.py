"""Bounded retry policy for renderer operations.

This module provides a reusable RetryPolicy class that retries an async
operation a fixed number of times with a fixed delay between attempts. The
renderer keeps one policy for session acquisition and one for page
navigation, each configured independently.

Example:
    Basic retry with default settings:
        >>> policy = RetryPolicy()
        >>> result = await policy.execute_async(some_async_operation)

    Custom retry configuration:
        >>> policy = RetryPolicy(max_attempts=5, delay=0.5)
        >>> result = await policy.execute_async(
        ...     operation,
        ...     retryable_exceptions=(RenderError,),
        ...     operation_name="page load",
        ... )
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

import httpx

T = TypeVar("T")


class RetryPolicy:
    """Retry policy with a bounded attempt count and fixed inter-attempt delay.

    Attributes:
        max_attempts: Total number of attempts, including the first (default: 3)
        delay: Seconds to wait between attempts (default: 2.0)
    """

    def __init__(self, max_attempts: int = 3, delay: float = 2.0) -> None:
        """Initialize retry policy.

        Args:
            max_attempts: Total number of attempts. Must be positive.
            delay: Fixed delay between attempts in seconds. Must not be negative.

        Raises:
            ValueError: If max_attempts is not positive or delay is negative
        """
        if max_attempts <= 0:
            raise ValueError("max_attempts must be positive")
        if delay < 0:
            raise ValueError("delay must not be negative")
        self.max_attempts = max_attempts
        self.delay = delay
        self._logger = logging.getLogger(__name__)

    async def execute_async(
        self,
        operation: Callable[[], Awaitable[T]],
        retryable_exceptions: tuple[type[Exception], ...] | None = None,
        operation_name: str = "operation",
    ) -> T:
        """Execute async operation with retry logic.

        Exceptions outside ``retryable_exceptions`` propagate immediately.
        Cancellation is never retried, so an enclosing deadline interrupts
        both the operation and the inter-attempt sleep.

        Args:
            operation: Async callable to execute
            retryable_exceptions: Tuple of exception types to retry
                                 (default: network/timeout errors)
            operation_name: Human-readable operation name for logging

        Returns:
            Result from successful operation execution

        Raises:
            Exception: Last exception if all attempts are exhausted
        """
        if retryable_exceptions is None:
            retryable_exceptions = (
                httpx.NetworkError,
                httpx.TimeoutException,
            )

        last_exception: Exception | None = None

        for attempt in range(self.max_attempts):
            try:
                return await operation()
            except retryable_exceptions as e:
                last_exception = e

                if attempt < self.max_attempts - 1:
                    self._logger.warning(
                        f"{operation_name} failed (attempt {attempt + 1}/{self.max_attempts}), "
                        f"retrying in {self.delay:.1f}s: {e}",
                    )
                    await asyncio.sleep(self.delay)
                else:
                    self._logger.error(
                        f"{operation_name} failed after {self.max_attempts} attempts: {e}"
                    )

        if last_exception:
            raise last_exception
        raise RuntimeError(f"{operation_name} failed unexpectedly")
