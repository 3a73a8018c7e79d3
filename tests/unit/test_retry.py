"""Unit tests for RetryPolicy."""

import asyncio
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from docmark.core.errors import RenderError
from docmark.resilience.retry import RetryPolicy


class TestRetryPolicy:
    @pytest.mark.asyncio
    async def test_returns_first_success(self) -> None:
        operation = AsyncMock(return_value="ok")

        result = await RetryPolicy(max_attempts=3, delay=0).execute_async(operation)

        assert result == "ok"
        assert operation.await_count == 1

    @pytest.mark.asyncio
    async def test_retries_until_success(self) -> None:
        operation = AsyncMock(
            side_effect=[RenderError("1"), RenderError("2"), "loaded"]
        )

        result = await RetryPolicy(max_attempts=3, delay=0).execute_async(
            operation, retryable_exceptions=(RenderError,)
        )

        assert result == "loaded"
        assert operation.await_count == 3

    @pytest.mark.asyncio
    async def test_raises_last_error_when_exhausted(self) -> None:
        operation = AsyncMock(side_effect=[RenderError("first"), RenderError("last")])

        with pytest.raises(RenderError, match="last"):
            await RetryPolicy(max_attempts=2, delay=0).execute_async(
                operation, retryable_exceptions=(RenderError,)
            )
        assert operation.await_count == 2

    @pytest.mark.asyncio
    async def test_non_retryable_propagates_immediately(self) -> None:
        operation = AsyncMock(side_effect=ValueError("bad"))

        with pytest.raises(ValueError):
            await RetryPolicy(max_attempts=3, delay=0).execute_async(
                operation, retryable_exceptions=(RenderError,)
            )
        assert operation.await_count == 1

    @pytest.mark.asyncio
    async def test_default_retries_network_errors(self) -> None:
        operation = AsyncMock(side_effect=[httpx.ConnectError("down"), "ok"])

        result = await RetryPolicy(max_attempts=2, delay=0).execute_async(operation)

        assert result == "ok"

    @pytest.mark.asyncio
    async def test_fixed_delay_between_attempts(self) -> None:
        operation = AsyncMock(side_effect=[RenderError("a"), RenderError("b"), "ok"])

        with patch(
            "docmark.resilience.retry.asyncio.sleep", new_callable=AsyncMock
        ) as sleep:
            await RetryPolicy(max_attempts=3, delay=2.0).execute_async(
                operation, retryable_exceptions=(RenderError,)
            )

        assert [call.args[0] for call in sleep.await_args_list] == [2.0, 2.0]

    @pytest.mark.asyncio
    async def test_cancellation_interrupts_delay(self) -> None:
        operation = AsyncMock(side_effect=RenderError("down"))
        policy = RetryPolicy(max_attempts=3, delay=10.0)

        with pytest.raises(TimeoutError):
            async with asyncio.timeout(0.05):
                await policy.execute_async(
                    operation, retryable_exceptions=(RenderError,)
                )
        assert operation.await_count == 1

    def test_invalid_configuration(self) -> None:
        with pytest.raises(ValueError, match="max_attempts must be positive"):
            RetryPolicy(max_attempts=0)
        with pytest.raises(ValueError, match="delay must not be negative"):
            RetryPolicy(delay=-1)
