"""
Unit tests for the retry utilities module.
"""

from unittest.mock import AsyncMock

import httpx
import pytest

from poll_auditor.shared.exceptions import (
    APIException,
    RetryExhaustedException,
    VoteDataException,
)
from poll_auditor.shared.retry import FixedDelay, RetryPolicy


class FakeClock:
    """Records requested sleeps instead of waiting."""

    def __init__(self):
        self.sleeps = []

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)

    @property
    def elapsed(self) -> float:
        return sum(self.sleeps)


@pytest.fixture
def clock():
    return FakeClock()


class TestRetryPolicy:
    """Tests for RetryPolicy.run."""

    @pytest.mark.asyncio
    async def test_succeeds_first_try(self, clock):
        """Test operation that succeeds on first attempt."""
        operation = AsyncMock(return_value="success")
        policy = RetryPolicy.fixed(3, 10.0, sleep=clock.sleep)

        result = await policy.run(operation, "arg")

        assert result == "success"
        assert operation.call_count == 1
        operation.assert_awaited_with("arg")
        assert clock.sleeps == []

    @pytest.mark.asyncio
    async def test_succeeds_after_retry(self, clock):
        """Test operation that fails twice then succeeds."""
        operation = AsyncMock(
            side_effect=[
                APIException("HTTP 503"),
                httpx.ConnectError("refused"),
                "success",
            ]
        )
        policy = RetryPolicy.fixed(3, 10.0, sleep=clock.sleep)

        result = await policy.run(operation)

        assert result == "success"
        assert operation.call_count == 3
        assert clock.sleeps == [10.0, 10.0]

    @pytest.mark.asyncio
    async def test_exhausts_budget(self, clock):
        """Retry count N means N + 1 attempts, then a fatal error."""
        last_error = APIException("HTTP 500")
        operation = AsyncMock(side_effect=last_error)
        policy = RetryPolicy.fixed(18, 10.0, sleep=clock.sleep)

        with pytest.raises(RetryExhaustedException) as exc_info:
            await policy.run(operation, operation_name="GET /signers")

        assert operation.call_count == 19
        assert exc_info.value.attempts == 19
        assert exc_info.value.last_error is last_error
        assert exc_info.value.operation == "GET /signers"
        assert exc_info.value.__cause__ is last_error
        # no sleep after the final attempt
        assert len(clock.sleeps) == 18
        assert clock.elapsed == 180.0

    @pytest.mark.asyncio
    async def test_zero_retries_single_attempt(self, clock):
        operation = AsyncMock(side_effect=TimeoutError("slow"))
        policy = RetryPolicy.fixed(0, 10.0, sleep=clock.sleep)

        with pytest.raises(RetryExhaustedException):
            await policy.run(operation)

        assert operation.call_count == 1
        assert clock.sleeps == []

    @pytest.mark.asyncio
    async def test_logic_errors_not_retried(self, clock):
        """Only network failures are retried."""
        operation = AsyncMock(side_effect=VoteDataException("bad vote"))
        policy = RetryPolicy.fixed(5, 1.0, sleep=clock.sleep)

        with pytest.raises(VoteDataException, match="bad vote"):
            await policy.run(operation)

        assert operation.call_count == 1
        assert clock.sleeps == []

    @pytest.mark.asyncio
    async def test_key_error_not_retried(self, clock):
        operation = AsyncMock(side_effect=KeyError("total"))
        policy = RetryPolicy.fixed(5, 1.0, sleep=clock.sleep)

        with pytest.raises(KeyError):
            await policy.run(operation)

        assert operation.call_count == 1

    @pytest.mark.asyncio
    async def test_custom_backoff(self, clock):
        """Test that an injected backoff strategy drives the delays."""
        operation = AsyncMock(
            side_effect=[
                APIException("fail"),
                APIException("fail"),
                APIException("fail"),
                "success",
            ]
        )
        policy = RetryPolicy(
            max_retries=3,
            backoff=lambda attempt: min(float(attempt), 3.0),
            sleep=clock.sleep,
        )

        result = await policy.run(operation)

        assert result == "success"
        assert clock.sleeps == [1.0, 2.0, 3.0]

    @pytest.mark.asyncio
    async def test_custom_retryable_exceptions(self, clock):
        operation = AsyncMock(side_effect=[ValueError("flaky"), "ok"])
        policy = RetryPolicy(
            max_retries=1,
            sleep=clock.sleep,
            retryable_exceptions=(ValueError,),
        )

        assert await policy.run(operation) == "ok"
        assert operation.call_count == 2

    def test_negative_retries_rejected(self):
        with pytest.raises(ValueError):
            RetryPolicy(max_retries=-1)

    def test_max_attempts(self):
        assert RetryPolicy.fixed(18, 10.0).max_attempts == 19


class TestBackoffStrategies:
    def test_fixed_delay(self):
        backoff = FixedDelay(10.0)
        assert [backoff(n) for n in (1, 2, 5)] == [10.0, 10.0, 10.0]

