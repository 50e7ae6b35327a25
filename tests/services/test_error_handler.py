"""
Unit Tests for Error Handler
=============================
"""

import pytest
import asyncio
from services import error_handler as error_handler_module
from services.error_handler import (
    error_handler,
    is_retryable,
    LLMAccessDeniedError,
    LLMContentFilterError,
    LLMProviderError,
    LLMRateLimitError,
    LLMServiceError,
    LLMTimeoutError,
    LLMValidationError
)


@pytest.fixture
def recorded_sleeps(monkeypatch):
    """Replace backoff sleeps with a recorder."""
    delays = []

    async def fake_sleep(delay):
        delays.append(delay)

    monkeypatch.setattr(error_handler_module.asyncio, "sleep", fake_sleep)
    return delays


class TestErrorHandler:
    """Test suite for ErrorHandler."""

    @pytest.mark.asyncio
    async def test_with_retry_success(self):
        """Test successful retry."""
        call_count = 0

        async def success_after_2_tries():
            nonlocal call_count
            call_count += 1
            if call_count < 2:
                raise Exception("Temporary failure")
            return "Success"

        result = await error_handler.with_retry(
            success_after_2_tries,
            max_retries=3,
            base_delay=0.1
        )

        assert result == "Success"
        assert call_count == 2

    @pytest.mark.asyncio
    async def test_with_retry_all_fail(self):
        """Test that all retries fail."""
        async def always_fail():
            raise Exception("Always fails")

        with pytest.raises(LLMServiceError):
            await error_handler.with_retry(
                always_fail,
                max_retries=2,
                base_delay=0.1
            )

    @pytest.mark.asyncio
    async def test_with_retry_passes_arguments(self):
        async def echo(prompt, suffix=""):
            return prompt + suffix

        result = await error_handler.with_retry(echo, "mind", suffix=" map", max_retries=1)
        assert result == "mind map"

    @pytest.mark.asyncio
    async def test_backoff_delays(self, recorded_sleeps):
        async def always_fail():
            raise LLMProviderError("upstream 502", status_code=502)

        with pytest.raises(LLMServiceError) as exc_info:
            await error_handler.with_retry(always_fail, max_retries=4, base_delay=1.0, max_delay=3.0)

        # no sleep after the last attempt
        assert recorded_sleeps == [1.0, 2.0, 3.0]
        assert isinstance(exc_info.value.__cause__, LLMProviderError)

    @pytest.mark.asyncio
    async def test_rate_limit_uses_longer_backoff(self, recorded_sleeps):
        async def rate_limited():
            raise LLMRateLimitError("429")

        with pytest.raises(LLMServiceError):
            await error_handler.with_retry(rate_limited, max_retries=3, base_delay=0.1)

        assert recorded_sleeps == [5.0, 10.0]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        LLMAccessDeniedError("invalid key", status_code=401),
        LLMContentFilterError("blocked"),
    ])
    async def test_non_retryable_raised_immediately(self, error, recorded_sleeps):
        call_count = 0

        async def refuse():
            nonlocal call_count
            call_count += 1
            raise error

        with pytest.raises(type(error)):
            await error_handler.with_retry(refuse, max_retries=3)

        assert call_count == 1
        assert recorded_sleeps == []

    @pytest.mark.asyncio
    async def test_zero_retries_still_attempts_once(self):
        async def ok():
            return "ok"

        assert await error_handler.with_retry(ok, max_retries=0) == "ok"

    @pytest.mark.asyncio
    async def test_timeouts_are_retried(self, recorded_sleeps):
        call_count = 0

        async def slow_then_ok():
            nonlocal call_count
            call_count += 1
            if call_count == 1:
                raise asyncio.TimeoutError()
            return "ok"

        assert await error_handler.with_retry(slow_then_ok, max_retries=2, base_delay=0.5) == "ok"
        assert recorded_sleeps == [0.5]

    @pytest.mark.asyncio
    async def test_last_timeout_is_the_cause(self, recorded_sleeps):
        async def always_slow():
            raise asyncio.TimeoutError()

        with pytest.raises(LLMServiceError) as exc_info:
            await error_handler.with_retry(always_slow, max_retries=2)
        assert isinstance(exc_info.value.__cause__, LLMTimeoutError)

    @pytest.mark.asyncio
    async def test_missing_payload_is_retried(self, recorded_sleeps):
        async def no_choices():
            raise LLMValidationError("Completion response has no choices")

        with pytest.raises(LLMServiceError):
            await error_handler.with_retry(no_choices, max_retries=3, base_delay=1.0)
        assert len(recorded_sleeps) == 2


class TestIsRetryable:
    """Test suite for is_retryable()."""

    @pytest.mark.parametrize("error", [
        LLMTimeoutError("timeout"),
        LLMRateLimitError("429"),
        LLMServiceError("All 3 attempts failed"),
        LLMProviderError("502", status_code=502),
        RuntimeError("boom"),
    ])
    def test_retryable(self, error):
        assert is_retryable(error) is True

    @pytest.mark.parametrize("error", [
        LLMAccessDeniedError("forbidden", status_code=403),
        LLMContentFilterError("blocked"),
    ])
    def test_not_retryable(self, error):
        assert is_retryable(error) is False

    def test_provider_error_fields(self):
        error = LLMProviderError("bad gateway", provider="openai-compatible", status_code=502)
        assert error.provider == "openai-compatible"
        assert error.status_code == 502
