"""
Completion Error Handler
========================

Error taxonomy for the completion service plus retry with exponential
backoff for completion calls.
"""

import asyncio
import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)


class LLMServiceError(Exception):
    """Base exception for completion service errors."""
    pass


class LLMTimeoutError(LLMServiceError):
    """Raised when a completion call times out."""
    pass


class LLMValidationError(LLMServiceError):
    """Raised when the completion response is empty or malformed."""
    pass


class LLMRateLimitError(LLMServiceError):
    """Raised when the API rate limit is exceeded."""
    pass


class LLMContentFilterError(LLMServiceError):
    """Raised when the completion is stopped by the provider's safety filter - DO NOT RETRY."""
    pass


class LLMProviderError(LLMServiceError):
    """Raised for provider errors, carrying the HTTP status when there is one."""
    def __init__(self, message: str, provider: str = None, status_code: int = None):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class LLMAccessDeniedError(LLMProviderError):
    """Raised on 401/403 (bad or missing API key) - DO NOT RETRY."""
    pass


NON_RETRYABLE_ERRORS = (LLMContentFilterError, LLMAccessDeniedError)


def is_retryable(error: BaseException) -> bool:
    """Whether asking the user to try again could help."""
    return not isinstance(error, NON_RETRYABLE_ERRORS)


class ErrorHandler:
    """
    Handles errors and retries for completion calls.
    """

    DEFAULT_MAX_RETRIES = 3
    DEFAULT_BASE_DELAY = 1.0  # seconds
    DEFAULT_MAX_DELAY = 10.0  # seconds
    RATE_LIMIT_BASE_DELAY = 5.0
    RATE_LIMIT_MAX_DELAY = 30.0

    @staticmethod
    async def with_retry(
        func: Callable,
        *args,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_delay: float = DEFAULT_BASE_DELAY,
        max_delay: float = DEFAULT_MAX_DELAY,
        **kwargs
    ) -> Any:
        """
        Execute async function with exponential backoff retry logic.

        Args:
            func: Async function to execute
            *args: Positional arguments for func
            max_retries: Maximum number of attempts (at least one is made)
            base_delay: Initial delay between retries (seconds)
            max_delay: Maximum delay between retries (seconds)
            **kwargs: Keyword arguments for func

        Returns:
            Result from successful function call

        Raises:
            LLMServiceError: If all retries fail
            LLMContentFilterError, LLMAccessDeniedError: immediately, without retrying
        """
        max_retries = max(1, max_retries)
        last_exception = None

        for attempt in range(max_retries):
            try:
                logger.debug(f"[ErrorHandler] Attempt {attempt + 1}/{max_retries}")
                result = await func(*args, **kwargs)

                if attempt > 0:
                    logger.info(f"[ErrorHandler] Succeeded on attempt {attempt + 1}")

                return result

            except asyncio.TimeoutError as e:
                last_exception = LLMTimeoutError(f"Timeout on attempt {attempt + 1}: {e}")
                logger.warning(f"[ErrorHandler] {last_exception}")

            except NON_RETRYABLE_ERRORS as e:
                logger.warning(f"[ErrorHandler] Non-retryable error: {e.__class__.__name__} - {e}")
                raise

            except LLMRateLimitError as e:
                # Rate limit - longer delays: 5s, 10s, 20s
                last_exception = e
                logger.warning(f"[ErrorHandler] Rate limited on attempt {attempt + 1}: {e}")
                if attempt < max_retries - 1:
                    delay = min(ErrorHandler.RATE_LIMIT_BASE_DELAY * (2 ** attempt), ErrorHandler.RATE_LIMIT_MAX_DELAY)
                    logger.debug(f"[ErrorHandler] Rate limit retry in {delay:.1f}s...")
                    await asyncio.sleep(delay)
                continue

            except Exception as e:
                last_exception = e
                logger.warning(f"[ErrorHandler] Attempt {attempt + 1} failed: {e}")

            # No sleep after the last attempt
            if attempt < max_retries - 1:
                delay = min(base_delay * (2 ** attempt), max_delay)
                logger.debug(f"[ErrorHandler] Retrying in {delay:.1f}s...")
                await asyncio.sleep(delay)

        error_msg = f"All {max_retries} attempts failed. Last error: {last_exception}"
        logger.error(f"[ErrorHandler] {error_msg}")
        raise LLMServiceError(error_msg) from last_exception


# Singleton instance
error_handler = ErrorHandler()
