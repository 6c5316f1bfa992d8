"""
Resilient invocation of judge operations.

Transient failures (overload, rate limits, transport errors, malformed judge
output) are retried with exponential backoff; anything else propagates as-is.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

import openai
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from engine.config_loader import RetryConfig
from engine.exceptions import EngineException, JudgeResponseError, JudgeUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_ERROR_TYPES = (
    openai.RateLimitError,
    openai.APITimeoutError,
    openai.APIConnectionError,
    openai.InternalServerError,
    JudgeResponseError,
)

# Substrings that mark an error from any provider as transient
TRANSIENT_MESSAGE_SIGNATURES = (
    "503",
    "overloaded",
    "unavailable",
    "schema validation failed",
    "fetch failed",
)

# Bugs in our own code are never retried, whatever their message says
PROGRAMMING_ERROR_TYPES = (
    TypeError,
    AttributeError,
    NameError,
    ImportError,
    AssertionError,
    NotImplementedError,
)


def is_transient(exc: BaseException) -> bool:
    """Return True for operational errors that are worth retrying."""
    if isinstance(exc, TRANSIENT_ERROR_TYPES):
        return True
    if isinstance(exc, (EngineException,) + PROGRAMMING_ERROR_TYPES):
        return False
    if not isinstance(exc, Exception):
        return False
    message = str(exc).lower()
    return any(signature in message for signature in TRANSIENT_MESSAGE_SIGNATURES)


def _log_retry(operation_name: str) -> Callable[[RetryCallState], None]:
    """Build a before_sleep hook that logs each retry."""
    def log(retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception()
        wait = retry_state.next_action.sleep if retry_state.next_action else 0
        logger.warning(
            "%s attempt %s failed with a transient error. Retrying in %.1fs. Details: %s",
            operation_name, retry_state.attempt_number, wait, exc,
        )
    return log


async def invoke_with_retry(
    operation: Callable[[], Awaitable[T]],
    operation_name: str = "AI",
    config: Optional[RetryConfig] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Await a zero-argument judge operation, retrying transient failures.

    Delay before retry n (0-based) is base_delay_seconds * 2**n.

    Args:
        operation: Zero-argument coroutine factory calling the judge
        operation_name: Name used in the terminal error message
        config: Attempt ceiling and base delay (defaults: 3 attempts, 1s)
        sleep: Async sleep function (swapped out in tests)

    Returns:
        Whatever the operation returns

    Raises:
        JudgeUnavailableError: after the attempt ceiling is exhausted
        Exception: any non-transient error, unchanged
    """
    config = config or RetryConfig()

    retrying = AsyncRetrying(
        retry=retry_if_exception(is_transient),
        stop=stop_after_attempt(config.max_attempts),
        wait=wait_exponential(multiplier=config.base_delay_seconds, min=0),
        before_sleep=_log_retry(operation_name),
        sleep=sleep,
    )

    try:
        return await retrying(operation)
    except RetryError as e:
        last_error = e.last_attempt.exception()
        logger.error(
            "All %s attempts of %s failed. The last error was: %s",
            config.max_attempts, operation_name, last_error,
        )
        raise JudgeUnavailableError(operation_name, config.max_attempts) from last_error
