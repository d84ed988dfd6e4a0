"""
Retry utilities.

Bounded fixed-delay retries, used for RPC polls that hit a
response-format mismatch.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

from flashonstellar.utils.logging import get_logger

T = TypeVar("T")

_logger = get_logger(__name__)


@dataclass
class RetryConfig:
    """
    Configuration for retry behavior.

    Example:
        ```python
        config = RetryConfig(
            max_attempts=2,
            delay_ms=2000,
            retryable_errors=(ResponseFormatError,),
        )
        ```
    """

    max_attempts: int = 2
    """Total number of attempts, including the first."""

    delay_ms: int = 2000
    """Wait between attempts in milliseconds."""

    retryable_errors: Tuple[Type[Exception], ...] = field(
        default_factory=lambda: (Exception,)
    )
    """Exception types that trigger a retry. Anything else propagates."""


async def retry_async(
    fn: Callable[[], Awaitable[T]],
    config: Optional[RetryConfig] = None,
) -> T:
    """
    Execute an async function with retry logic.

    Args:
        fn: Async function to execute (no arguments)
        config: Retry configuration (uses defaults if None)

    Returns:
        Result of the function

    Raises:
        The last retryable exception once all attempts are exhausted.
    """
    config = config or RetryConfig()
    last_error: Optional[Exception] = None
    delay = config.delay_ms / 1000

    for attempt in range(config.max_attempts):
        try:
            return await fn()
        except config.retryable_errors as e:
            last_error = e
            if attempt < config.max_attempts - 1:
                _logger.debug(
                    "Retrying after error",
                    extra={"attempt": attempt + 1, "delay": delay, "error": str(e)},
                )
                await asyncio.sleep(delay)

    if last_error is not None:
        raise last_error

    raise RuntimeError("Retry exhausted without error")
