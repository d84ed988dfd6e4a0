"""
Utilities: structured logging, retry and JSON helpers.
"""

from flashonstellar.utils.logging import (
    LogContext,
    configure_logging,
    disable_logging,
    get_logger,
    set_level,
)
from flashonstellar.utils.retry import RetryConfig, retry_async
from flashonstellar.utils.serialization import dumps, to_json_safe

__all__ = [
    # Structured logging
    "get_logger",
    "configure_logging",
    "set_level",
    "disable_logging",
    "LogContext",
    # Retry
    "RetryConfig",
    "retry_async",
    # Serialization
    "to_json_safe",
    "dumps",
]
