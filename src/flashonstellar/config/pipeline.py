"""
Pipeline configuration.

Timing and policy knobs for building, polling and the unresolved
NOT_FOUND fallback.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BASE_FEE = 100
DEFAULT_TIMEOUT_SECONDS = 60
DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_MAX_POLL_DURATION = 300.0
DEFAULT_PARSE_RETRY_DELAY = 2.0
DEFAULT_UNPARSED_NOT_FOUND_LIMIT = 3


class PipelineConfig(BaseModel):
    """
    Configuration for a contract-call pipeline.

    Polling stops at whichever of ``max_poll_attempts`` or
    ``max_poll_duration`` is hit first; ``None`` disables that bound.
    """

    model_config = ConfigDict(frozen=True)

    base_fee: int = Field(
        default=DEFAULT_BASE_FEE,
        ge=100,
        description="Base inclusion fee in stroops",
    )
    timeout_seconds: int = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        ge=1,
        description="Envelope validity window in seconds",
    )
    poll_interval: float = Field(
        default=DEFAULT_POLL_INTERVAL,
        ge=0,
        description="Seconds between getTransaction polls",
    )
    max_poll_attempts: Optional[int] = Field(
        default=None,
        ge=1,
        description="Maximum number of polls before PollTimeoutError",
    )
    max_poll_duration: Optional[float] = Field(
        default=DEFAULT_MAX_POLL_DURATION,
        gt=0,
        description="Maximum seconds spent polling before PollTimeoutError",
    )
    parse_retry_delay: float = Field(
        default=DEFAULT_PARSE_RETRY_DELAY,
        ge=0,
        description="Wait before retrying a poll that hit a format mismatch",
    )
    unparsed_not_found_limit: int = Field(
        default=DEFAULT_UNPARSED_NOT_FOUND_LIMIT,
        ge=1,
        description="Consecutive unparsed NOT_FOUND polls before presuming success",
    )
    presume_success_on_unparsed: bool = Field(
        default=True,
        description="Return a PresumedSuccess instead of raising ResponseParsingError",
    )
