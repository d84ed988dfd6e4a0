"""
Exception hierarchy for the flashonstellar SDK.
"""

from flashonstellar.errors.base import ContractCallError
from flashonstellar.errors.pipeline import (
    AccountLookupError,
    AmbiguousFootprintError,
    ConfigurationError,
    EncodingError,
    PollCancelledError,
    PollTimeoutError,
    PreparationError,
    ResponseParsingError,
    SigningError,
    SimulationError,
    SubmissionError,
    UnsupportedNetworkError,
)

__all__ = [
    "ContractCallError",
    "EncodingError",
    "AccountLookupError",
    "SimulationError",
    "AmbiguousFootprintError",
    "PreparationError",
    "ConfigurationError",
    "SigningError",
    "SubmissionError",
    "ResponseParsingError",
    "UnsupportedNetworkError",
    "PollTimeoutError",
    "PollCancelledError",
]
