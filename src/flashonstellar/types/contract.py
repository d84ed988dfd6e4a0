"""
Contract call types.

Typed arguments, calls, pipeline responses and the ephemeral poll state.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from flashonstellar.utils.serialization import to_json_safe

ArgType = Literal[
    "u32",
    "i32",
    "u64",
    "i64",
    "u128",
    "i128",
    "string",
    "symbol",
    "address",
    "bool",
    "vec",
]
"""Wire types accepted by the argument encoder."""


class ContractArg(BaseModel):
    """
    A value tagged with its contract wire type.

    For ``vec``, ``value=None`` is an absent optional (not an empty list)
    and a list value holds nested ``ContractArg`` items.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    value: Any = None
    type: ArgType

    @field_validator("value", mode="after")
    @classmethod
    def _coerce_vec_items(cls, value: Any) -> Any:
        # non-mapping items are left for the encoder to reject
        if isinstance(value, (list, tuple)):
            return tuple(
                ContractArg.model_validate(item) if isinstance(item, dict) else item
                for item in value
            )
        return value


class ContractCall(BaseModel):
    """A contract method name plus its ordered, typed arguments."""

    model_config = ConfigDict(frozen=True)

    method: str = Field(min_length=1)
    args: Tuple[ContractArg, ...] = ()


class TransactionStatus(str, Enum):
    """Status of a submitted transaction as seen by the poller."""

    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    NOT_FOUND = "NOT_FOUND"


class PresumedSuccess(BaseModel):
    """
    Synthetic outcome for a transaction whose status never resolved.

    Produced when polling kept returning NOT_FOUND alongside parse-format
    errors. The transaction may have landed; callers should re-verify with
    an authoritative read before relying on it.
    """

    model_config = ConfigDict(frozen=True)

    tx_hash: str
    confirmed: Literal[False] = False
    reason: str = "status unresolved: NOT_FOUND with unparseable responses"
    diagnostics: Tuple[str, ...] = ()


class UnparsedResult(BaseModel):
    """Raw polled status returned when no return-value strategy applied."""

    model_config = ConfigDict(frozen=True)

    tx_hash: str
    status: TransactionStatus
    raw: Dict[str, Any] = Field(default_factory=dict)
    unparsed: Literal[True] = True


class ContractMethodResponse(BaseModel):
    """
    Outcome of driving one envelope through the pipeline.

    Before signing, ``result`` of a write holds the unsigned base64 XDR
    envelope. After submission it holds the decoded return value, an
    ``UnparsedResult`` or a ``PresumedSuccess``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    is_success: bool
    is_read_only: bool
    result: Any = None
    tx_hash: Optional[str] = None
    confirmed: bool = True
    parser: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-safe dictionary."""
        result = self.result
        if isinstance(result, BaseModel):
            result = result.model_dump()
        return {
            "isSuccess": self.is_success,
            "isReadOnly": self.is_read_only,
            "result": to_json_safe(result),
            "txHash": self.tx_hash,
            "confirmed": self.confirmed,
            "parser": self.parser,
        }


class PollState(BaseModel):
    """Ephemeral state of one polling loop. Never persisted."""

    hash: str
    status: TransactionStatus = TransactionStatus.PENDING
    attempts: int = 0
    unparsed_not_found: int = 0
    diagnostics: List[str] = Field(default_factory=list)

    def observe(self, status: TransactionStatus, diagnostic: Optional[str] = None) -> None:
        """Record one poll observation."""
        self.attempts += 1
        self.status = status
        if status is TransactionStatus.NOT_FOUND and diagnostic is not None:
            self.unparsed_not_found += 1
            self.diagnostics.append(diagnostic)
        else:
            # a clean NOT_FOUND is a real record-not-found signal
            self.unparsed_not_found = 0
            self.diagnostics.clear()
