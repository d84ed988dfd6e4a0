"""
Base exception class for the flashonstellar SDK.

All pipeline exceptions inherit from ContractCallError, which provides
structured error information including error codes, the contract method
being invoked, transaction hashes, and the raw node diagnostic.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence, Union


class ContractCallError(Exception):
    """
    Base exception for all contract-call pipeline errors.

    Provides structured error information that can be serialized and logged.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code (e.g., "SIMULATION_FAILED").
        method: Contract method name(s) the failing call was invoking.
        tx_hash: Optional transaction hash related to the error.
        details: Optional dictionary with additional error context. Node
            diagnostics are stored here verbatim.

    Example:
        >>> raise ContractCallError(
        ...     "Transaction failed",
        ...     code="TX_FAILED",
        ...     method="register_provider",
        ...     tx_hash="ab12...",
        ...     details={"result_xdr": "AAAA..."}
        ... )
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "CONTRACT_CALL_ERROR",
        method: Optional[Union[str, Sequence[str]]] = None,
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize ContractCallError.

        Args:
            message: Human-readable error description.
            code: Machine-readable error code.
            method: Contract method name, or names for a batch.
            tx_hash: Optional transaction hash related to the error.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.method = _join_methods(method)
        self.tx_hash = tx_hash
        self.details = details or {}

    def __str__(self) -> str:
        """Return formatted error message."""
        parts = [f"[{self.code}]"]
        if self.method:
            parts.append(f"{self.method}:")
        parts.append(self.message)
        if self.tx_hash:
            parts.append(f"(tx: {self.tx_hash[:10]}...)")
        return " ".join(parts)

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"method={self.method!r}, "
            f"tx_hash={self.tx_hash!r}, "
            f"details={self.details!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to a dictionary for JSON serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "method": self.method,
            "tx_hash": self.tx_hash,
            "details": self.details,
        }


def _join_methods(method: Optional[Union[str, Sequence[str]]]) -> Optional[str]:
    if method is None or isinstance(method, str):
        return method
    return ",".join(method)
