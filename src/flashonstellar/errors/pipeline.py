"""
Pipeline exceptions for contract-call execution.

Local errors (encoding, configuration, classification) are raised before
any network I/O is committed. Network errors (simulation, preparation,
submission) carry the node's diagnostic payload unmodified in ``details``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Union

from flashonstellar.errors.base import ContractCallError

Methods = Optional[Union[str, Sequence[str]]]


class EncodingError(ContractCallError):
    """
    Raised when a value cannot be represented as its declared argument type.

    Example:
        >>> raise EncodingError(-1, "u32", reason="must be between 0 and 2**32 - 1")
    """

    def __init__(
        self,
        value: Any,
        arg_type: str,
        *,
        reason: Optional[str] = None,
        method: Methods = None,
    ) -> None:
        message = f"Cannot encode {value!r} as {arg_type}"
        if reason:
            message += f" ({reason})"
        super().__init__(
            message,
            code="ENCODING_ERROR",
            method=method,
            details={"value": repr(value), "type": arg_type, "reason": reason},
        )
        self.value = value
        self.arg_type = arg_type
        self.reason = reason


class AccountLookupError(ContractCallError):
    """Raised when the source account is unknown to the network."""

    def __init__(
        self,
        account_id: str,
        *,
        method: Methods = None,
        reason: Optional[str] = None,
    ) -> None:
        message = f"Source account not found: {account_id or '<empty>'}"
        if reason:
            message += f" ({reason})"
        super().__init__(
            message,
            code="ACCOUNT_NOT_FOUND",
            method=method,
            details={"account_id": account_id, "reason": reason},
        )
        self.account_id = account_id


class SimulationError(ContractCallError):
    """
    Raised when the node rejects a dry run.

    ``diagnostic`` is the node-provided error string and ``events`` the raw
    diagnostic events; both are kept exactly as received.
    """

    def __init__(
        self,
        diagnostic: Optional[str],
        *,
        method: Methods = None,
        events: Optional[List[str]] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = dict(details or {})
        details["error"] = diagnostic
        details["events"] = list(events or [])
        super().__init__(
            f"Transaction simulation error: {diagnostic}",
            code="SIMULATION_FAILED",
            method=method,
            details=details,
        )
        self.diagnostic = diagnostic
        self.events = list(events or [])


class AmbiguousFootprintError(ContractCallError):
    """
    Raised when a simulation touched no ledger storage at all.

    With an empty read set and an empty write set the call is neither
    read-only nor a write under the footprint policy.
    """

    def __init__(self, *, method: Methods = None, result: Any = None) -> None:
        super().__init__(
            "Simulation footprint is empty; cannot classify call as read or write",
            code="AMBIGUOUS_FOOTPRINT",
            method=method,
            details={"result": result},
        )
        self.result = result


class PreparationError(ContractCallError):
    """Raised when the prepare step rejects a write-classified envelope."""

    def __init__(
        self,
        diagnostic: str,
        *,
        method: Methods = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = dict(details or {})
        details["error"] = diagnostic
        super().__init__(
            f"Transaction preparation failed: {diagnostic}",
            code="PREPARATION_FAILED",
            method=method,
            details=details,
        )
        self.diagnostic = diagnostic


class ConfigurationError(ContractCallError):
    """Raised when a write is attempted without a signing callback."""

    def __init__(self, message: Optional[str] = None, *, method: Methods = None) -> None:
        super().__init__(
            message or "sign_transaction is required for write operations",
            code="SIGNER_NOT_CONFIGURED",
            method=method,
        )


class SigningError(ContractCallError):
    """Raised when the external signer rejects or fails. The cause is chained."""

    def __init__(self, cause: BaseException, *, method: Methods = None) -> None:
        super().__init__(
            f"External signer failed: {cause}",
            code="SIGNING_FAILED",
            method=method,
            details={"cause": type(cause).__name__},
        )
        self.cause = cause


class SubmissionError(ContractCallError):
    """
    Raised when the node rejects a signed transaction or it fails on ledger.

    ``status`` is the status reported by the node and ``result_xdr`` its raw
    result code payload.
    """

    def __init__(
        self,
        status: str,
        *,
        method: Methods = None,
        tx_hash: Optional[str] = None,
        result_xdr: Optional[str] = None,
        events: Optional[List[str]] = None,
    ) -> None:
        super().__init__(
            f"Transaction failed with status {status}: {result_xdr or 'Unknown error'}",
            code="SUBMISSION_FAILED",
            method=method,
            tx_hash=tx_hash,
            details={
                "status": status,
                "result_xdr": result_xdr,
                "events": list(events or []),
            },
        )
        self.status = status
        self.result_xdr = result_xdr


class ResponseParsingError(ContractCallError):
    """
    Raised when a polled response cannot be parsed.

    The poller normally recovers from these by retrying or falling back to
    a raw status passthrough; it only surfaces when presumption is disabled.
    """

    def __init__(
        self,
        diagnostic: str,
        *,
        method: Methods = None,
        tx_hash: Optional[str] = None,
    ) -> None:
        super().__init__(
            f"Unable to parse transaction response: {diagnostic}",
            code="RESPONSE_PARSING_FAILED",
            method=method,
            tx_hash=tx_hash,
            details={"error": diagnostic},
        )
        self.diagnostic = diagnostic


class UnsupportedNetworkError(ContractCallError):
    """Raised for network identifiers other than TESTNET and PUBLIC."""

    def __init__(self, network: Any) -> None:
        super().__init__(
            f"Unsupported network: {network!r}",
            code="UNSUPPORTED_NETWORK",
            details={"network": str(network)},
        )
        self.network = network


class PollTimeoutError(ContractCallError):
    """Raised when polling exceeds the configured attempt or duration limit."""

    def __init__(
        self,
        tx_hash: str,
        *,
        attempts: int,
        elapsed: float,
        method: Methods = None,
    ) -> None:
        super().__init__(
            f"Transaction not confirmed after {attempts} polls ({elapsed:.1f}s)",
            code="POLL_TIMEOUT",
            method=method,
            tx_hash=tx_hash,
            details={"attempts": attempts, "elapsed_seconds": elapsed},
        )
        self.attempts = attempts
        self.elapsed = elapsed


class PollCancelledError(ContractCallError):
    """
    Raised when the caller cancels polling.

    The submitted transaction is unaffected; only client-side waiting stops.
    """

    def __init__(self, tx_hash: str, *, attempts: int, method: Methods = None) -> None:
        super().__init__(
            "Polling cancelled by caller; the submitted transaction may still land",
            code="POLL_CANCELLED",
            method=method,
            tx_hash=tx_hash,
            details={"attempts": attempts},
        )
        self.attempts = attempts
