"""
Simulator and classifier.

Dry-runs an envelope, decodes its return value and decides from the
storage footprint whether the call mutates state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Sequence

from stellar_sdk import SorobanServerAsync, TransactionEnvelope, xdr
from stellar_sdk.exceptions import BaseRequestError, SorobanRpcErrorResponse
from stellar_sdk.soroban_rpc import SimulateTransactionResponse

from flashonstellar.errors import AmbiguousFootprintError, SimulationError
from flashonstellar.protocol.builder import method_names
from flashonstellar.protocol.encoder import decode_value
from flashonstellar.types import ContractCall
from flashonstellar.utils.logging import get_logger

_logger = get_logger(__name__)


@dataclass(frozen=True)
class SimulationOutcome:
    """
    Result of a successful dry run.

    Attributes:
        is_read_only: True when the footprint reads storage and writes none.
        result: Decoded return value; a list when the envelope holds several calls.
        response: Raw simulation response, reused by the prepare step.
    """

    is_read_only: bool
    result: Any
    response: SimulateTransactionResponse


def classify_footprint(transaction_data: str) -> bool:
    """
    Classify a simulation footprint.

    Returns:
        True for read-only (reads present, no writes), False for a write.

    Raises:
        AmbiguousFootprintError: When both the read and write sets are empty.
    """
    footprint = xdr.SorobanTransactionData.from_xdr(transaction_data).resources.footprint
    read_only = footprint.read_only or []
    read_write = footprint.read_write or []
    if not read_only and not read_write:
        raise AmbiguousFootprintError()
    return bool(read_only) and not read_write


class Simulator:
    """Runs ``simulateTransaction`` and classifies the outcome."""

    def __init__(self, server: SorobanServerAsync) -> None:
        self._server = server

    async def simulate(
        self, envelope: TransactionEnvelope, calls: Sequence[ContractCall]
    ) -> SimulationOutcome:
        """
        Dry-run ``envelope``.

        Args:
            envelope: Unsigned envelope from the builder.
            calls: The calls it contains, used for error context.

        Raises:
            SimulationError: If the node rejects the dry run.
            AmbiguousFootprintError: If the footprint is empty.
        """
        methods = method_names(calls)
        try:
            response = await self._server.simulate_transaction(envelope)
        except SorobanRpcErrorResponse as exc:
            raise SimulationError(
                exc.message,
                method=methods,
                details={"rpc_code": exc.code, "data": exc.data},
            ) from exc
        except BaseRequestError as exc:
            raise SimulationError(str(exc), method=methods) from exc

        if response.error:
            raise SimulationError(
                response.error,
                method=methods,
                events=response.events,
                details={"latest_ledger": response.latest_ledger},
            )
        if not response.transaction_data:
            raise SimulationError(
                "simulation returned no transaction data",
                method=methods,
                events=response.events,
            )

        result = self._decode_results(response, len(calls))
        try:
            is_read_only = classify_footprint(response.transaction_data)
        except AmbiguousFootprintError:
            raise AmbiguousFootprintError(method=methods, result=result) from None

        if response.restore_preamble is not None:
            _logger.warning(
                "Simulation requires a footprint restore first",
                extra={"methods": ",".join(methods)},
            )

        _logger.debug(
            "Simulated",
            extra={
                "methods": ",".join(methods),
                "read_only": is_read_only,
                "min_resource_fee": response.min_resource_fee,
            },
        )
        return SimulationOutcome(is_read_only=is_read_only, result=result, response=response)

    @staticmethod
    def _decode_results(response: SimulateTransactionResponse, call_count: int) -> Any:
        values: List[Any] = [
            decode_value(xdr.SCVal.from_xdr(entry.xdr)) for entry in response.results or []
        ]
        if call_count == 1:
            return values[0] if values else None
        return values
