"""
Batch executor.

Packs several contract calls into one envelope: one simulation, at most
one signature and one submission. The batch succeeds or fails as a unit;
a simulation failure leaves nothing signed or submitted.

The ledger accepts a contract-call transaction only when it holds exactly
one operation, so multi-call envelopes are useful for reads. A write
envelope with more than one operation is rejected with ``PreparationError``
before anything is signed.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, List, Optional, Sequence, TypeVar

from stellar_sdk.operation import Operation

from flashonstellar.errors import ContractCallError, PreparationError
from flashonstellar.protocol.pipeline import TransactionPipeline
from flashonstellar.types import ContractArg, ContractCall, ContractMethodResponse
from flashonstellar.utils.logging import get_logger

T = TypeVar("T")

_logger = get_logger(__name__)


def _identity(value: Any) -> Any:
    return value


@dataclass(frozen=True)
class BatchedRead(Generic[T]):
    """
    A read call within a batch.

    Plain ``params`` are sent as ``string`` arguments; pass ``ContractArg``
    for any other type. ``transform`` maps the decoded result.
    """

    method: str
    params: Sequence[Any] = ()
    transform: Callable[[Any], T] = _identity


@dataclass(frozen=True)
class BatchedWrite:
    """A write call within a batch. Params follow the same rules as ``BatchedRead``."""

    method: str
    params: Sequence[Any] = ()


def wallet_call(wallet: str, method: str, params: Iterable[Any] = ()) -> ContractCall:
    """Build a call whose first argument is ``wallet`` as an address."""
    args: List[ContractArg] = [ContractArg(value=wallet, type="address")]
    for param in params:
        if isinstance(param, ContractArg):
            args.append(param)
        elif isinstance(param, dict):
            args.append(ContractArg.model_validate(param))
        else:
            args.append(ContractArg(value=param, type="string"))
    return ContractCall(method=method, args=tuple(args))


class BatchExecutor:
    """Executes multi-call envelopes through a pipeline."""

    def __init__(self, pipeline: TransactionPipeline) -> None:
        self._pipeline = pipeline

    async def execute(
        self,
        calls: Sequence[ContractCall],
        source: str,
        extra_operations: Iterable[Operation] = (),
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ContractMethodResponse:
        """
        Execute ``calls`` (plus ``extra_operations``) as one envelope.

        The read/write classification covers the whole envelope. For a
        read-only batch ``result`` is the list of decoded values in call order.
        """
        calls = tuple(calls)
        if not calls:
            raise ValueError("batch requires at least one call")
        _logger.debug(
            "Executing batch",
            extra={"methods": ",".join(c.method for c in calls), "size": len(calls)},
        )
        return await self._pipeline.execute(
            calls, source, extra_operations=extra_operations, cancel_event=cancel_event
        )

    async def read(self, wallet: str, operations: Sequence[BatchedRead[T]]) -> List[T]:
        """
        Run wallet-scoped reads in one simulation and transform each result.

        Raises:
            ContractCallError: If the batch is not classified read-only.
        """
        calls = [wallet_call(wallet, op.method, op.params) for op in operations]
        response = await self._pipeline.prepare(calls, wallet)
        if not response.is_read_only:
            raise ContractCallError(
                "Batch read touched writable storage",
                code="BATCH_NOT_READ_ONLY",
                method=[c.method for c in calls],
            )
        results = [response.result] if len(calls) == 1 else list(response.result or [])
        return [op.transform(result) for op, result in zip(operations, results)]

    async def write(
        self,
        wallet: str,
        operations: Sequence[BatchedWrite],
        extra_operations: Iterable[Operation] = (),
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ContractMethodResponse:
        """
        Run a wallet-scoped write as one signed transaction.

        Raises:
            PreparationError: If the envelope would hold more than one
                operation. Raised before any network call.
        """
        calls = [wallet_call(wallet, op.method, op.params) for op in operations]
        extra_operations = tuple(extra_operations)
        size = len(calls) + len(extra_operations)
        if size > 1:
            raise PreparationError(
                f"a write transaction must hold exactly one contract operation, got {size}",
                method=[c.method for c in calls],
                details={"operations": size},
            )
        return await self.execute(calls, wallet, extra_operations, cancel_event=cancel_event)
