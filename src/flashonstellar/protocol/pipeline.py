"""
Transaction pipeline.

Drives contract calls through encode, build, simulate and, for writes,
prepare, sign and submit:

    build -> simulate --read-only--> decoded result
                      --write-----> prepare -> sign -> submit/poll

Example:
    >>> pipeline = TransactionPipeline(context)
    >>> call = ContractCall(method="get_provider_count")
    >>> response = await pipeline.execute(call, source="G...")
    >>> response.result
    3
"""

from __future__ import annotations

import asyncio
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from stellar_sdk import SorobanServerAsync, TransactionEnvelope
from stellar_sdk.operation import Operation

from flashonstellar.config import PipelineConfig
from flashonstellar.protocol.builder import TransactionBuilderService, method_names
from flashonstellar.protocol.extraction import DEFAULT_STRATEGIES, ExtractionStrategy
from flashonstellar.protocol.preparer import Preparer
from flashonstellar.protocol.signer import SignerAdapter
from flashonstellar.protocol.simulator import SimulationOutcome, Simulator
from flashonstellar.protocol.submitter import Submitter
from flashonstellar.types import ClientContext, ContractCall, ContractMethodResponse, WriteContext
from flashonstellar.utils.logging import get_logger

_logger = get_logger(__name__)

Calls = Union[ContractCall, Sequence[ContractCall]]


def _as_calls(calls: Calls) -> Tuple[ContractCall, ...]:
    if isinstance(calls, ContractCall):
        return (calls,)
    return tuple(calls)


def _method_label(calls: Sequence[ContractCall]) -> Union[str, List[str]]:
    names = method_names(calls)
    return names[0] if len(names) == 1 else names


class TransactionPipeline:
    """
    Contract-call execution pipeline for one client context.

    Args:
        context: Contract address, network and optional signing callback.
        server: Soroban RPC client. When omitted, one is created for the
            context's RPC endpoint and closed by :meth:`close`.
        config: Pipeline configuration.
        strategies: Return-value extraction strategies for confirmed writes.
    """

    def __init__(
        self,
        context: ClientContext,
        *,
        server: Optional[SorobanServerAsync] = None,
        config: Optional[PipelineConfig] = None,
        strategies: Sequence[ExtractionStrategy] = DEFAULT_STRATEGIES,
    ) -> None:
        self._context = context
        self._config = config or PipelineConfig()
        self._owns_server = server is None
        self._server = server or SorobanServerAsync(context.network.rpc_url)

        self._builder = TransactionBuilderService(
            self._server, context.network, context.contract_address, self._config
        )
        self._simulator = Simulator(self._server)
        self._preparer = Preparer(self._server)
        self._signer = SignerAdapter()
        self._submitter = Submitter(self._server, self._config, strategies)

    @property
    def context(self) -> ClientContext:
        return self._context

    @property
    def config(self) -> PipelineConfig:
        return self._config

    @property
    def server(self) -> SorobanServerAsync:
        return self._server

    async def simulate(
        self,
        calls: Calls,
        source: str,
        extra_operations: Iterable[Operation] = (),
    ) -> Tuple[TransactionEnvelope, SimulationOutcome]:
        """Build and dry-run ``calls``; no signing, no submission."""
        calls = _as_calls(calls)
        envelope = await self._builder.build(calls, source, extra_operations)
        outcome = await self._simulator.simulate(envelope, calls)
        return envelope, outcome

    async def prepare(
        self,
        calls: Calls,
        source: str,
        extra_operations: Iterable[Operation] = (),
    ) -> ContractMethodResponse:
        """
        Classify ``calls`` and stop before signing.

        Returns:
            For read-only calls, the decoded result. For writes, the
            prepared unsigned base64 XDR envelope in ``result``.
        """
        calls = _as_calls(calls)
        envelope, outcome = await self.simulate(calls, source, extra_operations)
        if outcome.is_read_only:
            return ContractMethodResponse(
                is_success=True, is_read_only=True, result=outcome.result
            )
        payload = await self._preparer.prepare(envelope, outcome, methods=method_names(calls))
        return ContractMethodResponse(is_success=True, is_read_only=False, result=payload)

    async def send(
        self,
        signed_payload: str,
        *,
        method: Optional[Union[str, Sequence[str]]] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ContractMethodResponse:
        """Submit an already signed envelope and wait for confirmation."""
        return await self._submitter.submit(
            signed_payload, method=method, cancel_event=cancel_event
        )

    async def execute(
        self,
        calls: Calls,
        source: str,
        *,
        extra_operations: Iterable[Operation] = (),
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ContractMethodResponse:
        """
        Run ``calls`` end to end as one envelope.

        Read-only calls return after simulation without touching the signer.
        Writes are prepared, signed exactly once and submitted exactly once.

        Raises:
            ConfigurationError: A write was classified and the context has
                no signing callback. Raised before the prepare step.
        """
        calls = _as_calls(calls)
        label = _method_label(calls)
        envelope, outcome = await self.simulate(calls, source, extra_operations)
        if outcome.is_read_only:
            _logger.debug("Read-only call completed", extra={"methods": str(label)})
            return ContractMethodResponse(
                is_success=True, is_read_only=True, result=outcome.result
            )

        write_context = WriteContext.require(self._context, method=label)
        payload = await self._preparer.prepare(envelope, outcome, methods=method_names(calls))
        signed = await self._signer.sign(payload, write_context, method=label)
        return await self._submitter.submit(signed, method=label, cancel_event=cancel_event)

    async def confirm_transaction(
        self,
        tx_hash: str,
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ContractMethodResponse:
        """
        Re-poll a previously submitted transaction.

        Use this to re-verify a ``PresumedSuccess`` before relying on it.
        """
        return await self._submitter.wait_for_confirmation(
            tx_hash, cancel_event=cancel_event
        )

    async def close(self) -> None:
        """Close the RPC client if this pipeline created it."""
        if self._owns_server:
            await self._server.close()

    async def __aenter__(self) -> "TransactionPipeline":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
