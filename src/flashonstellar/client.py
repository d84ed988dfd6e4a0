"""
Contract client.

``ContractClient`` is the entry point for applications: it resolves the
network once, owns one pipeline and one RPC connection, and exposes
read, write and batch helpers on top of them.

Example:
    >>> from flashonstellar import ContractClient, Network, keypair_signer
    >>> async with ContractClient(
    ...     "CCONTRACT...",
    ...     Network.TESTNET,
    ...     sign_transaction=keypair_signer(secret, get_network_config("TESTNET")),
    ... ) as client:
    ...     count = await client.providers.get_provider_count(wallet)
    ...     await client.providers.register_provider(wallet, wallet, "EU region")
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, TypeVar, Union

from stellar_sdk import ServerAsync, SorobanServerAsync
from stellar_sdk.operation import Operation

from flashonstellar.config import Network, NetworkConfig, PipelineConfig, get_network_config
from flashonstellar.protocol import (
    BatchedRead,
    BatchedWrite,
    BatchExecutor,
    TransactionPipeline,
    change_trust_xdr,
    get_balances,
    wallet_call,
)
from flashonstellar.providers import ProviderOps
from flashonstellar.types import (
    ClientContext,
    ContractArg,
    ContractCall,
    ContractMethodResponse,
    SignTransaction,
    WriteContext,
)
from flashonstellar.utils.logging import get_logger

T = TypeVar("T")

ArgLike = Union[ContractArg, Mapping[str, Any]]

_logger = get_logger(__name__)


def _call(method: str, args: Iterable[ArgLike]) -> ContractCall:
    return ContractCall(method=method, args=tuple(args))


class ContractClient:
    """
    Client for one Soroban contract on one network.

    Args:
        contract_address: Strkey ("C...") of the contract.
        network: ``Network.TESTNET`` or ``Network.PUBLIC`` (or their names).
        sign_transaction: Optional signing callback. Without it the client
            is read-only and every write raises ``ConfigurationError``.
        rpc_url: Override for the network's default RPC endpoint.
        server: Pre-built RPC client. When given, the caller owns it.
        horizon: Pre-built Horizon client for balance lookups. When
            omitted, one is created on first use and closed by :meth:`close`.
        config: Pipeline configuration.

    Raises:
        UnsupportedNetworkError: For unknown network identifiers.
    """

    def __init__(
        self,
        contract_address: str,
        network: Union[Network, str] = Network.TESTNET,
        *,
        sign_transaction: Optional[SignTransaction] = None,
        rpc_url: Optional[str] = None,
        server: Optional[SorobanServerAsync] = None,
        horizon: Optional[ServerAsync] = None,
        config: Optional[PipelineConfig] = None,
    ) -> None:
        network_config = get_network_config(network, rpc_url)
        self._context = ClientContext(
            contract_address=contract_address,
            network=network_config,
            sign_transaction=sign_transaction,
        )
        self._pipeline = TransactionPipeline(self._context, server=server, config=config)
        self._batch = BatchExecutor(self._pipeline)
        self._horizon = horizon
        self._owns_horizon = horizon is None
        self.providers = ProviderOps(self)

        _logger.debug(
            "Client created",
            extra={
                "contract": contract_address,
                "network": network_config.id.value,
                "can_sign": self._context.can_sign,
            },
        )

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def contract_address(self) -> str:
        return self._context.contract_address

    @property
    def network(self) -> NetworkConfig:
        return self._context.network

    @property
    def context(self) -> ClientContext:
        return self._context

    @property
    def pipeline(self) -> TransactionPipeline:
        return self._pipeline

    # =========================================================================
    # Single calls
    # =========================================================================

    async def read(self, method: str, args: Iterable[ArgLike] = (), *, source: str) -> Any:
        """
        Simulate ``method`` and return its decoded result.

        Never signs or submits, whatever the classification.
        """
        _, outcome = await self._pipeline.simulate(_call(method, args), source)
        return outcome.result

    async def write(
        self,
        method: str,
        args: Iterable[ArgLike] = (),
        *,
        source: str,
        extra_operations: Iterable[Operation] = (),
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ContractMethodResponse:
        """
        Execute a state-changing call.

        Raises:
            ConfigurationError: Before any network call, if no signer is set.
        """
        WriteContext.require(self._context, method=method)
        return await self._pipeline.execute(
            _call(method, args),
            source,
            extra_operations=extra_operations,
            cancel_event=cancel_event,
        )

    async def invoke(
        self,
        method: str,
        args: Iterable[ArgLike] = (),
        *,
        source: str,
        extra_operations: Iterable[Operation] = (),
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ContractMethodResponse:
        """Execute ``method``, letting the simulation decide read or write."""
        return await self._pipeline.execute(
            _call(method, args),
            source,
            extra_operations=extra_operations,
            cancel_event=cancel_event,
        )

    async def confirm_transaction(
        self, tx_hash: str, *, cancel_event: Optional[asyncio.Event] = None
    ) -> ContractMethodResponse:
        """Re-poll a submitted transaction, e.g. to verify a presumed success."""
        return await self._pipeline.confirm_transaction(tx_hash, cancel_event=cancel_event)

    # =========================================================================
    # Wallet-scoped calls
    # =========================================================================

    async def execute_wallet_transaction(
        self,
        wallet: str,
        method: str,
        args: Iterable[ArgLike] = (),
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ContractMethodResponse:
        """
        Execute ``method(wallet, *args)`` with ``wallet`` as the source account.

        The wallet is sent as the leading ``address`` argument.
        """
        call = wallet_call(wallet, method, list(args))
        return await self._pipeline.execute(call, wallet, cancel_event=cancel_event)

    async def execute_multi_wallet_transactions(
        self,
        wallet: str,
        operations: Sequence[BatchedWrite],
        extra_operations: Iterable[Operation] = (),
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ContractMethodResponse:
        """
        Execute wallet-scoped writes, plus extra operations, as one transaction.

        Raises:
            ConfigurationError: Before any network call, if no signer is set.
            PreparationError: Before any network call, if the envelope would
                hold more than one operation.
        """
        WriteContext.require(self._context, method=[op.method for op in operations])
        return await self._batch.write(
            wallet, operations, extra_operations, cancel_event=cancel_event
        )

    # =========================================================================
    # Batches
    # =========================================================================

    async def batch(
        self,
        calls: Sequence[ContractCall],
        *,
        source: str,
        extra_operations: Iterable[Operation] = (),
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ContractMethodResponse:
        """
        Execute ``calls`` as one envelope with one simulation and at most one signature.

        A write-classified envelope must hold a single operation; larger ones
        raise ``PreparationError`` after simulation and before signing.
        """
        return await self._batch.execute(
            calls, source, extra_operations, cancel_event=cancel_event
        )

    async def batch_read(self, wallet: str, operations: Sequence[BatchedRead[T]]) -> List[T]:
        """Run wallet-scoped reads together and transform each result."""
        return await self._batch.read(wallet, operations)

    async def batch_write(
        self,
        wallet: str,
        operations: Sequence[BatchedWrite],
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ContractMethodResponse:
        """
        Run wallet-scoped writes as one signed transaction.

        Raises:
            ConfigurationError: Before any network call, if no signer is set.
            PreparationError: Before any network call, if more than one
                write is given.
        """
        WriteContext.require(self._context, method=[op.method for op in operations])
        return await self._batch.write(wallet, operations, cancel_event=cancel_event)

    # =========================================================================
    # Classic accounts
    # =========================================================================

    async def change_trust_xdr(
        self, source: str, asset_code: str, issuer: str, remove: bool = False
    ) -> str:
        """Unsigned trust-line envelope for ``source``; see :func:`change_trust_xdr`."""
        return await change_trust_xdr(
            self._pipeline.server, self.network, source, asset_code, issuer, remove
        )

    async def get_balances(self, source: str) -> List[Dict[str, Any]]:
        """Balances of ``source`` from the network's Horizon server."""
        if self._horizon is None:
            self._horizon = ServerAsync(self.network.horizon_url)
        return await get_balances(self._horizon, source)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def close(self) -> None:
        await self._pipeline.close()
        if self._owns_horizon and self._horizon is not None:
            await self._horizon.close()
            self._horizon = None

    async def __aenter__(self) -> "ContractClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def __repr__(self) -> str:
        return (
            f"ContractClient(contract_address={self.contract_address!r}, "
            f"network={self.network.id.value!r}, can_sign={self._context.can_sign})"
        )
