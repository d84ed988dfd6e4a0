"""
Transaction builder.

Assembles contract invocations into one unsigned envelope against the
current sequence number of the source account.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

from stellar_sdk import SorobanServerAsync, TransactionBuilder, TransactionEnvelope
from stellar_sdk.exceptions import AccountNotFoundException, BaseRequestError
from stellar_sdk.operation import Operation

from flashonstellar.config import NetworkConfig, PipelineConfig
from flashonstellar.errors import AccountLookupError, EncodingError
from flashonstellar.protocol.encoder import encode_args
from flashonstellar.types import ContractCall
from flashonstellar.utils.logging import get_logger

_logger = get_logger(__name__)


def method_names(calls: Sequence[ContractCall]) -> List[str]:
    """Method names of ``calls``, in order."""
    return [call.method for call in calls]


class TransactionBuilderService:
    """
    Builds unsigned contract-call envelopes.

    The only I/O is the source account sequence lookup. Arguments are
    encoded before the lookup, so encoding errors never touch the network.

    Args:
        server: Soroban RPC client.
        network: Network the envelope is built for.
        contract_address: Strkey of the target contract.
        config: Pipeline configuration (base fee and validity window).
    """

    def __init__(
        self,
        server: SorobanServerAsync,
        network: NetworkConfig,
        contract_address: str,
        config: PipelineConfig,
    ) -> None:
        self._server = server
        self._network = network
        self._contract_address = contract_address
        self._config = config

    async def build(
        self,
        calls: Sequence[ContractCall],
        source: str,
        extra_operations: Iterable[Operation] = (),
    ) -> TransactionEnvelope:
        """
        Build one envelope holding ``calls`` followed by ``extra_operations``.

        Args:
            calls: Contract invocations, appended in order.
            source: Account that pays for and sequences the transaction.
            extra_operations: Non-contract operations appended after the calls.

        Raises:
            EncodingError: If an argument or the contract address cannot be encoded.
            AccountLookupError: If the source account is malformed or unknown.
        """
        methods = method_names(calls)
        encoded = [encode_args(call.args, method=call.method) for call in calls]

        try:
            account = await self._server.load_account(source)
        except AccountNotFoundException as exc:
            raise AccountLookupError(source, method=methods, reason="not found") from exc
        except ValueError as exc:
            raise AccountLookupError(source, method=methods, reason=str(exc)) from exc
        except BaseRequestError as exc:
            raise AccountLookupError(source, method=methods, reason=str(exc)) from exc

        builder = TransactionBuilder(
            source_account=account,
            network_passphrase=self._network.passphrase,
            base_fee=self._config.base_fee,
        ).set_timeout(self._config.timeout_seconds)

        for call, parameters in zip(calls, encoded):
            try:
                builder.append_invoke_contract_function_op(
                    contract_id=self._contract_address,
                    function_name=call.method,
                    parameters=parameters,
                )
            except ValueError as exc:
                raise EncodingError(
                    self._contract_address,
                    "address",
                    reason=str(exc),
                    method=call.method,
                ) from exc

        extras = list(extra_operations)
        for operation in extras:
            builder.append_operation(operation)

        envelope = builder.build()
        _logger.debug(
            "Built envelope",
            extra={
                "methods": ",".join(methods),
                "operations": len(calls) + len(extras),
                "sequence": envelope.transaction.sequence,
            },
        )
        return envelope
