"""
Tests for the transaction builder.
"""

import time

import pytest
from stellar_sdk import Keypair
from stellar_sdk.exceptions import SorobanRpcErrorResponse

from flashonstellar.config import PipelineConfig
from flashonstellar.errors import AccountLookupError, EncodingError
from flashonstellar.protocol.builder import TransactionBuilderService
from flashonstellar.protocol.operations import change_trust_operation
from flashonstellar.types import ContractArg, ContractCall

from .conftest import CONTRACT_ID, OTHER_ACCOUNT, SOURCE, FakeSorobanServer


def make_builder(server, network, config=None, contract=CONTRACT_ID):
    return TransactionBuilderService(server, network, contract, config or PipelineConfig())


def invoked_function(operation) -> str:
    return operation.host_function.invoke_contract.function_name.sc_symbol.decode()


class TestBuild:
    """Tests for TransactionBuilderService.build."""

    @pytest.mark.asyncio
    async def test_single_call(self, server, network) -> None:
        """Test one call becomes one invoke operation at the next sequence."""
        call = ContractCall(method="get_provider", args=[ContractArg(value=SOURCE, type="address")])

        envelope = await make_builder(server, network).build([call], SOURCE)
        tx = envelope.transaction

        assert len(tx.operations) == 1
        assert invoked_function(tx.operations[0]) == "get_provider"
        assert tx.sequence == 101
        assert tx.fee == 100
        assert envelope.network_passphrase == network.passphrase

    @pytest.mark.asyncio
    async def test_sixty_second_validity(self, server, network) -> None:
        envelope = await make_builder(server, network).build([ContractCall(method="ping")], SOURCE)
        bounds = envelope.transaction.preconditions.time_bounds

        assert bounds.min_time == 0
        assert 55 <= bounds.max_time - int(time.time()) <= 60

    @pytest.mark.asyncio
    async def test_calls_in_order_then_extras(self, server, network) -> None:
        """Test contract calls keep their order and extra operations come last."""
        calls = [ContractCall(method="first"), ContractCall(method="second")]
        trust = change_trust_operation("USDC", OTHER_ACCOUNT)

        envelope = await make_builder(server, network).build(calls, SOURCE, [trust])
        ops = envelope.transaction.operations

        assert [invoked_function(op) for op in ops[:2]] == ["first", "second"]
        assert ops[2] is trust

    @pytest.mark.asyncio
    async def test_custom_base_fee(self, server, network) -> None:
        config = PipelineConfig(base_fee=250)
        envelope = await make_builder(server, network, config).build(
            [ContractCall(method="a"), ContractCall(method="b")], SOURCE
        )

        assert envelope.transaction.fee == 500


class TestBuildErrors:
    """Tests for builder failure modes."""

    @pytest.mark.asyncio
    async def test_unknown_account(self, network) -> None:
        server = FakeSorobanServer(accounts={})

        with pytest.raises(AccountLookupError) as exc_info:
            await make_builder(server, network).build([ContractCall(method="ping")], SOURCE)

        assert exc_info.value.account_id == SOURCE
        assert exc_info.value.method == "ping"

    @pytest.mark.asyncio
    async def test_empty_source(self, server, network) -> None:
        with pytest.raises(AccountLookupError):
            await make_builder(server, network).build([ContractCall(method="ping")], "")

    @pytest.mark.asyncio
    async def test_malformed_source(self, server, network) -> None:
        with pytest.raises(AccountLookupError):
            await make_builder(server, network).build([ContractCall(method="ping")], "GABC")

    @pytest.mark.asyncio
    async def test_rpc_error_during_lookup(self, server, network) -> None:
        async def failing(account_id):
            raise SorobanRpcErrorResponse(-32600, "bad request")

        server.load_account = failing

        with pytest.raises(AccountLookupError):
            await make_builder(server, network).build([ContractCall(method="ping")], SOURCE)

    @pytest.mark.asyncio
    async def test_encoding_error_before_lookup(self, server, network) -> None:
        """Test bad arguments fail before the account lookup."""
        call = ContractCall(method="get_providers", args=[ContractArg(value=-1, type="u32")])

        with pytest.raises(EncodingError):
            await make_builder(server, network).build([call], SOURCE)

        assert server.calls == []

    @pytest.mark.asyncio
    async def test_invalid_contract_address(self, server, network) -> None:
        builder = make_builder(server, network, contract=Keypair.random().public_key)

        with pytest.raises(EncodingError) as exc_info:
            await builder.build([ContractCall(method="ping")], SOURCE)

        assert exc_info.value.method == "ping"
