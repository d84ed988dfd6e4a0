"""
Shared fixtures for pipeline tests.

``FakeSorobanServer`` stands in for ``SorobanServerAsync``: it records
every call and answers from queued, real stellar-sdk response models, so
the pipeline's XDR decoding runs for real without any network.
"""

from typing import Any, Dict, List, Optional, Sequence

import pytest
from stellar_sdk import (
    Account,
    Keypair,
    Network,
    SorobanDataBuilder,
    StrKey,
    TransactionBuilder,
    TransactionEnvelope,
    scval,
    xdr,
)
from stellar_sdk.base_soroban_server import _assemble_transaction
from stellar_sdk.exceptions import AccountNotFoundException, PrepareTransactionException
from stellar_sdk.soroban_rpc import (
    GetTransactionResponse,
    SendTransactionResponse,
    SimulateTransactionResponse,
)

from flashonstellar.config import PipelineConfig, get_network_config
from flashonstellar.types import ClientContext


# =============================================================================
# Test Constants
# =============================================================================

CONTRACT_ID = StrKey.encode_contract(bytes(range(32)))
SOURCE_KEYPAIR = Keypair.random()
SOURCE = SOURCE_KEYPAIR.public_key
OTHER_ACCOUNT = Keypair.random().public_key
TX_HASH = "ab" * 32
LATEST_LEDGER = 1000


# =============================================================================
# Response builders
# =============================================================================


def account_key(account_id: str) -> xdr.LedgerKey:
    """Ledger key of an account entry, used to fill footprints."""
    return xdr.LedgerKey(
        xdr.LedgerEntryType.ACCOUNT,
        account=xdr.LedgerKeyAccount(
            account_id=Keypair.from_public_key(account_id).xdr_account_id()
        ),
    )


def soroban_data(
    read_only: Sequence[xdr.LedgerKey] = (),
    read_write: Sequence[xdr.LedgerKey] = (),
) -> str:
    return (
        SorobanDataBuilder()
        .set_read_only(list(read_only))
        .set_read_write(list(read_write))
        .build()
        .to_xdr()
    )


def sim_response(
    results: Sequence[xdr.SCVal] = (),
    *,
    read_only: Sequence[xdr.LedgerKey] = (),
    read_write: Sequence[xdr.LedgerKey] = (),
    error: Optional[str] = None,
    events: Optional[List[str]] = None,
) -> SimulateTransactionResponse:
    data: Dict[str, Any] = {"latestLedger": LATEST_LEDGER}
    if error is not None:
        data["error"] = error
        data["events"] = events or []
    else:
        data["transactionData"] = soroban_data(read_only, read_write)
        data["minResourceFee"] = 5000
        data["results"] = [{"xdr": value.to_xdr(), "auth": []} for value in results]
        if events is not None:
            data["events"] = events
    return SimulateTransactionResponse.model_validate(data)


def read_sim(*results: xdr.SCVal) -> SimulateTransactionResponse:
    """Simulation that only reads storage."""
    return sim_response(results, read_only=[account_key(OTHER_ACCOUNT)])


def write_sim(*results: xdr.SCVal) -> SimulateTransactionResponse:
    """Simulation that writes storage; one void result unless given."""
    return sim_response(
        results or (scval.to_void(),),
        read_only=[account_key(OTHER_ACCOUNT)],
        read_write=[account_key(SOURCE)],
    )


def send_response(
    status: str = "PENDING",
    *,
    tx_hash: str = TX_HASH,
    error_result_xdr: Optional[str] = None,
    events: Optional[List[str]] = None,
) -> SendTransactionResponse:
    data: Dict[str, Any] = {
        "status": status,
        "hash": tx_hash,
        "latestLedger": LATEST_LEDGER,
        "latestLedgerCloseTime": 1700000000,
    }
    if error_result_xdr is not None:
        data["errorResultXdr"] = error_result_xdr
    if events is not None:
        data["diagnosticEventsXdr"] = events
    return SendTransactionResponse.model_validate(data)


def result_meta(return_value: xdr.SCVal) -> str:
    """TransactionMeta v3 carrying ``return_value`` in its soroban meta."""
    meta = xdr.TransactionMeta(
        v=3,
        v3=xdr.TransactionMetaV3(
            ext=xdr.ExtensionPoint(0),
            tx_changes_before=xdr.LedgerEntryChanges([]),
            operations=[],
            tx_changes_after=xdr.LedgerEntryChanges([]),
            soroban_meta=xdr.SorobanTransactionMeta(
                ext=xdr.SorobanTransactionMetaExt(0),
                events=[],
                return_value=return_value,
                diagnostic_events=[],
            ),
        ),
    )
    return meta.to_xdr()


def tx_response(
    status: str,
    *,
    tx_hash: str = TX_HASH,
    return_value: Optional[xdr.SCVal] = None,
    result_meta_xdr: Optional[str] = None,
    result_xdr: Optional[str] = None,
) -> GetTransactionResponse:
    data: Dict[str, Any] = {
        "status": status,
        "txHash": tx_hash,
        "latestLedger": LATEST_LEDGER,
        "latestLedgerCloseTime": 1700000000,
        "oldestLedger": 1,
        "oldestLedgerCloseTime": 1600000000,
    }
    if return_value is not None:
        data["resultMetaXdr"] = result_meta(return_value)
    if result_meta_xdr is not None:
        data["resultMetaXdr"] = result_meta_xdr
    if result_xdr is not None:
        data["resultXdr"] = result_xdr
    if status != "NOT_FOUND":
        data["ledger"] = LATEST_LEDGER
    return GetTransactionResponse.model_validate(data)


def invoke_envelope(*methods: str) -> TransactionEnvelope:
    """Unsigned envelope with one contract call per method, in order."""
    builder = TransactionBuilder(
        Account(SOURCE, 100), Network.TESTNET_NETWORK_PASSPHRASE, base_fee=100
    )
    for method in methods or ("register_provider",):
        builder.append_invoke_contract_function_op(CONTRACT_ID, method, [])
    return builder.set_timeout(60).build()


# =============================================================================
# Fake server
# =============================================================================


class FakeSorobanServer:
    """
    In-memory replacement for ``SorobanServerAsync``.

    ``prepare_transaction`` assembles the envelope with the SDK's own
    helper, so envelope shapes the real node would reject fail here too.

    ``simulations``, ``sends`` and ``polls`` are queues; an item that is an
    exception instance is raised instead of returned. When a queue holds a
    single item it is reused for every call.
    """

    def __init__(self, accounts: Optional[Dict[str, int]] = None) -> None:
        self.accounts: Dict[str, int] = dict(accounts if accounts is not None else {SOURCE: 100})
        self.simulations: List[Any] = []
        self.prepare_errors: List[Exception] = []
        self.sends: List[Any] = []
        self.polls: List[Any] = []
        self.calls: List[str] = []
        self.simulated: List[Any] = []
        self.prepared: List[Any] = []
        self.sent: List[str] = []
        self.polled: List[str] = []
        self.closed = False

    @staticmethod
    def _next(queue: List[Any]) -> Any:
        item = queue[0] if len(queue) == 1 else queue.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    async def load_account(self, account_id: str) -> Account:
        self.calls.append("load_account")
        Keypair.from_public_key(account_id)
        if account_id not in self.accounts:
            raise AccountNotFoundException(account_id)
        return Account(account_id, self.accounts[account_id])

    async def simulate_transaction(self, envelope: Any) -> SimulateTransactionResponse:
        self.calls.append("simulate_transaction")
        self.simulated.append(envelope)
        return self._next(self.simulations)

    async def prepare_transaction(self, envelope: Any, simulation: Any = None) -> Any:
        self.calls.append("prepare_transaction")
        self.prepared.append((envelope, simulation))
        if self.prepare_errors:
            raise self.prepare_errors.pop(0)
        if simulation is not None and simulation.error:
            raise PrepareTransactionException(
                "Simulation transaction failed, the response contains error information.",
                simulation,
            )
        return _assemble_transaction(envelope, simulation)

    async def send_transaction(self, payload: str) -> SendTransactionResponse:
        self.calls.append("send_transaction")
        self.sent.append(payload)
        return self._next(self.sends or [send_response()])

    async def get_transaction(self, tx_hash: str) -> GetTransactionResponse:
        self.calls.append("get_transaction")
        self.polled.append(tx_hash)
        return self._next(self.polls)

    async def close(self) -> None:
        self.closed = True

    def count(self, name: str) -> int:
        return self.calls.count(name)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def network():
    return get_network_config("TESTNET")


@pytest.fixture
def server() -> FakeSorobanServer:
    return FakeSorobanServer()


@pytest.fixture
def fast_config() -> PipelineConfig:
    """No real waiting between polls or parse retries."""
    return PipelineConfig(poll_interval=0, parse_retry_delay=0, max_poll_duration=5.0)


@pytest.fixture
def signed_payloads() -> List[str]:
    return []


@pytest.fixture
def signer(signed_payloads):
    """Signing callback that records what it was asked to sign."""

    def sign(unsigned_xdr: str) -> str:
        signed_payloads.append(unsigned_xdr)
        return unsigned_xdr + ":signed"

    return sign


@pytest.fixture
def read_context(network) -> ClientContext:
    return ClientContext(contract_address=CONTRACT_ID, network=network)


@pytest.fixture
def write_context(network, signer) -> ClientContext:
    return ClientContext(contract_address=CONTRACT_ID, network=network, sign_transaction=signer)


def u32(value: int) -> xdr.SCVal:
    return scval.to_uint32(value)
