"""
flashonstellar - Soroban contract-call execution for Python.

Turns typed method calls into signed, submitted and confirmed Soroban
transactions, and tells reads from writes by dry-running them.

Quick Start:
    >>> import asyncio
    >>> from flashonstellar import ContractClient, ContractArg, Network
    >>>
    >>> async def main():
    ...     async with ContractClient("CCONTRACT...", Network.TESTNET) as client:
    ...         count = await client.read("get_provider_count", source="GWALLET...")
    ...         print(count)
    ...
    >>> asyncio.run(main())

Modules:
- `client`: ContractClient facade
- `protocol`: pipeline stages, TransactionPipeline, BatchExecutor
- `types`: ContractArg, ContractCall, ContractMethodResponse, contexts
- `config`: networks and PipelineConfig
- `errors`: exception hierarchy rooted at ContractCallError
- `utils`: logging, retry and JSON helpers
"""

from flashonstellar.version import __version__, __version_info__

from flashonstellar.client import ContractClient
from flashonstellar.config import (
    NETWORKS,
    Network,
    NetworkConfig,
    PipelineConfig,
    get_network_config,
)
from flashonstellar.errors import (
    AccountLookupError,
    AmbiguousFootprintError,
    ConfigurationError,
    ContractCallError,
    EncodingError,
    PollCancelledError,
    PollTimeoutError,
    PreparationError,
    ResponseParsingError,
    SigningError,
    SimulationError,
    SubmissionError,
    UnsupportedNetworkError,
)
from flashonstellar.protocol import (
    BatchedRead,
    BatchedWrite,
    BatchExecutor,
    TransactionPipeline,
    change_trust_operation,
    change_trust_xdr,
    get_balances,
)
from flashonstellar.providers import ProviderOps
from flashonstellar.signers import keypair_signer, public_key_from_secret
from flashonstellar.types import (
    ClientContext,
    ContractArg,
    ContractCall,
    ContractMethodResponse,
    PresumedSuccess,
    TransactionStatus,
    UnparsedResult,
    WriteContext,
)

__all__ = [
    "__version__",
    "__version_info__",
    # Client
    "ContractClient",
    "ProviderOps",
    # Pipeline
    "TransactionPipeline",
    "BatchExecutor",
    "BatchedRead",
    "BatchedWrite",
    "change_trust_operation",
    "change_trust_xdr",
    "get_balances",
    # Signing
    "keypair_signer",
    "public_key_from_secret",
    # Config
    "Network",
    "NetworkConfig",
    "NETWORKS",
    "get_network_config",
    "PipelineConfig",
    # Types
    "ClientContext",
    "WriteContext",
    "ContractArg",
    "ContractCall",
    "ContractMethodResponse",
    "PresumedSuccess",
    "UnparsedResult",
    "TransactionStatus",
    # Errors
    "ContractCallError",
    "EncodingError",
    "AccountLookupError",
    "SimulationError",
    "AmbiguousFootprintError",
    "PreparationError",
    "ConfigurationError",
    "SigningError",
    "SubmissionError",
    "ResponseParsingError",
    "UnsupportedNetworkError",
    "PollTimeoutError",
    "PollCancelledError",
]
