"""
Contract-call execution pipeline.

Stages, in order: encoder, builder, simulator, preparer, signer,
submitter. ``TransactionPipeline`` wires them together and
``BatchExecutor`` runs several calls as one envelope.
"""

from flashonstellar.protocol.batch import BatchedRead, BatchedWrite, BatchExecutor, wallet_call
from flashonstellar.protocol.builder import TransactionBuilderService
from flashonstellar.protocol.encoder import decode_value, encode_arg, encode_args
from flashonstellar.protocol.extraction import (
    DEFAULT_STRATEGIES,
    ExtractionStrategy,
    extract_return_value,
)
from flashonstellar.protocol.operations import (
    change_trust_operation,
    change_trust_xdr,
    get_balances,
)
from flashonstellar.protocol.pipeline import TransactionPipeline
from flashonstellar.protocol.preparer import Preparer
from flashonstellar.protocol.signer import SignerAdapter
from flashonstellar.protocol.simulator import SimulationOutcome, Simulator, classify_footprint
from flashonstellar.protocol.submitter import Submitter, is_format_mismatch

__all__ = [
    # Encoding
    "encode_arg",
    "encode_args",
    "decode_value",
    # Stages
    "TransactionBuilderService",
    "Simulator",
    "SimulationOutcome",
    "classify_footprint",
    "Preparer",
    "SignerAdapter",
    "Submitter",
    "is_format_mismatch",
    "ExtractionStrategy",
    "DEFAULT_STRATEGIES",
    "extract_return_value",
    # Orchestration
    "TransactionPipeline",
    "BatchExecutor",
    "BatchedRead",
    "BatchedWrite",
    "wallet_call",
    # Classic account helpers
    "change_trust_operation",
    "change_trust_xdr",
    "get_balances",
]
