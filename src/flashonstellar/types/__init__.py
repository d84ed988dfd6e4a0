"""
Data types for contract calls and client contexts.
"""

from flashonstellar.types.context import ClientContext, SignTransaction, WriteContext
from flashonstellar.types.contract import (
    ArgType,
    ContractArg,
    ContractCall,
    ContractMethodResponse,
    PollState,
    PresumedSuccess,
    TransactionStatus,
    UnparsedResult,
)

__all__ = [
    "ArgType",
    "ContractArg",
    "ContractCall",
    "ContractMethodResponse",
    "PollState",
    "PresumedSuccess",
    "TransactionStatus",
    "UnparsedResult",
    "ClientContext",
    "WriteContext",
    "SignTransaction",
]
