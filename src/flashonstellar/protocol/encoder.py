"""
Argument encoder.

Converts typed contract arguments into Soroban ``SCVal`` values and decodes
return values back into Python data. Pure functions; no I/O.

Example:
    >>> from flashonstellar.protocol.encoder import encode_args
    >>> encode_args([ContractArg(value=7, type="u32")])
"""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, Iterable, List, Optional

from stellar_sdk import Address, scval, xdr

from flashonstellar.errors import EncodingError
from flashonstellar.types import ContractArg

_INT_RANGES: Dict[str, tuple] = {
    "u32": (0, 2**32 - 1),
    "i32": (-(2**31), 2**31 - 1),
    "u64": (0, 2**64 - 1),
    "i64": (-(2**63), 2**63 - 1),
    "u128": (0, 2**128 - 1),
    "i128": (-(2**127), 2**127 - 1),
}

# soroban symbols: at most 32 chars from [A-Za-z0-9_]
_SYMBOL_RE = re.compile(r"^[A-Za-z0-9_]{0,32}\Z")

_INT_ENCODERS: Dict[str, Callable[[int], xdr.SCVal]] = {
    "u32": scval.to_uint32,
    "i32": scval.to_int32,
    "u64": scval.to_uint64,
    "i64": scval.to_int64,
    "u128": scval.to_uint128,
    "i128": scval.to_int128,
}


def _to_int(value: Any, arg_type: str, method: Optional[str]) -> int:
    # bool is an int subclass; True must not silently become 1
    if isinstance(value, bool):
        raise EncodingError(value, arg_type, reason="bool is not an integer", method=method)
    if isinstance(value, int):
        number = value
    elif isinstance(value, str):
        try:
            number = int(value.strip(), 10)
        except ValueError:
            raise EncodingError(
                value, arg_type, reason="not a decimal integer", method=method
            ) from None
    else:
        raise EncodingError(
            value, arg_type, reason=f"expected int, got {type(value).__name__}", method=method
        )

    low, high = _INT_RANGES[arg_type]
    if not low <= number <= high:
        raise EncodingError(value, arg_type, reason=f"out of range [{low}, {high}]", method=method)
    return number


def _encode_address(value: Any, method: Optional[str]) -> xdr.SCVal:
    if isinstance(value, Address):
        return scval.to_address(value)
    if not isinstance(value, str) or not value:
        raise EncodingError(value, "address", reason="expected strkey string", method=method)
    try:
        return scval.to_address(Address(value))
    except ValueError as exc:
        raise EncodingError(value, "address", reason=str(exc), method=method) from exc


def _encode_vec(value: Any, method: Optional[str]) -> xdr.SCVal:
    if value is None:
        # absent optional, distinct from an empty list
        return scval.to_void()
    if not isinstance(value, (list, tuple)):
        raise EncodingError(value, "vec", reason="expected list or None", method=method)
    items: List[xdr.SCVal] = []
    for item in value:
        if isinstance(item, dict):
            item = ContractArg.model_validate(item)
        if not isinstance(item, ContractArg):
            raise EncodingError(
                item, "vec", reason="vec items must be typed {value, type} pairs", method=method
            )
        items.append(encode_arg(item, method=method))
    return scval.to_vec(items)


def encode_arg(arg: ContractArg, *, method: Optional[str] = None) -> xdr.SCVal:
    """
    Encode one typed argument.

    Args:
        arg: The argument to encode.
        method: Contract method name, attached to any raised error.

    Raises:
        EncodingError: If the value cannot be represented as ``arg.type``.
    """
    arg_type = arg.type
    value = arg.value

    if arg_type in _INT_ENCODERS:
        return _INT_ENCODERS[arg_type](_to_int(value, arg_type, method))
    if arg_type == "bool":
        if not isinstance(value, bool):
            raise EncodingError(value, "bool", reason="expected bool", method=method)
        return scval.to_bool(value)
    if arg_type == "string":
        if not isinstance(value, (str, bytes)):
            raise EncodingError(value, "string", reason="expected str", method=method)
        return scval.to_string(value)
    if arg_type == "symbol":
        if not isinstance(value, str):
            raise EncodingError(value, "symbol", reason="expected str", method=method)
        if not _SYMBOL_RE.match(value):
            raise EncodingError(
                value, "symbol", reason="expected up to 32 chars of [A-Za-z0-9_]", method=method
            )
        return scval.to_symbol(value)
    if arg_type == "address":
        return _encode_address(value, method)
    if arg_type == "vec":
        return _encode_vec(value, method)

    raise EncodingError(value, arg_type, reason="unsupported type", method=method)


def encode_args(
    args: Iterable[ContractArg], *, method: Optional[str] = None
) -> List[xdr.SCVal]:
    """Encode arguments in order."""
    return [encode_arg(arg, method=method) for arg in args]


def decode_value(value: xdr.SCVal) -> Any:
    """
    Decode an ``SCVal`` into native Python data.

    Addresses become strkey strings, maps become dicts and vectors lists,
    recursively.
    """
    return _normalize(scval.to_native(value))


def _normalize(value: Any) -> Any:
    if isinstance(value, Address):
        return value.address
    if isinstance(value, dict):
        return {_normalize(k): _normalize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_normalize(item) for item in value]
    return value
