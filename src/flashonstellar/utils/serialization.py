"""
JSON helpers for decoded contract values.

Contract values may carry 64/128-bit integers, byte strings and
addresses, none of which survive a naive ``json.dumps`` round trip
through JavaScript-style consumers.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel
from stellar_sdk import Address

# integers beyond this lose precision as IEEE-754 doubles
MAX_SAFE_INTEGER = 2**53 - 1


def to_json_safe(value: Any) -> Any:
    """
    Convert a decoded value into plain JSON-compatible data.

    - ints outside +/-(2**53 - 1) become decimal strings
    - bytes become lowercase hex
    - ``Address`` becomes its strkey
    - pydantic models are dumped, then converted recursively
    """
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, int):
        if -MAX_SAFE_INTEGER <= value <= MAX_SAFE_INTEGER:
            return value
        return str(value)
    if isinstance(value, Enum):
        return to_json_safe(value.value)
    if isinstance(value, (str, float)):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    if isinstance(value, Address):
        return value.address
    if isinstance(value, BaseModel):
        return to_json_safe(value.model_dump())
    if isinstance(value, dict):
        return {str(to_json_safe(k)): to_json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_json_safe(item) for item in value]
    return str(value)


def dumps(value: Any, **kwargs: Any) -> str:
    """``json.dumps`` over :func:`to_json_safe`."""
    return json.dumps(to_json_safe(value), **kwargs)
