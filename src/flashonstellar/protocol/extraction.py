"""
Return-value extraction strategies.

A confirmed ``getTransaction`` response does not expose the contract's
return value uniformly across node and SDK versions. Each strategy knows
one shape; they are tried in order and the first hit is logged by name.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel
from stellar_sdk import xdr

from flashonstellar.utils.logging import get_logger

_logger = get_logger(__name__)

Extractor = Callable[[Any], Optional[xdr.SCVal]]


@dataclass(frozen=True)
class ExtractionStrategy:
    """A named return-value extractor. ``extract`` returns None when it does not apply."""

    name: str
    extract: Extractor


def _as_scval(value: Any) -> Optional[xdr.SCVal]:
    if isinstance(value, xdr.SCVal):
        return value
    if isinstance(value, str) and value:
        return xdr.SCVal.from_xdr(value)
    return None


def _return_value_attribute(response: Any) -> Optional[xdr.SCVal]:
    # stellar-sdk's GetTransactionResponse has no such field; this serves
    # response objects that carry the value already typed, e.g. wrappers
    return _as_scval(getattr(response, "return_value", None))


def _result_meta_xdr(response: Any) -> Optional[xdr.SCVal]:
    raw = getattr(response, "result_meta_xdr", None)
    if not raw:
        return None
    meta = xdr.TransactionMeta.from_xdr(raw)
    if meta.v == 3 and meta.v3 is not None and meta.v3.soroban_meta is not None:
        return meta.v3.soroban_meta.return_value
    if meta.v == 4 and meta.v4 is not None and meta.v4.soroban_meta is not None:
        return meta.v4.soroban_meta.return_value
    return None


def _shape_inspection(response: Any) -> Optional[xdr.SCVal]:
    if isinstance(response, BaseModel):
        data: Mapping[str, Any] = response.model_dump(by_alias=True)
    elif isinstance(response, Mapping):
        data = response
    else:
        return None
    for key in ("returnValue", "return_value", "result"):
        found = _as_scval(data.get(key))
        if found is not None:
            return found
    return None


DEFAULT_STRATEGIES: Tuple[ExtractionStrategy, ...] = (
    ExtractionStrategy("return_value_attribute", _return_value_attribute),
    ExtractionStrategy("result_meta_xdr", _result_meta_xdr),
    ExtractionStrategy("shape_inspection", _shape_inspection),
)


def extract_return_value(
    response: Any,
    strategies: Sequence[ExtractionStrategy] = DEFAULT_STRATEGIES,
) -> Tuple[Optional[xdr.SCVal], Optional[str]]:
    """
    Run ``strategies`` in order against a confirmed response.

    Returns:
        ``(value, strategy_name)`` for the first strategy that applies, or
        ``(None, None)`` when none does. A strategy that fails to decode is
        skipped.
    """
    for strategy in strategies:
        try:
            value = strategy.extract(response)
        except (ValueError, EOFError) as exc:
            _logger.warning(
                "Return value strategy failed",
                extra={"strategy": strategy.name, "error": str(exc)},
            )
            continue
        if value is not None:
            _logger.debug("Return value extracted", extra={"strategy": strategy.name})
            return value, strategy.name
    return None, None
