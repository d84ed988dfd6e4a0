"""
Signer adapter.

Hands an unsigned payload to the caller-supplied signing callback. Keys
never pass through this module.
"""

from __future__ import annotations

import inspect
from typing import Optional, Sequence, Union

from flashonstellar.errors import ConfigurationError, SigningError
from flashonstellar.types import ClientContext
from flashonstellar.utils.logging import get_logger

_logger = get_logger(__name__)


class SignerAdapter:
    """Invokes ``ClientContext.sign_transaction``, sync or async."""

    async def sign(
        self,
        payload: str,
        context: ClientContext,
        *,
        method: Optional[Union[str, Sequence[str]]] = None,
    ) -> str:
        """
        Sign ``payload`` with the context's callback.

        Raises:
            ConfigurationError: If the context has no signing callback.
            SigningError: If the callback raises or returns a non-string.
        """
        callback = context.sign_transaction
        if callback is None:
            raise ConfigurationError(method=method)

        try:
            signed = callback(payload)
            if inspect.isawaitable(signed):
                signed = await signed
        except Exception as exc:
            raise SigningError(exc, method=method) from exc

        if not isinstance(signed, str) or not signed:
            cause = TypeError(f"signer returned {type(signed).__name__}, expected XDR string")
            raise SigningError(cause, method=method) from cause

        _logger.debug("Signed payload", extra={"methods": _describe(method)})
        return signed


def _describe(method: Optional[Union[str, Sequence[str]]]) -> str:
    if method is None:
        return ""
    if isinstance(method, str):
        return method
    return ",".join(method)
