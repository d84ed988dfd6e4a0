"""
Client contexts.

A ``ClientContext`` is created once per client and shared by reference
across every call it issues. Write paths take a ``WriteContext``, which
cannot exist without a signing callback.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Sequence, Union

from flashonstellar.config.networks import NetworkConfig
from flashonstellar.errors import ConfigurationError

SignTransaction = Callable[[str], Union[str, Awaitable[str]]]
"""Signing callback: receives unsigned base64 XDR, returns it signed."""


@dataclass(frozen=True)
class ClientContext:
    """
    Read-only configuration shared by all calls of one logical client.

    Attributes:
        contract_address: Strkey ("C...") of the target contract.
        network: Resolved network configuration.
        sign_transaction: Optional signing callback. Read-only clients omit it.
    """

    contract_address: str
    network: NetworkConfig
    sign_transaction: Optional[SignTransaction] = None

    @property
    def can_sign(self) -> bool:
        return self.sign_transaction is not None


@dataclass(frozen=True)
class WriteContext(ClientContext):
    """A ClientContext whose signing callback is guaranteed to be present."""

    def __post_init__(self) -> None:
        if self.sign_transaction is None:
            raise ConfigurationError()

    @classmethod
    def require(
        cls,
        context: ClientContext,
        *,
        method: Optional[Union[str, Sequence[str]]] = None,
    ) -> "WriteContext":
        """
        Narrow a context to a WriteContext.

        Raises:
            ConfigurationError: If the context has no signing callback.
        """
        if isinstance(context, WriteContext):
            return context
        if context.sign_transaction is None:
            raise ConfigurationError(method=method)
        return cls(
            contract_address=context.contract_address,
            network=context.network,
            sign_transaction=context.sign_transaction,
        )
