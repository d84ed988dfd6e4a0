"""
Storage provider operations.

Thin wrappers over the provider methods of the storage contract. Reads
are simulated only; writes go through the full pipeline and need a
signing callback.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

from flashonstellar.types import ContractArg, ContractMethodResponse

if TYPE_CHECKING:
    from flashonstellar.client import ContractClient


class ProviderOps:
    """Provider registry calls bound to a client."""

    def __init__(self, client: "ContractClient") -> None:
        self._client = client

    async def get_provider(
        self, wallet: str, provider: str, load_units: bool = False
    ) -> Optional[Dict[str, Any]]:
        """
        Fetch a provider record, optionally with its units.

        Returns:
            The decoded record, or None if the contract returned nothing.
        """
        record_task = self._client.read(
            "get_provider",
            [ContractArg(value=provider, type="address")],
            source=wallet,
        )
        if load_units:
            record, units = await asyncio.gather(
                record_task, self.get_provider_units(wallet, provider)
            )
        else:
            record, units = await record_task, None

        if isinstance(record, dict) and units is not None:
            record["units"] = units
        return record

    async def get_provider_units(self, wallet: str, provider: str) -> Dict[Any, Any]:
        result = await self._client.read(
            "get_provider_units",
            [ContractArg(value=provider, type="address")],
            source=wallet,
        )
        return result or {}

    async def get_providers(self, wallet: str, skip: int = 0, take: int = 10) -> List[Any]:
        result = await self._client.read(
            "get_providers",
            [ContractArg(value=skip, type="u32"), ContractArg(value=take, type="u32")],
            source=wallet,
        )
        return result or []

    async def get_provider_count(self, wallet: str) -> int:
        result = await self._client.read("get_provider_count", source=wallet)
        return result or 0

    async def register_provider(
        self, wallet: str, provider: str, description: str
    ) -> ContractMethodResponse:
        return await self._execute(
            wallet, provider, "register_provider", [ContractArg(value=description, type="string")]
        )

    async def update_provider(
        self, wallet: str, provider: str, description: str
    ) -> ContractMethodResponse:
        return await self._execute(
            wallet, provider, "update_provider", [ContractArg(value=description, type="string")]
        )

    async def delete_provider(self, wallet: str, provider: str) -> ContractMethodResponse:
        return await self._execute(wallet, provider, "delete_provider")

    async def _execute(
        self,
        wallet: str,
        provider: str,
        method: str,
        extra_args: Sequence[ContractArg] = (),
    ) -> ContractMethodResponse:
        # the trailing flag tells the contract whether the wallet acts as the owner
        is_owner = wallet != provider
        args = [
            ContractArg(value=provider, type="address"),
            *extra_args,
            ContractArg(value=is_owner, type="bool"),
        ]
        return await self._client.write(method, args, source=wallet)
