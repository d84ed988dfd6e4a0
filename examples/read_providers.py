#!/usr/bin/env python3
"""
Read Providers Example

Lists the providers registered in a storage contract. Reads are simulated
only, so no signing key is needed.

Run with:
    CONTRACT_ID=C... WALLET=G... python examples/read_providers.py
"""

import asyncio
import os

from flashonstellar import ContractClient, Network
from flashonstellar.utils import configure_logging, dumps


CONTRACT_ID = os.environ["CONTRACT_ID"]
WALLET = os.environ["WALLET"]
NETWORK = os.environ.get("NETWORK", Network.TESTNET.value)


async def main() -> None:
    print("=" * 60)
    print("flashonstellar - Read Providers")
    print("=" * 60)
    print()

    if os.environ.get("DEBUG"):
        configure_logging(level="DEBUG")

    async with ContractClient(CONTRACT_ID, NETWORK) as client:
        count = await client.providers.get_provider_count(WALLET)
        providers = await client.providers.get_providers(WALLET, skip=0, take=10)
        print(f"Registered providers: {count}")

        for address in providers:
            record = await client.providers.get_provider(WALLET, address, load_units=True)
            print(f"  {address}: {dumps(record)}")


if __name__ == "__main__":
    asyncio.run(main())
