#!/usr/bin/env python3
"""
Register Provider Example

Registers the signing account as a storage provider, then checks the
record. The write is simulated, prepared, signed with a local keypair,
submitted and polled until the ledger confirms it.

Run with:
    CONTRACT_ID=C... SECRET_KEY=S... python examples/register_provider.py
"""

import asyncio
import os

from flashonstellar import (
    ContractCallError,
    ContractClient,
    PresumedSuccess,
    get_network_config,
    keypair_signer,
    public_key_from_secret,
)
from flashonstellar.utils import configure_logging


CONTRACT_ID = os.environ["CONTRACT_ID"]
SECRET_KEY = os.environ["SECRET_KEY"]
NETWORK = os.environ.get("NETWORK", "TESTNET")
DESCRIPTION = os.environ.get("DESCRIPTION", "Example provider")


async def main() -> None:
    print("=" * 60)
    print("flashonstellar - Register Provider")
    print("=" * 60)
    print()

    configure_logging(level="DEBUG" if os.environ.get("DEBUG") else "INFO")

    wallet = public_key_from_secret(SECRET_KEY)
    signer = keypair_signer(SECRET_KEY, get_network_config(NETWORK))

    async with ContractClient(CONTRACT_ID, NETWORK, sign_transaction=signer) as client:
        try:
            response = await client.providers.register_provider(wallet, wallet, DESCRIPTION)
        except ContractCallError as e:
            print(f"Registration failed: {e}")
            print(f"Details: {e.to_dict()}")
            return

        print(f"Transaction: {response.tx_hash}")
        if isinstance(response.result, PresumedSuccess):
            print("Status could not be parsed; re-checking by hash...")
            response = await client.confirm_transaction(response.tx_hash)
        print(f"Confirmed: {response.confirmed}")

        record = await client.providers.get_provider(wallet, wallet)
        print(f"Provider record: {record}")


if __name__ == "__main__":
    asyncio.run(main())
