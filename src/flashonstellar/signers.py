"""
Local keypair signing.

For scripts and tests. Applications that hold keys in a wallet pass their
own ``sign_transaction`` callback instead.
"""

from __future__ import annotations

from stellar_sdk import Keypair, TransactionBuilder

from flashonstellar.config import NetworkConfig
from flashonstellar.types import SignTransaction


def public_key_from_secret(secret: str) -> str:
    """Derive the ``G...`` account id for a ``S...`` secret seed."""
    return Keypair.from_secret(secret).public_key


def keypair_signer(secret: str, network: NetworkConfig) -> SignTransaction:
    """
    Return a signing callback bound to ``secret`` on ``network``.

    The callback parses the unsigned envelope, signs it and returns the
    signed base64 XDR.
    """
    keypair = Keypair.from_secret(secret)

    def sign(unsigned_xdr: str) -> str:
        envelope = TransactionBuilder.from_xdr(unsigned_xdr, network.passphrase)
        envelope.sign(keypair)
        return envelope.to_xdr()

    return sign
