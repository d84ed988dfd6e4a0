"""
Classic (non-contract) account helpers.

Trust-line changes are the common case: a contract that pays out a
classic asset needs the recipient to trust it first. The ledger only
accepts a contract-call transaction with a single operation, so the
trust line goes in its own envelope. Balances are read from Horizon.
"""

from __future__ import annotations

from typing import Any, Dict, List

from stellar_sdk import Asset, ServerAsync, SorobanServerAsync, TransactionBuilder
from stellar_sdk.exceptions import AccountNotFoundException, BaseRequestError, NotFoundError
from stellar_sdk.operation import ChangeTrust

from flashonstellar.config import NetworkConfig
from flashonstellar.config.pipeline import DEFAULT_BASE_FEE
from flashonstellar.errors import AccountLookupError, EncodingError
from flashonstellar.utils.logging import get_logger

_logger = get_logger(__name__)

TRUST_LINE_TIMEOUT_SECONDS = 30

# a zero limit removes the trust line
_REMOVE_LIMIT = "0"


def change_trust_operation(asset_code: str, issuer: str, remove: bool = False) -> ChangeTrust:
    """
    Build a trust-line operation for ``asset_code`` issued by ``issuer``.

    Raises:
        EncodingError: If the asset code or issuer is invalid.
    """
    try:
        asset = Asset(asset_code, issuer)
    except ValueError as exc:
        raise EncodingError(f"{asset_code}:{issuer}", "asset", reason=str(exc)) from exc
    return ChangeTrust(asset=asset, limit=_REMOVE_LIMIT if remove else None)


async def change_trust_xdr(
    server: SorobanServerAsync,
    network: NetworkConfig,
    source: str,
    asset_code: str,
    issuer: str,
    remove: bool = False,
) -> str:
    """
    Build an unsigned standalone trust-line envelope for ``source``.

    Returns:
        Base64 XDR, valid for 30 seconds, ready for the signing callback.

    Raises:
        AccountLookupError: If ``source`` is malformed or unknown.
        EncodingError: If the asset code or issuer is invalid.
    """
    operation = change_trust_operation(asset_code, issuer, remove)
    try:
        account = await server.load_account(source)
    except AccountNotFoundException as exc:
        raise AccountLookupError(source, method="change_trust", reason="not found") from exc
    except (ValueError, BaseRequestError) as exc:
        raise AccountLookupError(source, method="change_trust", reason=str(exc)) from exc

    envelope = (
        TransactionBuilder(
            source_account=account,
            network_passphrase=network.passphrase,
            base_fee=DEFAULT_BASE_FEE,
        )
        .append_operation(operation)
        .set_timeout(TRUST_LINE_TIMEOUT_SECONDS)
        .build()
    )
    return envelope.to_xdr()


async def get_balances(horizon: ServerAsync, account_id: str) -> List[Dict[str, Any]]:
    """
    Fetch the balances of ``account_id`` from Horizon.

    Returns:
        Horizon balance records in the order Horizon lists them. Amounts
        are decimal strings.

    Raises:
        AccountLookupError: If the account is malformed or unknown.
    """
    try:
        account = await horizon.accounts().account_id(account_id).call()
    except NotFoundError as exc:
        raise AccountLookupError(account_id, method="get_balances", reason="not found") from exc
    except (ValueError, BaseRequestError) as exc:
        raise AccountLookupError(account_id, method="get_balances", reason=str(exc)) from exc

    balances = account.get("balances", [])
    _logger.debug("Loaded balances", extra={"account": account_id, "count": len(balances)})
    return balances
