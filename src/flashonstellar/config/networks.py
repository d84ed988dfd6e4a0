from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Union

from stellar_sdk import Network as StellarNetwork

from flashonstellar.errors import UnsupportedNetworkError

__all__ = ["Network", "NetworkConfig", "NETWORKS", "get_network_config"]


class Network(str, Enum):
    TESTNET = "TESTNET"
    PUBLIC = "PUBLIC"


@dataclass(frozen=True)
class NetworkConfig:
    id: Network
    passphrase: str
    rpc_url: str
    horizon_url: str


NETWORKS: dict[Network, NetworkConfig] = {
    Network.TESTNET: NetworkConfig(
        id=Network.TESTNET,
        passphrase=StellarNetwork.TESTNET_NETWORK_PASSPHRASE,
        rpc_url="https://soroban-testnet.stellar.org",
        horizon_url="https://horizon-testnet.stellar.org",
    ),
    Network.PUBLIC: NetworkConfig(
        id=Network.PUBLIC,
        passphrase=StellarNetwork.PUBLIC_NETWORK_PASSPHRASE,
        rpc_url="https://rpc.stellar.org",
        horizon_url="https://horizon.stellar.org",
    ),
}


def get_network_config(
    network: Union[Network, str], rpc_url: Optional[str] = None
) -> NetworkConfig:
    """Resolve a network identifier to its fixed configuration.

    Raises:
        UnsupportedNetworkError: For anything other than TESTNET or PUBLIC.
    """
    try:
        cfg = NETWORKS[Network(network)]
    except ValueError:
        raise UnsupportedNetworkError(network) from None
    if rpc_url:
        return replace(cfg, rpc_url=rpc_url)
    return cfg
