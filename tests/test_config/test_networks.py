"""
Tests for network resolution.
"""

import pytest
from stellar_sdk import Network as StellarNetwork

from flashonstellar.config import NETWORKS, Network, get_network_config
from flashonstellar.errors import UnsupportedNetworkError


class TestNetworks:
    """Tests for the fixed network table."""

    def test_passphrases(self) -> None:
        assert NETWORKS[Network.TESTNET].passphrase == StellarNetwork.TESTNET_NETWORK_PASSPHRASE
        assert NETWORKS[Network.PUBLIC].passphrase == StellarNetwork.PUBLIC_NETWORK_PASSPHRASE

    def test_endpoints(self) -> None:
        testnet = NETWORKS[Network.TESTNET]

        assert testnet.rpc_url == "https://soroban-testnet.stellar.org"
        assert testnet.horizon_url == "https://horizon-testnet.stellar.org"

    @pytest.mark.parametrize("network", [Network.PUBLIC, "PUBLIC"])
    def test_resolve(self, network) -> None:
        assert get_network_config(network) is NETWORKS[Network.PUBLIC]

    @pytest.mark.parametrize("network", ["FUTURENET", "testnet", "", None])
    def test_unsupported(self, network) -> None:
        with pytest.raises(UnsupportedNetworkError) as exc_info:
            get_network_config(network)

        assert exc_info.value.code == "UNSUPPORTED_NETWORK"
        assert exc_info.value.network == network

    def test_rpc_override_keeps_table_intact(self) -> None:
        """Test an RPC override returns a copy and leaves the shared entry alone."""
        custom = get_network_config("TESTNET", "http://localhost:8000/soroban/rpc")

        assert custom.rpc_url == "http://localhost:8000/soroban/rpc"
        assert custom.passphrase == NETWORKS[Network.TESTNET].passphrase
        assert NETWORKS[Network.TESTNET].rpc_url == "https://soroban-testnet.stellar.org"
