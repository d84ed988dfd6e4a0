"""
Network and pipeline configuration.
"""

from flashonstellar.config.networks import (
    NETWORKS,
    Network,
    NetworkConfig,
    get_network_config,
)
from flashonstellar.config.pipeline import PipelineConfig

__all__ = [
    "Network",
    "NetworkConfig",
    "NETWORKS",
    "get_network_config",
    "PipelineConfig",
]
