"""
Configuration management for poolscope.

Use get_config() to access all configuration settings.

Example:
    from poolscope.config import get_config

    config = get_config()

    # Access chain settings
    rpc_url = config.chains.get_rpc_url("sepolia")

    # Access contract addresses
    pool_manager = config.protocols.POOL_MANAGER_ADDRESS
"""

from .base import BaseConfig, ConfigError
from .chains import ChainConfig
from .manager import ConfigManager, get_config, reload_config
from .protocols import ProtocolConfig

__all__ = [
    "BaseConfig",
    "ConfigError",
    "ChainConfig",
    "ProtocolConfig",
    "ConfigManager",
    "get_config",
    "reload_config",
]
