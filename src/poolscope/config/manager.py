"""
Process-wide configuration for poolscope.

ConfigManager bundles the base, chain and protocol settings and derives the
objects the chain and quoting layers are built from. Most callers go
through get_config().
"""

import logging
from typing import Any, Dict, Optional

from ..chain.base import ReadConfig
from .base import BaseConfig, ConfigError
from .chains import ChainConfig
from .protocols import ProtocolConfig

logger = logging.getLogger(__name__)

BPS_DENOMINATOR = 10000


class ConfigManager:
    """Base, chain and protocol settings for one process."""

    def __init__(self, environment: Optional[str] = None):
        try:
            self._base = BaseConfig() if environment is None else BaseConfig(ENVIRONMENT=environment)
            self._chains = ChainConfig(ENVIRONMENT=self._base.ENVIRONMENT)
            self._protocols = ProtocolConfig(ENVIRONMENT=self._base.ENVIRONMENT)
        except ConfigError:
            raise
        except Exception as e:
            logger.error(f"Failed to load configuration: {e}")
            raise ConfigError(f"Configuration could not be loaded: {e}") from e

        logger.debug(f"Configuration loaded for {self.environment} on {self._chains.DEFAULT_CHAIN}")

    @property
    def environment(self) -> str:
        return self._base.ENVIRONMENT

    @property
    def base(self) -> BaseConfig:
        return self._base

    @property
    def chains(self) -> ChainConfig:
        return self._chains

    @property
    def protocols(self) -> ProtocolConfig:
        return self._protocols

    def read_config(self) -> ReadConfig:
        """Retry policy for Web3ChainReader."""
        return ReadConfig(
            max_retries=self._protocols.RPC_MAX_RETRIES,
            retry_delay=self._protocols.RPC_RETRY_DELAY,
        )

    def contract_address(self, role: str) -> str:
        """
        Look up a configured contract address by role.

        Raises:
            ConfigError: If the role is unknown or its address is not configured
        """
        addresses = self._protocols.contract_addresses
        if role not in addresses:
            raise ConfigError(f"Unknown contract role: {role} (known: {', '.join(addresses)})")
        if not addresses[role]:
            raise ConfigError(f"No contract address configured for {role}")
        return addresses[role]

    def validate_configuration(self) -> bool:
        """
        Check cross-field constraints.

        Missing contract addresses only warn; commands that need one fail
        when they ask for it.

        Raises:
            ConfigError: On an unsupported default chain or out-of-range
                quote and swap settings
        """
        if self._chains.DEFAULT_CHAIN not in self._chains.supported_chains:
            raise ConfigError(f"Unsupported default chain: {self._chains.DEFAULT_CHAIN}")

        protocols = self._protocols
        if protocols.QUOTE_DEBOUNCE_MS < 0:
            raise ConfigError(f"QUOTE_DEBOUNCE_MS must not be negative: {protocols.QUOTE_DEBOUNCE_MS}")
        if not 0 <= protocols.SLIPPAGE_BPS < BPS_DENOMINATOR:
            raise ConfigError(f"SLIPPAGE_BPS out of range: {protocols.SLIPPAGE_BPS}")
        if protocols.SWAP_DEADLINE_SECONDS <= 0:
            raise ConfigError(f"SWAP_DEADLINE_SECONDS must be positive: {protocols.SWAP_DEADLINE_SECONDS}")
        if protocols.RPC_MAX_RETRIES < 1:
            raise ConfigError(f"RPC_MAX_RETRIES must be at least 1: {protocols.RPC_MAX_RETRIES}")
        if protocols.FAUCET_MINT_AMOUNT <= 0:
            raise ConfigError(f"FAUCET_MINT_AMOUNT must be positive: {protocols.FAUCET_MINT_AMOUNT}")

        for role, address in protocols.contract_addresses.items():
            if not address:
                logger.warning(f"No contract address configured for {role}")

        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "environment": self.environment,
            "base": self._base.to_dict(),
            "chains": self._chains.to_dict(),
            "protocols": self._protocols.to_dict(),
        }

    def __repr__(self) -> str:
        return f"ConfigManager(environment={self.environment}, chain={self._chains.DEFAULT_CHAIN})"


_config_manager: Optional[ConfigManager] = None


def get_config(environment: Optional[str] = None, force_reload: bool = False) -> ConfigManager:
    """
    Return the shared ConfigManager, building and validating it on first use.

    Raises:
        ConfigError: If the settings are invalid
    """
    global _config_manager

    if _config_manager is None or force_reload:
        manager = ConfigManager(environment=environment)
        manager.validate_configuration()
        _config_manager = manager

    return _config_manager


def reload_config(environment: Optional[str] = None) -> ConfigManager:
    """Re-read the environment and replace the shared ConfigManager."""
    return get_config(environment=environment, force_reload=True)
