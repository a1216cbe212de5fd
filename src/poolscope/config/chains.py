"""
Chain-specific configuration for poolscope.
"""

from dataclasses import dataclass
from typing import Dict

from .base import BaseConfig


@dataclass
class ChainConfig(BaseConfig):
    """Chain-specific configuration for the networks the pool contracts live on."""

    # Default chain settings
    DEFAULT_CHAIN: str = BaseConfig.get_env("DEFAULT_CHAIN", "sepolia")

    # Chain-specific RPC URLs
    SEPOLIA_RPC_URL: str = BaseConfig.get_env(
        "SEPOLIA_RPC_URL", "https://ethereum-sepolia-rpc.publicnode.com"
    )
    ETHEREUM_RPC_URL: str = BaseConfig.get_env(
        "ETHEREUM_RPC_URL", "https://eth.llamarpc.com"
    )

    # Chain IDs
    SEPOLIA_CHAIN_ID: int = 11155111
    ETHEREUM_CHAIN_ID: int = 1

    # Symbol shown for the native coin placeholder address
    NATIVE_SYMBOL: str = BaseConfig.get_env("NATIVE_SYMBOL", "ETH")

    @property
    def supported_chains(self) -> Dict[str, Dict]:
        """Get configuration for all supported chains."""
        return {
            "sepolia": {
                "chain_id": self.SEPOLIA_CHAIN_ID,
                "rpc_url": self.SEPOLIA_RPC_URL,
                "native_token": self.NATIVE_SYMBOL,
                "explorer_url": "https://sepolia.etherscan.io",
            },
            "ethereum": {
                "chain_id": self.ETHEREUM_CHAIN_ID,
                "rpc_url": self.ETHEREUM_RPC_URL,
                "native_token": self.NATIVE_SYMBOL,
                "explorer_url": "https://etherscan.io",
            },
        }

    def get_chain_config(self, chain_name: str) -> Dict:
        """Get configuration for a specific chain."""
        if chain_name not in self.supported_chains:
            raise ValueError(f"Unsupported chain: {chain_name}")
        return self.supported_chains[chain_name]

    def get_rpc_url(self, chain_name: str = None) -> str:
        """Get RPC URL for a specific chain."""
        return self.get_chain_config(chain_name or self.DEFAULT_CHAIN)["rpc_url"]

    def get_chain_id(self, chain_name: str = None) -> int:
        """Get chain ID for a specific chain."""
        return self.get_chain_config(chain_name or self.DEFAULT_CHAIN)["chain_id"]

    def get_native_symbol(self, chain_name: str = None) -> str:
        """Get the native coin symbol for a specific chain."""
        return self.get_chain_config(chain_name or self.DEFAULT_CHAIN)["native_token"]
