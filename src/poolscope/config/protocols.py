"""
Protocol-specific configuration for poolscope.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from .base import BaseConfig

# Faucet tokens of the sepolia deployment
DEFAULT_TEST_TOKENS = (
    "0x4798388e3adE569570Df626040F07DF71135C48E",
    "0x5A4eA3a013D42Cfd1B1609d19f6eA998EeE06D30",
    "0x86B5df6FF459854ca91318274E47F4eEE245CF28",
    "0x7af86B1034AC4C925Ef5C3F637D1092310d83F03",
)


@dataclass
class ProtocolConfig(BaseConfig):
    """Contract addresses and quoting/swap settings for the AMM deployment."""

    # Contract addresses (sepolia deployment)
    POOL_MANAGER_ADDRESS: str = BaseConfig.get_env_address(
        "POOL_MANAGER_ADDRESS", "0xddC12b3F9F7C91C79DA7433D8d212FB78d609f7B"
    )
    POSITION_MANAGER_ADDRESS: str = BaseConfig.get_env_address(
        "POSITION_MANAGER_ADDRESS", "0xbe766Bf20eFfe431829C5d5a2744865974A0B610"
    )
    SWAP_ROUTER_ADDRESS: str = BaseConfig.get_env_address("SWAP_ROUTER_ADDRESS")

    # Quoting
    QUOTE_DEBOUNCE_MS: int = BaseConfig.get_env_int("QUOTE_DEBOUNCE_MS", 300)
    DEFAULT_TOKEN_DECIMALS: int = BaseConfig.get_env_int("DEFAULT_TOKEN_DECIMALS", 18)

    # Swap submission
    SWAP_DEADLINE_SECONDS: int = BaseConfig.get_env_int("SWAP_DEADLINE_SECONDS", 600)
    SLIPPAGE_BPS: int = BaseConfig.get_env_int("SLIPPAGE_BPS", 50)

    # RPC reads
    RPC_MAX_RETRIES: int = BaseConfig.get_env_int("RPC_MAX_RETRIES", 3)
    RPC_RETRY_DELAY: float = BaseConfig.get_env_float("RPC_RETRY_DELAY", 1.0)

    # Test token faucet; the amount is in whole tokens
    FAUCET_MINT_AMOUNT: int = BaseConfig.get_env_int("FAUCET_MINT_AMOUNT", 10000)
    TEST_TOKEN_ADDRESSES: List[str] = field(
        default_factory=lambda: BaseConfig.get_env_address_list("TEST_TOKEN_ADDRESSES", DEFAULT_TEST_TOKENS)
    )

    @property
    def quote_debounce_seconds(self) -> float:
        """Debounce window for quote requests, in seconds."""
        return self.QUOTE_DEBOUNCE_MS / 1000

    @property
    def contract_addresses(self) -> Dict[str, str]:
        """All configured contract addresses by role."""
        return {
            "pool_manager": self.POOL_MANAGER_ADDRESS,
            "position_manager": self.POSITION_MANAGER_ADDRESS,
            "swap_router": self.SWAP_ROUTER_ADDRESS,
        }
