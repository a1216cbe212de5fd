"""
Token metadata cache.

Memoizes ERC20 symbol and balance reads for one wallet session. The cache is
an explicit object handed to the components that need it; the UI creates a
new one (or calls clear()) when the account or network changes.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from eth_utils import is_hex, is_hex_address, to_checksum_address

from ..chain.abis import ERC20_ABI
from ..chain.base import ChainReader
from ..errors import InvalidInputError

logger = logging.getLogger(__name__)

# Canonical placeholder address for the chain's native coin
NATIVE_TOKEN_ADDRESS = "0x" + "e" * 40
ZERO_ADDRESS = "0x" + "0" * 40

EMPTY_TOKEN_SYMBOL = "-"
FALLBACK_SYMBOL_LENGTH = 6


@dataclass(frozen=True)
class TokenOption:
    """One entry of a token selector: address value and symbol label."""

    value: str
    label: str


def is_empty_address(address: Optional[str]) -> bool:
    """True for "", "0x", "0x0" and the all-zero address."""
    if not address:
        return True
    if not is_hex(address):
        return False
    digits = address[2:] if address.lower().startswith("0x") else address
    return not digits or int(digits, 16) == 0


class TokenMetadataCache:
    """
    Session cache for token symbols and balances.

    Symbols resolve sentinels without remote calls, then the cache, then the
    chain. A failed symbol read caches a truncated-address fallback so the
    same failing call is not repeated. Concurrent requests for the same
    uncached symbol share one in-flight read.
    """

    def __init__(self, reader: ChainReader, native_symbol: str = "ETH"):
        self.reader = reader
        self.native_symbol = native_symbol
        self._symbols: Dict[str, str] = {}
        self._balances: Dict[Tuple[str, str], int] = {}
        self._pending_symbols: Dict[str, asyncio.Future] = {}
        self._epoch = 0
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def get_symbol(self, address: str) -> str:
        """
        Get the symbol for a token address.

        Raises:
            InvalidInputError: If the address is not a hex address
        """
        if is_empty_address(address):
            return EMPTY_TOKEN_SYMBOL

        key = address.lower()
        if key == NATIVE_TOKEN_ADDRESS:
            return self.native_symbol

        if not is_hex_address(key):
            raise InvalidInputError(f"Invalid token address: {address}")

        cached = self._symbols.get(key)
        if cached is not None:
            return cached

        pending = self._pending_symbols.get(key)
        if pending is None:
            pending = asyncio.ensure_future(self._fetch_symbol(key, self._epoch))
            self._pending_symbols[key] = pending
            pending.add_done_callback(lambda done: self._forget_pending(key, done))

        return await asyncio.shield(pending)

    def _forget_pending(self, key: str, future: asyncio.Future) -> None:
        if self._pending_symbols.get(key) is future:
            del self._pending_symbols[key]

    async def _fetch_symbol(self, key: str, epoch: int) -> str:
        try:
            symbol = await self.reader.read_contract(key, ERC20_ABI, "symbol")
            symbol = str(symbol).strip().strip("\x00")
        except Exception as e:
            self.logger.warning(f"Failed to fetch symbol for {key}: {e}")
            symbol = key[:FALLBACK_SYMBOL_LENGTH]

        # Reads started before clear() belong to the previous account or network
        if epoch == self._epoch:
            self._symbols[key] = symbol
        return symbol

    async def get_symbols(self, addresses: Iterable[str]) -> Dict[str, str]:
        """Fetch symbols for many addresses concurrently, keyed by lowercased address."""
        unique = list(dict.fromkeys(addr.lower() for addr in addresses))
        symbols = await asyncio.gather(*(self.get_symbol(addr) for addr in unique))
        return dict(zip(unique, symbols))

    async def get_balance(self, token_address: str, owner_address: str) -> int:
        """
        Get the ERC20 balance of `owner_address`.

        A failed read yields 0 and is not cached.

        Raises:
            InvalidInputError: If either address is not a hex address
        """
        for address in (token_address, owner_address):
            if not address or not is_hex_address(address.lower()):
                raise InvalidInputError(f"Invalid address: {address}")

        key = (token_address.lower(), owner_address.lower())
        cached = self._balances.get(key)
        if cached is not None:
            return cached

        epoch = self._epoch
        try:
            balance = int(
                await self.reader.read_contract(
                    key[0], ERC20_ABI, "balanceOf", [to_checksum_address(key[1])]
                )
            )
        except Exception as e:
            self.logger.warning(f"Failed to fetch balance of {key[1]} for {key[0]}: {e}")
            return 0

        if epoch == self._epoch:
            self._balances[key] = balance
        return balance

    def invalidate_balance(self, token_address: str, owner_address: str) -> None:
        """Forget one cached balance, e.g. after a swap confirms."""
        self._balances.pop((token_address.lower(), owner_address.lower()), None)

    def clear(self) -> None:
        """Drop all cached entries; call on account or network switch."""
        self._epoch += 1
        self._symbols.clear()
        self._balances.clear()
        self._pending_symbols.clear()
        logger.debug("Token metadata cache cleared")

    async def get_token_options(self, pairs: Iterable) -> List[TokenOption]:
        """
        Build token selector options from listed pairs.

        Each unique token address appears once, in first-seen order,
        labelled with its symbol.
        """
        addresses: List[str] = []
        for pair in pairs:
            for address in (pair.token0, pair.token1):
                if address.lower() not in addresses:
                    addresses.append(address.lower())

        symbols = await self.get_symbols(addresses)
        return [TokenOption(value=addr, label=symbols[addr]) for addr in addresses]
