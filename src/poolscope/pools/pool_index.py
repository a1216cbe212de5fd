"""
Pool index.

Holds the pool set read from the pool manager and answers pair, index, fee
and address lookups. Every pair lookup goes through canonicalize_pair so a
pair has one identity regardless of argument order.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from eth_utils import is_hex_address

from ..chain.abis import POOL_MANAGER_ABI
from ..chain.base import ChainReader
from ..errors import InvalidInputError
from .pool_types import PairInfo, PoolInfo, decode_pairs, decode_pools

logger = logging.getLogger(__name__)


def canonicalize_pair(token_a: str, token_b: str) -> Tuple[str, str]:
    """
    Order a token pair so the lower address comes first.

    Addresses are compared and returned lowercased.

    Raises:
        InvalidInputError: If either address is not a hex address
    """
    for token in (token_a, token_b):
        if not isinstance(token, str) or not is_hex_address(token):
            raise InvalidInputError(f"Invalid token address: {token!r}")

    a, b = token_a.lower(), token_b.lower()
    return (a, b) if a <= b else (b, a)


class PoolIndex:
    """
    In-memory index over the pool manager's pools.

    The pool set is replaced wholesale on refresh. Pair lookups that miss
    refresh once and retry once; address lookups only consult the loaded
    set. A failed refresh is logged and treated as "not found".
    """

    def __init__(
        self,
        reader: ChainReader,
        pool_manager_address: str,
        pools: Optional[Iterable[PoolInfo]] = None,
    ):
        self.reader = reader
        self.pool_manager_address = pool_manager_address
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        self._pools: Tuple[PoolInfo, ...] = ()
        self._pairs: Tuple[PairInfo, ...] = ()
        self._by_key: Dict[Tuple[str, str, int], PoolInfo] = {}
        self._by_pair: Dict[Tuple[str, str], List[PoolInfo]] = {}
        self._by_address: Dict[str, PoolInfo] = {}

        if pools is not None:
            self.load(pools)

    @property
    def pools(self) -> Tuple[PoolInfo, ...]:
        return self._pools

    @property
    def pairs(self) -> Tuple[PairInfo, ...]:
        return self._pairs

    def load(self, pools: Iterable[PoolInfo]) -> None:
        """Replace the pool set and rebuild the lookup maps."""
        pools = tuple(pools)
        by_key = {}
        by_pair: Dict[Tuple[str, str], List[PoolInfo]] = {}
        by_address = {}

        for pool in pools:
            by_key[pool.key] = pool
            by_pair.setdefault(pool.pair, []).append(pool)
            by_address[pool.pool] = pool

        for candidates in by_pair.values():
            candidates.sort(key=lambda p: p.index)

        self._pools = pools
        self._by_key = by_key
        self._by_pair = by_pair
        self._by_address = by_address

    async def refresh(self) -> Tuple[PoolInfo, ...]:
        """
        Reload every pool from the pool manager.

        Raises:
            ChainError: If the read fails
        """
        records = await self.reader.read_contract(
            self.pool_manager_address, POOL_MANAGER_ABI, "getAllPools"
        )
        self.load(decode_pools(records))
        self.logger.info(f"Loaded {len(self._pools)} pools")
        return self._pools

    async def refresh_pairs(self) -> Tuple[PairInfo, ...]:
        """
        Reload the listed pairs from the pool manager.

        Raises:
            ChainError: If the read fails
        """
        records = await self.reader.read_contract(
            self.pool_manager_address, POOL_MANAGER_ABI, "getPairs"
        )
        self._pairs = tuple(decode_pairs(records))
        self.logger.info(f"Loaded {len(self._pairs)} pairs")
        return self._pairs

    async def _refresh_quietly(self) -> bool:
        try:
            await self.refresh()
            return True
        except Exception as e:
            self.logger.warning(f"Pool refresh failed: {e}")
            return False

    async def find_pool(self, token_a: str, token_b: str, index: int) -> Optional[PoolInfo]:
        """Find the pool for a pair and index, refreshing once on a miss."""
        token0, token1 = canonicalize_pair(token_a, token_b)
        key = (token0, token1, index)

        pool = self._by_key.get(key)
        if pool is not None:
            return pool

        if not await self._refresh_quietly():
            return None
        return self._by_key.get(key)

    async def find_pools_by_tokens(self, token_a: str, token_b: str) -> List[PoolInfo]:
        """Find every pool of a pair ordered by index, refreshing once when none are loaded."""
        pair = canonicalize_pair(token_a, token_b)

        pools = self._by_pair.get(pair)
        if pools:
            return list(pools)

        if not await self._refresh_quietly():
            return []
        return list(self._by_pair.get(pair, []))

    def _match_fee_tier(self, token_a: str, token_b: str, fee: int) -> Optional[PoolInfo]:
        a, b = token_a.lower(), token_b.lower()
        for pair in ((a, b), (b, a)):
            for pool in self._by_pair.get(pair, []):
                if pool.fee == fee:
                    return pool
        return None

    async def find_pool_by_fee_tier(self, token_a: str, token_b: str, fee: int) -> Optional[PoolInfo]:
        """
        Find a pool of a pair with the given fee tier.

        Either argument order matches; the lowest index wins when several
        pools share the fee tier.
        """
        canonicalize_pair(token_a, token_b)

        pool = self._match_fee_tier(token_a, token_b, fee)
        if pool is not None:
            return pool

        if not await self._refresh_quietly():
            return None
        return self._match_fee_tier(token_a, token_b, fee)

    def find_pool_by_address(self, pool_address: str) -> Optional[PoolInfo]:
        """Find a loaded pool by its contract address."""
        if not pool_address:
            return None
        return self._by_address.get(pool_address.lower())
