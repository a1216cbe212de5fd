"""
Pool table rows.

Turns PoolInfo records into display rows, optionally labelled with token
symbols and the pool's own token balances.
"""

import asyncio
import logging
from typing import List, Optional

from ..amm.formatting import format_address, format_fee_tier, format_price_range, format_units
from ..tokens.metadata_cache import TokenMetadataCache
from .pool_index import PoolIndex
from .pool_types import PoolInfo, PoolSummary

logger = logging.getLogger(__name__)


def _token_label(symbol: str, balance: Optional[int], decimals: int) -> str:
    if balance is None:
        return symbol
    return f"{symbol}({format_units(balance, decimals)})"


def summarize_pool(
    pool: PoolInfo,
    symbol0: Optional[str] = None,
    symbol1: Optional[str] = None,
    balance0: Optional[int] = None,
    balance1: Optional[int] = None,
    decimals: int = 18,
) -> PoolSummary:
    """Build the table row for one pool; missing symbols fall back to short addresses."""
    label0 = _token_label(symbol0 or format_address(pool.token0), balance0, decimals)
    label1 = _token_label(symbol1 or format_address(pool.token1), balance1, decimals)

    return PoolSummary(
        pool=pool.pool,
        token=f"{label0} / {label1}",
        fee=format_fee_tier(pool.fee),
        price_range=format_price_range(pool.tick_lower, pool.tick_upper),
        current_price=pool.price,
        liquidity=pool.liquidity,
    )


async def build_pool_summaries(
    index: PoolIndex,
    tokens: TokenMetadataCache,
    include_balances: bool = True,
    decimals: int = 18,
) -> List[PoolSummary]:
    """
    Build rows for every loaded pool.

    Symbols for all tokens and the pools' token balances are fetched
    concurrently; a failed read only affects its own label.
    """
    pools = index.pools
    if not pools:
        return []

    symbols = await tokens.get_symbols(
        address for pool in pools for address in (pool.token0, pool.token1)
    )

    balances = [(None, None)] * len(pools)
    if include_balances:
        fetched = await asyncio.gather(
            *(
                asyncio.gather(
                    tokens.get_balance(pool.token0, pool.pool),
                    tokens.get_balance(pool.token1, pool.pool),
                )
                for pool in pools
            )
        )
        balances = [tuple(pair) for pair in fetched]

    rows = [
        summarize_pool(
            pool,
            symbols.get(pool.token0),
            symbols.get(pool.token1),
            balance0,
            balance1,
            decimals,
        )
        for pool, (balance0, balance1) in zip(pools, balances)
    ]
    logger.debug(f"Built {len(rows)} pool rows")
    return rows
