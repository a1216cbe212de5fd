"""
Position resolution.

Joins an owner's positions with the pools they belong to and derives the
display fields the positions table shows.
"""

import asyncio
import logging
from typing import Iterable, List, Optional, Tuple

from ..amm.formatting import format_address, format_fee_tier, format_price_for_ui, format_price_range
from ..amm.v3_math import get_sqrt_ratios_for_range
from ..chain.base import WalletSession
from ..errors import InvalidInputError
from ..pools.pool_index import PoolIndex
from ..pools.pool_types import PoolInfo
from ..tokens.metadata_cache import TokenMetadataCache
from .position_types import PositionInfo, PositionView

logger = logging.getLogger(__name__)


class PositionResolver:
    """
    Resolves positions against a PoolIndex.

    Positions whose pool cannot be found, even after the index's one
    refresh, are dropped rather than shown with partial data.
    """

    def __init__(self, pool_index: PoolIndex, tokens: Optional[TokenMetadataCache] = None):
        self.pool_index = pool_index
        self.tokens = tokens
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def resolve_for_owner(
        self, positions: Iterable[PositionInfo], owner: Optional[str]
    ) -> List[PositionView]:
        """
        Build views for the open positions held by `owner`.

        Owner comparison is case-insensitive. Closed positions (no liquidity
        and nothing owed) are skipped.
        """
        if not owner:
            return []
        owner = owner.lower()

        candidates = [p for p in positions if p.owner.lower() == owner and not p.is_closed]
        if not candidates:
            return []

        views = []
        for position in candidates:
            pool = await self.pool_index.find_pool(position.token0, position.token1, position.index)
            if pool is None:
                self.logger.warning(
                    f"Dropping position {position.id}: no pool for "
                    f"{position.token0}/{position.token1} index {position.index}"
                )
                continue
            try:
                sqrt_range = get_sqrt_ratios_for_range(position.tick_lower, position.tick_upper)
            except InvalidInputError as e:
                self.logger.warning(f"Dropping position {position.id}: {e}")
                continue
            views.append(await self._build_view(position, pool, sqrt_range))

        self.logger.debug(f"Resolved {len(views)} of {len(candidates)} positions for {owner}")
        return views

    async def resolve_for_session(
        self, session: WalletSession, positions: Iterable[PositionInfo]
    ) -> List[PositionView]:
        """Resolve positions for the connected account; a disconnected session has none."""
        owner = session.owner
        if owner is None:
            return []
        return await self.resolve_for_owner(positions, owner)

    async def _build_view(
        self, position: PositionInfo, pool: PoolInfo, sqrt_range: Tuple[int, int]
    ) -> PositionView:
        if self.tokens is not None:
            symbol0, symbol1 = await asyncio.gather(
                self.tokens.get_symbol(position.token0),
                self.tokens.get_symbol(position.token1),
            )
        else:
            symbol0, symbol1 = format_address(position.token0), format_address(position.token1)

        current_price = pool.price
        return PositionView(
            position=position,
            pool=pool,
            token=f"{symbol0}/{symbol1}",
            fee_tier=format_fee_tier(pool.fee),
            price_range=format_price_range(position.tick_lower, position.tick_upper),
            current_price=current_price,
            current_price_display=format_price_for_ui(current_price),
            sqrt_price_range_x96=sqrt_range,
        )
