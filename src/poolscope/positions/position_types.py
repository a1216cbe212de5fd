"""
Core types for liquidity positions.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Tuple

from ..pools.pool_types import PoolInfo, normalize_address, record_field


@dataclass(frozen=True)
class PositionInfo:
    """
    A liquidity provider's position in one pool.

    (token0, token1, index) matches the owning PoolInfo's key.
    """

    id: int
    owner: str
    token0: str
    token1: str
    index: int
    fee: int
    liquidity: int
    tick_lower: int
    tick_upper: int
    tokens_owed0: int = 0
    tokens_owed1: int = 0
    fee_growth_inside0_last_x128: int = 0
    fee_growth_inside1_last_x128: int = 0

    @classmethod
    def from_chain(cls, raw: Any) -> "PositionInfo":
        """Decode a getAllPositions record."""
        return cls(
            id=int(record_field(raw, "id", 0)),
            owner=normalize_address(record_field(raw, "owner", 1)),
            token0=normalize_address(record_field(raw, "token0", 2)),
            token1=normalize_address(record_field(raw, "token1", 3)),
            index=int(record_field(raw, "index", 4)),
            fee=int(record_field(raw, "fee", 5)),
            liquidity=int(record_field(raw, "liquidity", 6)),
            tick_lower=int(record_field(raw, "tickLower", 7)),
            tick_upper=int(record_field(raw, "tickUpper", 8)),
            tokens_owed0=int(record_field(raw, "tokensOwed0", 9)),
            tokens_owed1=int(record_field(raw, "tokensOwed1", 10)),
            fee_growth_inside0_last_x128=int(record_field(raw, "feeGrowthInside0LastX128", 11)),
            fee_growth_inside1_last_x128=int(record_field(raw, "feeGrowthInside1LastX128", 12)),
        )

    @property
    def pool_key(self) -> tuple:
        return (self.token0, self.token1, self.index)

    @property
    def is_closed(self) -> bool:
        """No liquidity left and nothing owed."""
        return self.liquidity == 0 and self.tokens_owed0 == 0 and self.tokens_owed1 == 0


@dataclass(frozen=True)
class PositionView:
    """
    A position resolved against its pool, ready for display.

    Attributes:
        position: The raw position
        pool: The owning pool
        token: "SYM0/SYM1" label, or shortened addresses without a token cache
        fee_tier: Fee tier as a percentage string
        price_range: "lower ~ upper" price range
        current_price: Pool's current token1/token0 price
        current_price_display: current_price formatted for the UI
        sqrt_price_range_x96: sqrtPriceX96 at tick_lower and tick_upper
    """

    position: PositionInfo
    pool: PoolInfo
    token: str
    fee_tier: str
    price_range: str
    current_price: Decimal
    current_price_display: str
    sqrt_price_range_x96: Tuple[int, int]

    @property
    def key(self) -> str:
        return str(self.position.id)

    @property
    def in_range(self) -> bool:
        """Whether the pool's current tick sits inside the position's range."""
        return self.position.tick_lower <= self.pool.tick < self.position.tick_upper
