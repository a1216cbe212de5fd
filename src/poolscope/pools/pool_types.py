"""
Core types for pools and pairs.

Domain models decoded from pool manager reads. Records arrive either as
positional tuples in contract field order or as mappings keyed by the
contract's field names.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Sequence

from ..amm.v3_math import sqrt_price_x96_to_price


def record_field(raw: Any, name: str, position: int) -> Any:
    if isinstance(raw, Mapping):
        return raw[name]
    if isinstance(raw, (tuple, list)):
        return raw[position]
    return getattr(raw, name)


def normalize_address(value: Any) -> str:
    return str(value).lower()


@dataclass(frozen=True)
class PoolInfo:
    """
    One deployed liquidity pool.

    Attributes:
        pool: Pool contract address (lowercased)
        token0: Lower token address of the pair (lowercased)
        token1: Higher token address of the pair (lowercased)
        index: Disambiguates several pools for the same pair
        fee: Fee tier in parts-per-million (500, 3000, 10000)
        fee_protocol: Protocol fee share
        tick_lower: Lower tick of the pool's price range
        tick_upper: Upper tick of the pool's price range
        tick: Current tick
        sqrt_price_x96: Current sqrt price in Q64.96
        liquidity: Active liquidity
    """

    pool: str
    token0: str
    token1: str
    index: int
    fee: int
    fee_protocol: int
    tick_lower: int
    tick_upper: int
    tick: int
    sqrt_price_x96: int
    liquidity: int

    @classmethod
    def from_chain(cls, raw: Any) -> "PoolInfo":
        """Decode a getAllPools record."""
        return cls(
            pool=normalize_address(record_field(raw, "pool", 0)),
            token0=normalize_address(record_field(raw, "token0", 1)),
            token1=normalize_address(record_field(raw, "token1", 2)),
            index=int(record_field(raw, "index", 3)),
            fee=int(record_field(raw, "fee", 4)),
            fee_protocol=int(record_field(raw, "feeProtocol", 5)),
            tick_lower=int(record_field(raw, "tickLower", 6)),
            tick_upper=int(record_field(raw, "tickUpper", 7)),
            tick=int(record_field(raw, "tick", 8)),
            sqrt_price_x96=int(record_field(raw, "sqrtPriceX96", 9)),
            liquidity=int(record_field(raw, "liquidity", 10)),
        )

    @property
    def pair(self) -> tuple:
        return (self.token0, self.token1)

    @property
    def key(self) -> tuple:
        """Identity tuple shared with positions: (token0, token1, index)."""
        return (self.token0, self.token1, self.index)

    @property
    def price(self) -> Decimal:
        """Current token1/token0 price."""
        return sqrt_price_x96_to_price(self.sqrt_price_x96)


@dataclass(frozen=True)
class PairInfo:
    """A listed token pair."""

    token0: str
    token1: str

    @classmethod
    def from_chain(cls, raw: Any) -> "PairInfo":
        """Decode a getPairs record."""
        return cls(
            token0=normalize_address(record_field(raw, "token0", 0)),
            token1=normalize_address(record_field(raw, "token1", 1)),
        )


@dataclass(frozen=True)
class PoolSummary:
    """
    One row of the pools table.

    Attributes:
        pool: Pool address
        token: "SYM0(balance0) / SYM1(balance1)" label
        fee: Fee tier as a percentage string
        price_range: "lower ~ upper" price range
        current_price: Current token1/token0 price
        liquidity: Active liquidity
    """

    pool: str
    token: str
    fee: str
    price_range: str
    current_price: Decimal
    liquidity: int


def decode_pools(records: Sequence[Any]) -> list:
    return [PoolInfo.from_chain(record) for record in records or []]


def decode_pairs(records: Sequence[Any]) -> list:
    return [PairInfo.from_chain(record) for record in records or []]
