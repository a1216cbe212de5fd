"""Liquidity positions: loading, resolution against pools, and write requests."""

from .position_book import PositionBook, decode_positions
from .position_types import PositionInfo, PositionView
from .requests import build_burn_call, build_collect_call, build_faucet_mint_calls, build_mint_call
from .resolver import PositionResolver

__all__ = [
    "PositionBook",
    "decode_positions",
    "PositionInfo",
    "PositionView",
    "PositionResolver",
    "build_burn_call",
    "build_collect_call",
    "build_faucet_mint_calls",
    "build_mint_call",
]
