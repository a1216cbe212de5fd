"""
AMM math and display formatting.
"""

from .formatting import (
    format_address,
    format_fee_tier,
    format_price_for_ui,
    format_price_range,
    format_units,
    parse_units,
)
from .v3_math import (
    MAX_SQRT_RATIO,
    MAX_TICK,
    MIN_SQRT_RATIO,
    MIN_TICK,
    Q96,
    get_sqrt_ratio_at_tick,
    get_sqrt_ratios_for_range,
    get_tick_spacing,
    nearest_usable_tick,
    price_to_sqrt_price_x96,
    price_to_tick,
    sqrt_price_x96_to_price,
    tick_to_price,
)

__all__ = [
    "MAX_SQRT_RATIO",
    "MAX_TICK",
    "MIN_SQRT_RATIO",
    "MIN_TICK",
    "Q96",
    "format_address",
    "format_fee_tier",
    "format_price_for_ui",
    "format_price_range",
    "format_units",
    "get_sqrt_ratio_at_tick",
    "get_sqrt_ratios_for_range",
    "get_tick_spacing",
    "nearest_usable_tick",
    "parse_units",
    "price_to_sqrt_price_x96",
    "price_to_tick",
    "sqrt_price_x96_to_price",
    "tick_to_price",
]
