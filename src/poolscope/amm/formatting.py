"""
Display formatting for prices, ranges, fee tiers, addresses and token amounts.

These strings are a display contract only; nothing here feeds back into a
numeric computation path.
"""

from decimal import Decimal, InvalidOperation, ROUND_DOWN, ROUND_HALF_UP, localcontext
from typing import Union

from ..errors import InvalidInputError
from .v3_math import tick_to_price

MIN_DISPLAY_PRICE = Decimal("0.000001")
MAX_DISPLAY_PRICE = Decimal("1000000")
PRICE_DISPLAY_PLACES = Decimal("0.000001")

# Fee tiers are parts-per-million; fee / 10^4 is the percentage
FEE_PERCENT_DIVISOR = Decimal(10000)


def _strip_zeros(text: str) -> str:
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_price_for_ui(price: Union[Decimal, int, str]) -> str:
    """
    Format a price for display.

    Prices below 1e-6 collapse to "0", prices above 1e6 to "∞"; anything
    else gets 6 decimal places with trailing zeros stripped.
    """
    value = Decimal(price)
    if value.is_zero() or value < MIN_DISPLAY_PRICE:
        return "0"
    if value > MAX_DISPLAY_PRICE:
        return "∞"
    return _strip_zeros(f"{value.quantize(PRICE_DISPLAY_PLACES, rounding=ROUND_HALF_UP):f}")


def format_price_range(tick_lower: int, tick_upper: int) -> str:
    """Format a tick range as "lower ~ upper" prices."""
    lower = format_price_for_ui(tick_to_price(tick_lower))
    upper = format_price_for_ui(tick_to_price(tick_upper))
    return f"{lower} ~ {upper}"


def format_fee_tier(fee: int) -> str:
    """Format a parts-per-million fee tier as a percentage (3000 -> "0.3%")."""
    percent = Decimal(fee) / FEE_PERCENT_DIVISOR
    return f"{_strip_zeros(f'{percent:f}')}%"


def format_address(address: str, start: int = 6, end: int = 4) -> str:
    """Shorten an address to "0x1234...abcd"."""
    if not address:
        return ""
    return f"{address[:start]}...{address[-end:]}"


def format_units(amount: int, decimals: int = 18) -> str:
    """Render an integer token amount in whole-token units."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidInputError(f"Amount must be an integer, got: {amount!r}")
    with localcontext() as ctx:
        ctx.prec = 100
        value = Decimal(amount).scaleb(-decimals)
    return _strip_zeros(f"{value:f}")


def parse_units(text: Union[str, Decimal, int], decimals: int = 18) -> int:
    """
    Parse a typed token amount into integer units.

    Digits beyond `decimals` places are truncated.

    Raises:
        InvalidInputError: If the text is not a finite, non-negative number
    """
    try:
        value = Decimal(str(text).strip()) if not isinstance(text, Decimal) else text
    except InvalidOperation:
        raise InvalidInputError(f"Invalid amount: {text!r}")
    if not value.is_finite() or value < 0:
        raise InvalidInputError(f"Invalid amount: {text!r}")

    with localcontext() as ctx:
        ctx.prec = 100
        return int(value.scaleb(decimals).to_integral_value(rounding=ROUND_DOWN))
