"""
Concentrated-liquidity fixed-point math.

Tick, price and sqrtPriceX96 conversions plus tick-spacing alignment.
All price arithmetic runs on `decimal.Decimal` with 50 significant digits;
sqrtPriceX96 and liquidity stay Python ints end-to-end.

Key concepts:
- Tick: logarithmic price coordinate where price = 1.0001^tick
- sqrtPriceX96: sqrt(token1/token0 price) in Q64.96 fixed-point format
- Tick spacing: only multiples of the fee tier's spacing are usable range
  boundaries
"""

from decimal import Decimal, InvalidOperation, ROUND_FLOOR, localcontext
from typing import Tuple, Union

from ..errors import FixedPointOverflowError, InvalidInputError

# Q96 constants
Q96 = 2**96
MAX_UINT160 = 2**160 - 1

MIN_TICK = -887272
MAX_TICK = 887272

TICK_BASE = Decimal("1.0001")
DECIMAL_PRECISION = 50

# Fee tier (parts-per-million) -> tick spacing
TICK_SPACINGS = {
    500: 10,
    3000: 60,
    10000: 200,
}

PriceLike = Union[Decimal, int, str, float]


def _validate_tick(tick: int) -> int:
    if isinstance(tick, bool) or not isinstance(tick, int):
        raise InvalidInputError(f"Tick must be an integer, got: {tick!r}")
    if tick < MIN_TICK or tick > MAX_TICK:
        raise InvalidInputError(f"Tick out of range: {tick} (range: {MIN_TICK} ~ {MAX_TICK})")
    return tick


def _to_decimal(value: PriceLike) -> Decimal:
    if isinstance(value, bool):
        raise InvalidInputError(f"Price must be numeric, got: {value!r}")
    try:
        if isinstance(value, float):
            result = Decimal(repr(value))
        else:
            result = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidInputError(f"Price must be numeric, got: {value!r}")
    if not result.is_finite():
        raise InvalidInputError(f"Price must be finite, got: {value!r}")
    return result


def _pow_tick(tick: int) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return TICK_BASE ** tick


def tick_to_price(tick: int) -> Decimal:
    """
    Calculate the price at a tick.

    Formula: price = 1.0001^tick

    Args:
        tick: Tick index (-887272 ~ 887272)

    Returns:
        Price of token0 in token1 as a 50-digit Decimal

    Raises:
        InvalidInputError: If the tick is not an integer in range
    """
    return _pow_tick(_validate_tick(tick))


def price_to_tick(price: PriceLike) -> int:
    """
    Calculate the greatest tick whose price does not exceed `price`.

    Formula: tick = floor(log(price) / log(1.0001))

    The logarithm gives an estimate that is then checked against
    tick_to_price, so exact tick prices map back to their own tick.

    Raises:
        InvalidInputError: If price is not positive or maps outside the tick range
    """
    value = _to_decimal(price)
    if value <= 0:
        raise InvalidInputError(f"Price must be positive, got: {price}")

    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        estimate = (value.ln() / TICK_BASE.ln()).to_integral_value(rounding=ROUND_FLOOR)

    tick = int(estimate)
    if tick < MIN_TICK - 1 or tick > MAX_TICK + 1:
        raise InvalidInputError(f"Price {price} maps outside the tick range")

    if _pow_tick(tick + 1) <= value:
        tick += 1
    elif _pow_tick(tick) > value:
        tick -= 1

    if tick < MIN_TICK or tick > MAX_TICK:
        raise InvalidInputError(f"Price {price} maps outside the tick range")
    return tick


def sqrt_price_x96_to_price(sqrt_price_x96: int) -> Decimal:
    """
    Convert sqrtPriceX96 to a token1/token0 price.

    Formula: price = (sqrtPriceX96 / 2^96)^2, evaluated as
    sqrtPriceX96^2 / 2^192 so powers of two divide exactly.

    Raises:
        InvalidInputError: If the value is not a non-negative integer
        FixedPointOverflowError: If the value does not fit in uint160
    """
    if isinstance(sqrt_price_x96, bool) or not isinstance(sqrt_price_x96, int):
        raise InvalidInputError(f"sqrtPriceX96 must be an integer, got: {sqrt_price_x96!r}")
    if sqrt_price_x96 < 0:
        raise InvalidInputError(f"sqrtPriceX96 must not be negative, got: {sqrt_price_x96}")
    if sqrt_price_x96 > MAX_UINT160:
        raise FixedPointOverflowError(f"sqrtPriceX96 exceeds uint160: {sqrt_price_x96}")

    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return Decimal(sqrt_price_x96 * sqrt_price_x96) / Decimal(Q96 * Q96)


def price_to_sqrt_price_x96(price: PriceLike) -> int:
    """
    Convert a token1/token0 price to sqrtPriceX96.

    Formula: sqrtPriceX96 = floor(sqrt(price) * 2^96)

    Raises:
        InvalidInputError: If price is not positive
        FixedPointOverflowError: If the result does not fit in uint160
    """
    value = _to_decimal(price)
    if value <= 0:
        raise InvalidInputError(f"Price must be positive, got: {price}")

    with localcontext() as ctx:
        ctx.prec = 80
        sqrt_price_x96 = int((value.sqrt() * Q96).to_integral_value(rounding=ROUND_FLOOR))

    if sqrt_price_x96 > MAX_UINT160:
        raise FixedPointOverflowError(f"sqrtPriceX96 for price {price} exceeds uint160")
    return sqrt_price_x96


# Q128.128 values of 1/sqrt(1.0001)^(2^i), for bit i of |tick|
_TICK_BIT_RATIOS = (
    0xFFFCB933BD6FAD37AA2D162D1A594001,
    0xFFF97272373D413259A46990580E213A,
    0xFFF2E50F5F656932EF12357CF3C7FDCC,
    0xFFE5CACA7E10E4E61C3624EAA0941CD0,
    0xFFCB9843D60F6159C9DB58835C926644,
    0xFF973B41FA98C081472E6896DFB254C0,
    0xFF2EA16466C96A3843EC78B326B52861,
    0xFE5DEE046A99A2A811C461F1969C3053,
    0xFCBE86C7900A88AEDCFFC83B479AA3A4,
    0xF987A7253AC413176F2B074CF7815E54,
    0xF3392B0822B70005940C7A398E4B70F3,
    0xE7159475A2C29B7443B29C7FA6E889D9,
    0xD097F3BDFD2022B8845AD8F792AA5825,
    0xA9F746462D870FDF8A65DC1F90E061E5,
    0x70D869A156D2A1B890BB3DF62BAF32F7,
    0x31BE135F97D08FD981231505542FCFA6,
    0x9AA508B5B7A84E1C677DE54F3E99BC9,
    0x5D6AF8DEDB81196699C329225EE604,
    0x2216E584F5FA1EA926041BEDFE98,
    0x48A170391F7DC42444E8FA2,
)
Q128 = 1 << 128
MAX_UINT256 = (1 << 256) - 1


def get_sqrt_ratio_at_tick(tick: int) -> int:
    """
    Calculate sqrtPriceX96 at a tick with integer-only math.

    Matches the on-chain TickMath result bit for bit, so range bounds agree
    with what the pool contract computes.

    Raises:
        InvalidInputError: If tick is not an integer in [MIN_TICK, MAX_TICK]
    """
    abs_tick = abs(_validate_tick(tick))

    ratio = Q128
    for bit, factor in enumerate(_TICK_BIT_RATIOS):
        if abs_tick >> bit & 1:
            ratio = ratio * factor >> 128

    if tick > 0:
        ratio = MAX_UINT256 // ratio

    # Q128.128 -> Q64.96, rounding up
    return (ratio >> 32) + (1 if ratio % (1 << 32) else 0)


# Valid sqrtPriceX96 values lie in [MIN_SQRT_RATIO, MAX_SQRT_RATIO)
MIN_SQRT_RATIO = get_sqrt_ratio_at_tick(MIN_TICK)
MAX_SQRT_RATIO = get_sqrt_ratio_at_tick(MAX_TICK)


def get_sqrt_ratios_for_range(tick_lower: int, tick_upper: int) -> Tuple[int, int]:
    """
    sqrtPriceX96 bounds of a tick range.

    Raises:
        InvalidInputError: If either tick is invalid or tick_lower >= tick_upper
    """
    if tick_lower >= tick_upper:
        raise InvalidInputError(f"Invalid tick range: {tick_lower} >= {tick_upper}")
    return get_sqrt_ratio_at_tick(tick_lower), get_sqrt_ratio_at_tick(tick_upper)


def nearest_usable_tick(tick: int, spacing: int) -> int:
    """
    Round a tick to the nearest multiple of `spacing`.

    Ties round toward positive infinity. A result outside the tick range is
    moved one spacing back inside it.

    Raises:
        InvalidInputError: If spacing is not a positive integer or tick is out of range
    """
    _validate_tick(tick)
    if isinstance(spacing, bool) or not isinstance(spacing, int) or spacing <= 0:
        raise InvalidInputError(f"Tick spacing must be a positive integer, got: {spacing!r}")

    rounded = (tick + spacing // 2) // spacing * spacing
    if rounded < MIN_TICK:
        rounded += spacing
    elif rounded > MAX_TICK:
        rounded -= spacing
    return rounded


def get_tick_spacing(fee: int) -> int:
    """
    Look up the tick spacing for a fee tier.

    Raises:
        InvalidInputError: If the fee tier is not supported
    """
    try:
        return TICK_SPACINGS[fee]
    except (KeyError, TypeError):
        raise InvalidInputError(
            f"Unsupported fee tier: {fee} (supported: {sorted(TICK_SPACINGS)})"
        )
