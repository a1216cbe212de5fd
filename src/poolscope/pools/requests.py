"""
Pool creation requests.

The UI layer fills a CreatePoolParams from its form and passes it in as
plain typed values; validation happens here before anything is submitted.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from eth_utils import is_hex_address, to_checksum_address

from ..amm.v3_math import (
    MAX_SQRT_RATIO,
    MAX_TICK,
    MIN_SQRT_RATIO,
    MIN_TICK,
    get_tick_spacing,
    nearest_usable_tick,
    price_to_sqrt_price_x96,
    price_to_tick,
)
from ..chain.abis import POOL_MANAGER_ABI
from ..chain.base import ContractCall
from ..errors import InvalidInputError


@dataclass(frozen=True)
class CreatePoolParams:
    """
    Validated pool creation input.

    Prices and ticks are expressed in the caller's token order: the price is
    token_b per token_a.

    Attributes:
        token_a: First token address as entered
        token_b: Second token address as entered
        fee: Fee tier in parts-per-million
        tick_lower: Lower range tick, aligned to the fee's tick spacing
        tick_upper: Upper range tick, aligned to the fee's tick spacing
        initial_price: Starting price of token_b in token_a
    """

    token_a: str
    token_b: str
    fee: int
    tick_lower: int
    tick_upper: int
    initial_price: Decimal

    def __post_init__(self):
        for token in (self.token_a, self.token_b):
            if not token or not token.startswith("0x") or not is_hex_address(token):
                raise InvalidInputError(f"Token address must be a 0x-prefixed hex address: {token!r}")
        if self.token_a.lower() == self.token_b.lower():
            raise InvalidInputError("Pool tokens must be different")

        spacing = get_tick_spacing(self.fee)

        for tick in (self.tick_lower, self.tick_upper):
            if isinstance(tick, bool) or not isinstance(tick, int):
                raise InvalidInputError(f"Tick must be an integer, got: {tick!r}")
            if tick < MIN_TICK or tick > MAX_TICK:
                raise InvalidInputError(f"Tick out of range: {tick}")
            if tick % spacing:
                raise InvalidInputError(f"Tick {tick} is not a multiple of spacing {spacing}")
        if self.tick_lower >= self.tick_upper:
            raise InvalidInputError(
                f"tick_lower must be below tick_upper: {self.tick_lower} >= {self.tick_upper}"
            )

        if Decimal(self.initial_price) <= 0:
            raise InvalidInputError(f"Initial price must be positive, got: {self.initial_price}")

    @classmethod
    def from_prices(
        cls,
        token_a: str,
        token_b: str,
        fee: int,
        price_lower: Union[Decimal, str],
        price_upper: Union[Decimal, str],
        initial_price: Union[Decimal, str],
    ) -> "CreatePoolParams":
        """Build params from a price range, snapping both bounds to usable ticks."""
        spacing = get_tick_spacing(fee)
        tick_lower = nearest_usable_tick(price_to_tick(price_lower), spacing)
        tick_upper = nearest_usable_tick(price_to_tick(price_upper), spacing)
        if tick_lower == tick_upper:
            tick_upper += spacing
        return cls(
            token_a=token_a,
            token_b=token_b,
            fee=fee,
            tick_lower=tick_lower,
            tick_upper=tick_upper,
            initial_price=Decimal(initial_price),
        )

    @property
    def is_reversed(self) -> bool:
        """True when token_a is not the canonical token0."""
        return self.token_a.lower() > self.token_b.lower()


def build_create_pool_call(params: CreatePoolParams, pool_manager_address: str) -> ContractCall:
    """
    Prepare createAndInitializePoolIfNecessary in canonical token order.

    When the caller's order is reversed the range is mirrored
    (ticks negated and swapped) and the initial price inverted, so the pool
    is created at the same economic price.

    Raises:
        InvalidInputError: If the initial price maps outside [MIN_TICK, MAX_TICK]
    """
    price = Decimal(params.initial_price)
    tick_lower, tick_upper = params.tick_lower, params.tick_upper
    token0, token1 = params.token_a, params.token_b

    if params.is_reversed:
        token0, token1 = token1, token0
        tick_lower, tick_upper = -params.tick_upper, -params.tick_lower
        price = Decimal(1) / price

    sqrt_price_x96 = price_to_sqrt_price_x96(price)
    if not MIN_SQRT_RATIO <= sqrt_price_x96 < MAX_SQRT_RATIO:
        raise InvalidInputError(f"Initial price {params.initial_price} is outside the representable tick range")

    create_params = {
        "token0": to_checksum_address(token0),
        "token1": to_checksum_address(token1),
        "fee": params.fee,
        "tickLower": tick_lower,
        "tickUpper": tick_upper,
        "sqrtPriceX96": sqrt_price_x96,
    }

    return ContractCall(
        address=pool_manager_address,
        abi=POOL_MANAGER_ABI,
        function_name="createAndInitializePoolIfNecessary",
        args=(create_params,),
    )
