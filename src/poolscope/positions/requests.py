"""
Position manager and test token write requests.

Builders return ContractCall values; submission belongs to the wallet layer.
"""

import time
from typing import Iterable, List, Optional

from eth_utils import is_hex_address, to_checksum_address

from ..chain.abis import POSITION_MANAGER_ABI, TEST_TOKEN_ABI
from ..chain.base import ContractCall
from ..errors import InvalidInputError
from ..pools.pool_types import PoolInfo

DEFAULT_DEADLINE_SECONDS = 600

# 10000 tokens at 18 decimals
DEFAULT_FAUCET_AMOUNT = 10000 * 10**18


def _require_address(address: str, what: str) -> str:
    if not address or not is_hex_address(address):
        raise InvalidInputError(f"Invalid {what} address: {address!r}")
    return to_checksum_address(address)


def _require_amount(amount: int, what: str) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
        raise InvalidInputError(f"{what} must be a non-negative integer, got: {amount!r}")
    return amount


def build_mint_call(
    position_manager_address: str,
    pool: PoolInfo,
    amount0_desired: int,
    amount1_desired: int,
    recipient: str,
    deadline_seconds: int = DEFAULT_DEADLINE_SECONDS,
    now: Optional[int] = None,
) -> ContractCall:
    """
    Prepare a mint into `pool`.

    Raises:
        InvalidInputError: On a bad recipient or negative amounts
    """
    _require_amount(amount0_desired, "amount0_desired")
    _require_amount(amount1_desired, "amount1_desired")
    if amount0_desired == 0 and amount1_desired == 0:
        raise InvalidInputError("Mint needs a non-zero amount of at least one token")

    now = int(time.time()) if now is None else now
    params = {
        "token0": to_checksum_address(pool.token0),
        "token1": to_checksum_address(pool.token1),
        "index": pool.index,
        "amount0Desired": amount0_desired,
        "amount1Desired": amount1_desired,
        "recipient": _require_address(recipient, "recipient"),
        "deadline": now + deadline_seconds,
    }
    return ContractCall(
        address=position_manager_address,
        abi=POSITION_MANAGER_ABI,
        function_name="mint",
        args=(params,),
    )


def build_burn_call(position_manager_address: str, position_id: int) -> ContractCall:
    return ContractCall(
        address=position_manager_address,
        abi=POSITION_MANAGER_ABI,
        function_name="burn",
        args=(_require_amount(position_id, "position_id"),),
    )


def build_collect_call(position_manager_address: str, position_id: int, recipient: str) -> ContractCall:
    """Prepare collection of a position's owed tokens to `recipient`."""
    return ContractCall(
        address=position_manager_address,
        abi=POSITION_MANAGER_ABI,
        function_name="collect",
        args=(_require_amount(position_id, "position_id"), _require_address(recipient, "recipient")),
    )


def build_faucet_mint_calls(
    tokens: Iterable[str],
    recipient: str,
    amount: int = DEFAULT_FAUCET_AMOUNT,
) -> List[ContractCall]:
    """
    Prepare one test token mint per token, each to `recipient`.

    The calls are independent; submit them with ChainWriter.write_all so a
    failing token does not block the rest.

    Raises:
        InvalidInputError: On a bad token or recipient address, or a
            non-positive amount
    """
    recipient = _require_address(recipient, "recipient")
    if _require_amount(amount, "amount") == 0:
        raise InvalidInputError("Faucet amount must be positive")

    return [
        ContractCall(
            address=_require_address(token, "token"),
            abi=TEST_TOKEN_ABI,
            function_name="mint",
            args=(recipient, amount),
        )
        for token in tokens
    ]
