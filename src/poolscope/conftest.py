"""
Shared pytest fixtures for poolscope tests.
"""

import inspect

import pytest

from poolscope.chain.base import ChainReader
from poolscope.chain.errors import RemoteCallError
from poolscope.pools.pool_types import PoolInfo

TOKEN_A = "0x" + "a" * 40
TOKEN_B = "0x" + "b" * 40
TOKEN_C = "0x" + "c" * 40
OWNER = "0x" + "d" * 40
POOL_MANAGER = "0x" + "1" * 40
POSITION_MANAGER = "0x" + "2" * 40
ROUTER = "0x" + "3" * 40

Q96 = 2**96


class FakeChainReader(ChainReader):
    """
    ChainReader that answers from a table and records every call.

    Responses are keyed by (address, function_name) or by function_name
    alone. A response can be a value, an exception to raise, or a callable
    (sync or async) receiving (address, *args).
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    async def read_contract(self, address, abi, function_name, args=()):
        self.calls.append((address.lower(), function_name, tuple(args)))

        key = (address.lower(), function_name)
        if key in self.responses:
            response = self.responses[key]
        elif function_name in self.responses:
            response = self.responses[function_name]
        else:
            raise RemoteCallError(f"{function_name} not stubbed", function_name)

        if isinstance(response, Exception):
            raise response
        if callable(response):
            response = response(address, *args)
            if inspect.isawaitable(response):
                response = await response
        return response

    def calls_to(self, function_name):
        return [call for call in self.calls if call[1] == function_name]


def make_pool(
    index=0,
    token0=TOKEN_A,
    token1=TOKEN_B,
    fee=3000,
    pool=None,
    tick=0,
    tick_lower=-600,
    tick_upper=600,
    sqrt_price_x96=Q96,
    liquidity=10**18,
):
    return PoolInfo(
        pool=pool or "0x" + f"{index + 1:040x}",
        token0=token0,
        token1=token1,
        index=index,
        fee=fee,
        fee_protocol=0,
        tick_lower=tick_lower,
        tick_upper=tick_upper,
        tick=tick,
        sqrt_price_x96=sqrt_price_x96,
        liquidity=liquidity,
    )


def pool_record(pool: PoolInfo) -> tuple:
    """Encode a PoolInfo the way getAllPools returns it."""
    return (
        pool.pool,
        pool.token0,
        pool.token1,
        pool.index,
        pool.fee,
        pool.fee_protocol,
        pool.tick_lower,
        pool.tick_upper,
        pool.tick,
        pool.sqrt_price_x96,
        pool.liquidity,
    )


@pytest.fixture
def fake_reader():
    """Factory for FakeChainReader instances."""
    return FakeChainReader


@pytest.fixture
def two_pools():
    """Two A/B pools with different fee tiers."""
    return [make_pool(index=0, fee=3000), make_pool(index=1, fee=500)]
