"""
Tests for the quote engine and the debounced quote session.
"""

import asyncio
import logging

import pytest
from eth_utils import to_checksum_address

from poolscope.chain.abis import ERC20_ABI, SWAP_ROUTER_ABI
from poolscope.chain.errors import ContractError
from poolscope.conftest import OWNER, POOL_MANAGER, ROUTER, TOKEN_A, TOKEN_B, TOKEN_C, make_pool
from poolscope.errors import InvalidInputError, StaleQuoteError
from poolscope.pools.pool_index import PoolIndex
from poolscope.quoting.engine import QuoteEngine, QuoteSession
from poolscope.quoting.quote_types import (
    QuoteFailureReason,
    QuotePhase,
    QuoteRequest,
    SwapDirection,
)

P1 = make_pool(index=1, fee=3000, sqrt_price_x96=2**96 + 1)
P2 = make_pool(index=2, fee=500, sqrt_price_x96=2**96 + 2)


def by_index(answers):
    """Router response that answers per pool index; exceptions are raised."""

    def respond(address, params):
        answer = answers[params["indexPath"][0]]
        if isinstance(answer, Exception):
            raise answer
        return answer

    return respond


def make_engine(fake_reader, responses, pools=(P1, P2)):
    reader = fake_reader(responses)
    index = PoolIndex(reader, POOL_MANAGER, list(pools))
    return QuoteEngine(reader, index, ROUTER), reader


class TestQuoteValidation:
    """Bad input is rejected before any remote call."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "token_in,token_out,amount",
        [
            ("0x123", TOKEN_B, "1"),
            (TOKEN_A, "", "1"),
            (TOKEN_A, TOKEN_A.upper().replace("0X", "0x"), "1"),
            (TOKEN_A, TOKEN_B, "0"),
            (TOKEN_A, TOKEN_B, "-1"),
            (TOKEN_A, TOKEN_B, "abc"),
            (TOKEN_A, TOKEN_B, "0.0000000000000000001"),
        ],
    )
    async def test_invalid_input(self, fake_reader, token_in, token_out, amount):
        engine, reader = make_engine(fake_reader, {})

        result = await engine.quote(QuoteRequest(token_in, token_out, amount))

        assert result.failure is QuoteFailureReason.INVALID_INPUT
        assert not result.success
        assert result.message
        assert reader.calls == []

    def test_validate_request_returns_units(self, fake_reader):
        engine, _ = make_engine(fake_reader, {})
        request = QuoteRequest(TOKEN_A, TOKEN_B, "1.5", decimals_in=6)
        assert engine.validate_request(request) == 1500000

    def test_validate_uses_output_decimals_for_exact_output(self, fake_reader):
        engine, _ = make_engine(fake_reader, {})
        request = QuoteRequest(TOKEN_A, TOKEN_B, "2", SwapDirection.EXACT_OUTPUT, decimals_in=18, decimals_out=6)
        assert engine.validate_request(request) == 2000000

    def test_validate_raises(self, fake_reader):
        engine, _ = make_engine(fake_reader, {})
        with pytest.raises(InvalidInputError):
            engine.validate_request(QuoteRequest(TOKEN_A, TOKEN_B, "0"))


class TestQuoteEngine:

    @pytest.mark.asyncio
    async def test_no_pool(self, fake_reader):
        engine, reader = make_engine(fake_reader, {"getAllPools": []})

        result = await engine.quote(QuoteRequest(TOKEN_A, TOKEN_C, "1"))

        assert result.failure is QuoteFailureReason.NO_POOL
        assert result.candidates == []
        assert reader.calls_to("quoteExactInput") == []

    @pytest.mark.asyncio
    async def test_exact_input_skips_failed_pool(self, fake_reader, caplog):
        answers = {1: ContractError("quote reverted", "quoteExactInput"), 2: 100}
        engine, reader = make_engine(fake_reader, {(ROUTER, "quoteExactInput"): by_index(answers)})

        with caplog.at_level(logging.WARNING):
            result = await engine.quote(QuoteRequest(TOKEN_A, TOKEN_B, "1"))

        assert result.success
        assert result.best.pool is P2
        assert result.best.amount == 100
        assert result.best_pool is P2
        failed = [q for q in result.candidates if q.failed]
        assert len(failed) == 1
        assert failed[0].pool is P1
        assert failed[0].amount == 0
        assert len(reader.calls_to("quoteExactInput")) == 2
        assert "Quote failed for pool" in caplog.text

    @pytest.mark.asyncio
    async def test_exact_output_skips_failed_pool(self, fake_reader):
        answers = {1: ContractError("quote reverted", "quoteExactOutput"), 2: 50}
        engine, _ = make_engine(fake_reader, {(ROUTER, "quoteExactOutput"): by_index(answers)})

        result = await engine.quote(QuoteRequest(TOKEN_B, TOKEN_A, "1", SwapDirection.EXACT_OUTPUT))

        assert result.success
        assert result.best.pool is P2
        assert result.best.amount == 50
        assert [q.amount for q in result.candidates if q.failed] == [2**256 - 1]

    @pytest.mark.asyncio
    async def test_best_of_several(self, fake_reader):
        engine, _ = make_engine(fake_reader, {"quoteExactInput": by_index({1: 120, 2: 100})})

        result = await engine.quote(QuoteRequest(TOKEN_A, TOKEN_B, "1"))

        assert result.best.pool is P1
        assert len(result.candidates) == 2

    @pytest.mark.asyncio
    async def test_all_failed(self, fake_reader):
        error = ContractError("quote reverted", "quoteExactInput")
        engine, _ = make_engine(fake_reader, {"quoteExactInput": error})

        result = await engine.quote(QuoteRequest(TOKEN_A, TOKEN_B, "1"))

        assert result.failure is QuoteFailureReason.ALL_QUOTES_FAILED
        assert result.best is None
        assert result.best_pool is None
        assert len(result.candidates) == 2
        assert all(q.failed for q in result.candidates)

    @pytest.mark.asyncio
    async def test_failed_pool_loses_tie_with_zero_quote(self, fake_reader):
        answers = {1: ContractError("quote reverted", "quoteExactInput"), 2: 0}
        engine, _ = make_engine(fake_reader, {"quoteExactInput": by_index(answers)})

        result = await engine.quote(QuoteRequest(TOKEN_A, TOKEN_B, "0.000000000000000001"))

        assert result.success
        assert result.failure is None
        assert result.best.pool is P2
        assert result.best.amount == 0

    @pytest.mark.asyncio
    async def test_quote_call_params(self, fake_reader):
        engine, reader = make_engine(fake_reader, {"quoteExactInput": 1}, pools=[P1])

        await engine.quote(QuoteRequest(TOKEN_B, TOKEN_A, "1.5", decimals_in=6))

        ((address, function_name, args),) = reader.calls_to("quoteExactInput")
        assert address == ROUTER
        (params,) = args
        assert params == {
            "tokenIn": to_checksum_address(TOKEN_B),
            "tokenOut": to_checksum_address(TOKEN_A),
            "indexPath": [1],
            "amountIn": 1500000,
            "sqrtPriceLimitX96": P1.sqrt_price_x96,
        }

    @pytest.mark.asyncio
    async def test_tuple_result_unwrapped(self, fake_reader):
        engine, _ = make_engine(fake_reader, {"quoteExactInput": (77, 0, 0)}, pools=[P1])

        result = await engine.quote(QuoteRequest(TOKEN_A, TOKEN_B, "1"))

        assert result.best.amount == 77


class GatedRouter:
    """Router stub whose answers wait on a per-call gate."""

    def __init__(self, amounts):
        self.amounts = list(amounts)
        self.gates = []
        self.requests = []

    async def __call__(self, address, params):
        gate = asyncio.Event()
        self.gates.append(gate)
        self.requests.append(params)
        amount = self.amounts[len(self.gates) - 1]
        await gate.wait()
        return amount


async def wait_for_calls(router, count):
    for _ in range(200):
        if len(router.gates) >= count:
            return
        await asyncio.sleep(0.005)
    raise AssertionError(f"expected {count} router calls, saw {len(router.gates)}")


class UncancellableEngine:
    """Engine wrapper whose quotes run to completion even when cancelled."""

    def __init__(self, engine):
        self.engine = engine

    async def quote(self, request):
        inner = asyncio.ensure_future(self.engine.quote(request))
        while True:
            try:
                return await asyncio.shield(inner)
            except asyncio.CancelledError:
                continue


class TestQuoteSession:
    """Debouncing, stale-result suppression and swap preparation."""

    @pytest.fixture
    def request_1(self):
        return QuoteRequest(TOKEN_A, TOKEN_B, "1")

    @pytest.fixture
    def request_2(self):
        return QuoteRequest(TOKEN_A, TOKEN_B, "2")

    @pytest.mark.asyncio
    async def test_phases_and_display(self, fake_reader, request_1):
        engine, _ = make_engine(fake_reader, {"quoteExactInput": 15 * 10**17}, pools=[P1])
        session = QuoteSession(engine, debounce_seconds=0.01)

        assert session.phase is QuotePhase.IDLE
        session.submit(request_1)
        assert session.phase is QuotePhase.DEBOUNCING

        result = await session.wait()

        assert result.success
        assert session.phase is QuotePhase.SETTLED
        assert session.best_pool is P1
        assert session.displayed_amount == "1.5"

    @pytest.mark.asyncio
    async def test_debounce_coalesces_submissions(self, fake_reader, request_1, request_2):
        engine, reader = make_engine(fake_reader, {"quoteExactInput": 1}, pools=[P1])
        session = QuoteSession(engine, debounce_seconds=0.05)

        session.submit(request_1)
        session.submit(request_1)
        session.submit(request_2)
        result = await session.wait()

        assert result.request is request_2
        assert len(reader.calls_to("quoteExactInput")) == 1
        assert session.generation == 3

    @pytest.mark.asyncio
    async def test_stale_result_suppressed(self, fake_reader, request_1, request_2):
        router = GatedRouter([111, 222])
        engine, _ = make_engine(fake_reader, {"quoteExactInput": router}, pools=[P1])
        session = QuoteSession(engine, debounce_seconds=0.01)

        session.submit(request_1)
        await wait_for_calls(router, 1)
        assert session.phase is QuotePhase.QUOTING

        session.submit(request_2)
        router.gates[0].set()
        await wait_for_calls(router, 2)
        router.gates[1].set()
        result = await session.wait()

        assert result.request is request_2
        assert result.best.amount == 222
        assert session.result is result
        assert session.displayed_amount == "0.000000000000000222"

    @pytest.mark.asyncio
    async def test_late_response_of_superseded_cycle_discarded(self, fake_reader, request_1, request_2, caplog):
        router = GatedRouter([111, 222])
        engine, _ = make_engine(fake_reader, {"quoteExactInput": router}, pools=[P1])
        session = QuoteSession(UncancellableEngine(engine), debounce_seconds=0.01)

        first = session.submit(request_1)
        await wait_for_calls(router, 1)
        session.submit(request_2)
        await wait_for_calls(router, 2)

        router.gates[1].set()
        result = await session.wait()
        assert result.best.amount == 222

        with caplog.at_level(logging.DEBUG, logger="poolscope.quoting.engine"):
            router.gates[0].set()
            await first

        assert not first.cancelled()
        assert session.result is result
        assert session.best_pool is P1
        assert session.displayed_amount == "0.000000000000000222"
        assert "Discarding quote of generation 1" in caplog.text

    @pytest.mark.asyncio
    async def test_failed_quote_clears_best_pool(self, fake_reader, request_1):
        engine, _ = make_engine(
            fake_reader, {"quoteExactInput": ContractError("reverted", "quoteExactInput")}, pools=[P1]
        )
        session = QuoteSession(engine, debounce_seconds=0)

        session.submit(request_1)
        result = await session.wait()

        assert result.failure is QuoteFailureReason.ALL_QUOTES_FAILED
        assert session.best_pool is None
        assert session.displayed_amount is None
        assert session.phase is QuotePhase.SETTLED

    @pytest.mark.asyncio
    async def test_reset(self, fake_reader, request_1):
        engine, reader = make_engine(fake_reader, {"quoteExactInput": 1}, pools=[P1])
        session = QuoteSession(engine, debounce_seconds=0.05)

        task = session.submit(request_1)
        session.reset()
        await asyncio.sleep(0.1)

        assert task.cancelled()
        assert session.phase is QuotePhase.IDLE
        assert session.result is None
        assert reader.calls_to("quoteExactInput") == []

    @pytest.mark.asyncio
    async def test_validate_best_pool(self, fake_reader, request_1):
        engine, _ = make_engine(fake_reader, {"quoteExactInput": 1}, pools=[P1])
        session = QuoteSession(engine, debounce_seconds=0)

        with pytest.raises(StaleQuoteError):
            session.validate_best_pool(TOKEN_A, TOKEN_B, SwapDirection.EXACT_INPUT)

        session.submit(request_1)
        await session.wait()

        assert session.validate_best_pool(TOKEN_A, TOKEN_B, SwapDirection.EXACT_INPUT) is P1
        with pytest.raises(StaleQuoteError, match="direction"):
            session.validate_best_pool(TOKEN_A, TOKEN_B, SwapDirection.EXACT_OUTPUT)
        with pytest.raises(StaleQuoteError, match="pair"):
            session.validate_best_pool(TOKEN_A, TOKEN_C, SwapDirection.EXACT_INPUT)
        with pytest.raises(StaleQuoteError, match="pair"):
            session.validate_best_pool(TOKEN_B, TOKEN_A, SwapDirection.EXACT_INPUT)

    @pytest.mark.asyncio
    async def test_build_exact_input_swap(self, fake_reader):
        engine, _ = make_engine(fake_reader, {"quoteExactInput": 10000}, pools=[P1])
        session = QuoteSession(engine, debounce_seconds=0, deadline_seconds=600, slippage_bps=50)
        session.submit(QuoteRequest(TOKEN_A, TOKEN_B, "1"))
        await session.wait()

        approve, swap = session.build_swap_calls(OWNER, now=1000)

        assert approve.address == TOKEN_A
        assert approve.abi is ERC20_ABI
        assert approve.function_name == "approve"
        assert approve.args == (to_checksum_address(ROUTER), 10**18)

        assert swap.address == ROUTER
        assert swap.abi is SWAP_ROUTER_ABI
        assert swap.function_name == "exactInput"
        (params,) = swap.args
        assert params["recipient"] == to_checksum_address(OWNER)
        assert params["deadline"] == 1600
        assert params["indexPath"] == [1]
        assert params["amountIn"] == 10**18
        assert params["amountOutMinimum"] == 9950
        assert params["sqrtPriceLimitX96"] == P1.sqrt_price_x96

    @pytest.mark.asyncio
    async def test_build_exact_output_swap(self, fake_reader):
        engine, _ = make_engine(fake_reader, {"quoteExactOutput": 10001}, pools=[P1])
        session = QuoteSession(engine, debounce_seconds=0, slippage_bps=50)
        session.submit(QuoteRequest(TOKEN_A, TOKEN_B, "2", SwapDirection.EXACT_OUTPUT))
        await session.wait()

        approve, swap = session.build_swap_calls(OWNER, now=0)

        (params,) = swap.args
        assert swap.function_name == "exactOutput"
        assert params["amountOut"] == 2 * 10**18
        # ceil(10001 * 1.005)
        assert params["amountInMaximum"] == 10052
        assert approve.args[1] == 10052

    @pytest.mark.asyncio
    async def test_build_without_quote(self, fake_reader):
        engine, _ = make_engine(fake_reader, {})
        session = QuoteSession(engine)

        with pytest.raises(StaleQuoteError):
            session.build_swap_calls(OWNER)

    def test_from_config(self, fake_reader):
        engine, _ = make_engine(fake_reader, {})

        class Protocols:
            quote_debounce_seconds = 0.3
            SWAP_DEADLINE_SECONDS = 600
            SLIPPAGE_BPS = 25

        class Config:
            protocols = Protocols()

        session = QuoteSession.from_config(engine, Config())

        assert session.debounce_seconds == 0.3
        assert session.slippage_bps == 25
