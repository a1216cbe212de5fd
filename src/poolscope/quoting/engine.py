"""
Quote engine.

Quotes a swap against every pool of a pair and picks the best one. Each pool
is quoted with its own router read; the reads run concurrently and a failed
read only marks its own pool with the direction's sentinel amount.
"""

import asyncio
import logging
import time
from typing import List, Optional

from eth_utils import is_hex_address, to_checksum_address

from ..amm.formatting import format_units, parse_units
from ..chain.abis import ERC20_ABI, SWAP_ROUTER_ABI
from ..chain.base import ChainReader, ContractCall
from ..errors import InvalidInputError, StaleQuoteError
from ..pools.pool_index import PoolIndex, canonicalize_pair
from ..pools.pool_types import PoolInfo
from .quote_types import (
    Quote,
    QuoteFailureReason,
    QuotePhase,
    QuoteRequest,
    QuoteResult,
    SwapDirection,
)
from .selection import select_best

logger = logging.getLogger(__name__)

BPS_DENOMINATOR = 10000


class QuoteEngine:
    """Stateless multi-pool quoting through the swap router."""

    def __init__(self, reader: ChainReader, pool_index: PoolIndex, router_address: str):
        self.reader = reader
        self.pool_index = pool_index
        self.router_address = router_address
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def validate_request(self, request: QuoteRequest) -> int:
        """
        Check a request and return the fixed amount in integer units.

        Raises:
            InvalidInputError: On bad addresses, identical tokens or a non-positive amount
        """
        for token in (request.token_in, request.token_out):
            if not token or not is_hex_address(token):
                raise InvalidInputError(f"Invalid token address: {token!r}")
        if request.token_in.lower() == request.token_out.lower():
            raise InvalidInputError("Input and output tokens must differ")

        amount = parse_units(request.amount, request.fixed_decimals)
        if amount <= 0:
            raise InvalidInputError(f"Amount must be positive, got: {request.amount!r}")
        return amount

    def _quote_params(self, request: QuoteRequest, pool: PoolInfo, amount: int) -> dict:
        amount_key = "amountIn" if request.direction is SwapDirection.EXACT_INPUT else "amountOut"
        return {
            "tokenIn": to_checksum_address(request.token_in),
            "tokenOut": to_checksum_address(request.token_out),
            "indexPath": [pool.index],
            amount_key: amount,
            "sqrtPriceLimitX96": pool.sqrt_price_x96,
        }

    async def quote_pool(self, request: QuoteRequest, pool: PoolInfo, amount: int) -> int:
        """
        Quote one pool.

        Raises:
            ChainError: If the router read fails
        """
        result = await self.reader.read_contract(
            self.router_address,
            SWAP_ROUTER_ABI,
            request.direction.quote_function,
            [self._quote_params(request, pool, amount)],
        )
        # Routers may return the amount alone or as the first of several outputs
        if isinstance(result, (tuple, list)):
            result = result[0]
        return int(result)

    async def quote(self, request: QuoteRequest) -> QuoteResult:
        """
        Quote a swap against every pool of the pair.

        Never raises for bad input or failed reads; the result carries the
        failure reason instead.
        """
        try:
            amount = self.validate_request(request)
        except InvalidInputError as e:
            self.logger.debug(f"Rejected quote request: {e}")
            return QuoteResult.failed(request, QuoteFailureReason.INVALID_INPUT, str(e))

        pools = await self.pool_index.find_pools_by_tokens(request.token_in, request.token_out)
        if not pools:
            self.logger.info(f"No pool for {request.token_in}/{request.token_out}")
            return QuoteResult.failed(request, QuoteFailureReason.NO_POOL, amount_specified=amount)

        results = await asyncio.gather(
            *(self.quote_pool(request, pool, amount) for pool in pools),
            return_exceptions=True,
        )

        candidates: List[Quote] = []
        for pool, result in zip(pools, results):
            if isinstance(result, Exception):
                self.logger.warning(f"Quote failed for pool {pool.pool} (index {pool.index}): {result}")
                candidates.append(
                    Quote(pool=pool, amount=request.direction.failed_amount, failed=True, error=str(result))
                )
            else:
                candidates.append(Quote(pool=pool, amount=result))

        best = select_best(request.direction, candidates)
        if best is None or best.failed:
            return QuoteResult.failed(
                request,
                QuoteFailureReason.ALL_QUOTES_FAILED,
                candidates=candidates,
                amount_specified=amount,
            )

        self.logger.debug(
            f"Best pool {best.pool.pool} (index {best.pool.index}) "
            f"amount {best.amount} of {len(candidates)} candidates"
        )
        return QuoteResult(
            request=request,
            amount_specified=amount,
            candidates=candidates,
            best=best,
        )


class QuoteSession:
    """
    Debounced quoting for one swap form.

    Phases run Idle -> Debouncing -> Quoting -> Settled. Every submit()
    starts a new generation and cancels the running cycle; a result is only
    applied when its generation is still the latest.
    """

    def __init__(
        self,
        engine: QuoteEngine,
        debounce_seconds: float = 0.3,
        deadline_seconds: int = 600,
        slippage_bps: int = 50,
    ):
        self.engine = engine
        self.debounce_seconds = debounce_seconds
        self.deadline_seconds = deadline_seconds
        self.slippage_bps = slippage_bps
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        self.phase = QuotePhase.IDLE
        self.result: Optional[QuoteResult] = None
        self.best_pool: Optional[PoolInfo] = None
        self.displayed_amount: Optional[str] = None
        self._generation = 0
        self._task: Optional[asyncio.Future] = None

    @classmethod
    def from_config(cls, engine: QuoteEngine, config) -> "QuoteSession":
        protocols = config.protocols
        return cls(
            engine,
            debounce_seconds=protocols.quote_debounce_seconds,
            deadline_seconds=protocols.SWAP_DEADLINE_SECONDS,
            slippage_bps=protocols.SLIPPAGE_BPS,
        )

    @property
    def generation(self) -> int:
        return self._generation

    def submit(self, request: QuoteRequest) -> asyncio.Future:
        """Start a new quote cycle for `request`, superseding any running one."""
        self._generation += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()

        self.phase = QuotePhase.DEBOUNCING
        self._task = asyncio.ensure_future(self._run(self._generation, request))
        return self._task

    async def wait(self) -> Optional[QuoteResult]:
        """Wait for the current cycle; returns the settled result, if any."""
        task = self._task
        if task is None:
            return self.result
        try:
            await task
        except asyncio.CancelledError:
            # Superseded by a newer submission, which becomes the current one
            if self._task is not task:
                return await self.wait()
            raise
        return self.result

    async def _run(self, generation: int, request: QuoteRequest) -> None:
        await asyncio.sleep(self.debounce_seconds)
        if generation != self._generation:
            return

        self.phase = QuotePhase.QUOTING
        result = await self.engine.quote(request)

        if generation != self._generation:
            self.logger.debug(f"Discarding quote of generation {generation}, latest is {self._generation}")
            return
        self._settle(result)

    def _settle(self, result: QuoteResult) -> None:
        self.result = result
        self.phase = QuotePhase.SETTLED
        if result.success:
            self.best_pool = result.best.pool
            self.displayed_amount = format_units(result.best.amount, result.request.solved_decimals)
        else:
            self.best_pool = None
            self.displayed_amount = None

    def reset(self) -> None:
        """Cancel any running cycle and return to Idle."""
        self._generation += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        self.phase = QuotePhase.IDLE
        self.result = None
        self.best_pool = None
        self.displayed_amount = None

    def validate_best_pool(self, token_in: str, token_out: str, direction: SwapDirection) -> PoolInfo:
        """
        Check that the retained best pool still fits the current inputs.

        Raises:
            StaleQuoteError: If nothing is settled or the pair or direction changed
        """
        if self.phase is not QuotePhase.SETTLED or self.result is None or self.best_pool is None:
            raise StaleQuoteError("No settled quote for the current inputs")

        request = self.result.request
        if request.direction is not direction:
            raise StaleQuoteError("Swap direction changed since the last quote")
        if (request.token_in.lower(), request.token_out.lower()) != (token_in.lower(), token_out.lower()):
            raise StaleQuoteError("Token pair changed since the last quote")
        if self.best_pool.pair != canonicalize_pair(token_in, token_out):
            raise StaleQuoteError("Best pool does not belong to the current pair")
        return self.best_pool

    def build_swap_calls(self, recipient: str, now: Optional[int] = None) -> List[ContractCall]:
        """
        Prepare the approve and swap calls for the settled quote.

        The approval covers the most token_in the swap may spend. The swap's
        bound on the solved side is the quote adjusted by the slippage
        tolerance.

        Raises:
            StaleQuoteError: If there is no settled, successful quote
            InvalidInputError: If the recipient is not a hex address
        """
        if self.result is None or not self.result.success:
            raise StaleQuoteError("No settled quote to swap against")
        if not recipient or not is_hex_address(recipient):
            raise InvalidInputError(f"Invalid recipient address: {recipient!r}")

        request = self.result.request
        pool = self.validate_best_pool(request.token_in, request.token_out, request.direction)
        amount = self.result.amount_specified
        quoted = self.result.best.amount
        deadline = (int(time.time()) if now is None else now) + self.deadline_seconds

        params = {
            "tokenIn": to_checksum_address(request.token_in),
            "tokenOut": to_checksum_address(request.token_out),
            "indexPath": [pool.index],
            "recipient": to_checksum_address(recipient),
            "deadline": deadline,
        }
        if request.direction is SwapDirection.EXACT_INPUT:
            params["amountIn"] = amount
            params["amountOutMinimum"] = quoted * (BPS_DENOMINATOR - self.slippage_bps) // BPS_DENOMINATOR
            spend = amount
        else:
            params["amountOut"] = amount
            max_in = -(-quoted * (BPS_DENOMINATOR + self.slippage_bps) // BPS_DENOMINATOR)
            params["amountInMaximum"] = max_in
            spend = max_in
        params["sqrtPriceLimitX96"] = pool.sqrt_price_x96

        router = self.engine.router_address
        approve = ContractCall(
            address=request.token_in,
            abi=ERC20_ABI,
            function_name="approve",
            args=(to_checksum_address(router), spend),
        )
        swap = ContractCall(
            address=router,
            abi=SWAP_ROUTER_ABI,
            function_name=request.direction.swap_function,
            args=(params,),
        )
        return [approve, swap]
