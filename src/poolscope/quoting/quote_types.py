"""
Core types for swap quoting.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..pools.pool_types import PoolInfo

# Sentinel amounts for failed quotes; each always loses selection
FAILED_EXACT_INPUT_AMOUNT = 0
FAILED_EXACT_OUTPUT_AMOUNT = 2**256 - 1


class SwapDirection(Enum):
    """Which side of the swap the user fixed."""

    EXACT_INPUT = "exact_input"
    EXACT_OUTPUT = "exact_output"

    @property
    def failed_amount(self) -> int:
        if self is SwapDirection.EXACT_INPUT:
            return FAILED_EXACT_INPUT_AMOUNT
        return FAILED_EXACT_OUTPUT_AMOUNT

    @property
    def quote_function(self) -> str:
        if self is SwapDirection.EXACT_INPUT:
            return "quoteExactInput"
        return "quoteExactOutput"

    @property
    def swap_function(self) -> str:
        if self is SwapDirection.EXACT_INPUT:
            return "exactInput"
        return "exactOutput"


class QuotePhase(Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    QUOTING = "quoting"
    SETTLED = "settled"


class QuoteFailureReason(Enum):
    NO_POOL = "no_pool"
    INVALID_INPUT = "invalid_input"
    ALL_QUOTES_FAILED = "all_quotes_failed"


FAILURE_MESSAGES = {
    QuoteFailureReason.NO_POOL: "No pool exists for this token pair",
    QuoteFailureReason.INVALID_INPUT: "Invalid swap input",
    QuoteFailureReason.ALL_QUOTES_FAILED: "No pool could quote this swap",
}


@dataclass(frozen=True)
class QuoteRequest:
    """
    Swap quote input as typed by the user.

    Attributes:
        token_in: Address of the token sold
        token_out: Address of the token bought
        amount: Fixed amount in whole-token units (token_in for exact input,
            token_out for exact output)
        direction: Which side `amount` fixes
        decimals_in: token_in decimals
        decimals_out: token_out decimals
    """

    token_in: str
    token_out: str
    amount: str
    direction: SwapDirection = SwapDirection.EXACT_INPUT
    decimals_in: int = 18
    decimals_out: int = 18

    @property
    def fixed_decimals(self) -> int:
        """Decimals of the side `amount` is expressed in."""
        if self.direction is SwapDirection.EXACT_INPUT:
            return self.decimals_in
        return self.decimals_out

    @property
    def solved_decimals(self) -> int:
        """Decimals of the side the quote solves for."""
        if self.direction is SwapDirection.EXACT_INPUT:
            return self.decimals_out
        return self.decimals_in


@dataclass(frozen=True)
class Quote:
    """
    One pool's answer to a quote request.

    `amount` is the output for exact input and the required input for exact
    output. A failed quote carries the direction's sentinel amount.
    """

    pool: PoolInfo
    amount: int
    failed: bool = False
    error: Optional[str] = None


@dataclass
class QuoteResult:
    """Outcome of one quote cycle."""

    request: QuoteRequest
    amount_specified: int = 0
    candidates: List[Quote] = field(default_factory=list)
    best: Optional[Quote] = None
    failure: Optional[QuoteFailureReason] = None
    message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.failure is None and self.best is not None

    @property
    def best_pool(self) -> Optional[PoolInfo]:
        return self.best.pool if self.success else None

    @classmethod
    def failed(
        cls,
        request: QuoteRequest,
        reason: QuoteFailureReason,
        message: Optional[str] = None,
        **kwargs,
    ) -> "QuoteResult":
        return cls(
            request=request,
            failure=reason,
            message=message or FAILURE_MESSAGES[reason],
            **kwargs,
        )
