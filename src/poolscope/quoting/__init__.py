"""Multi-pool swap quoting and best-pool selection."""

from .engine import QuoteEngine, QuoteSession
from .quote_types import (
    FAILED_EXACT_INPUT_AMOUNT,
    FAILED_EXACT_OUTPUT_AMOUNT,
    Quote,
    QuoteFailureReason,
    QuotePhase,
    QuoteRequest,
    QuoteResult,
    SwapDirection,
)
from .selection import select_best

__all__ = [
    "QuoteEngine",
    "QuoteSession",
    "FAILED_EXACT_INPUT_AMOUNT",
    "FAILED_EXACT_OUTPUT_AMOUNT",
    "Quote",
    "QuoteFailureReason",
    "QuotePhase",
    "QuoteRequest",
    "QuoteResult",
    "SwapDirection",
    "select_best",
]
