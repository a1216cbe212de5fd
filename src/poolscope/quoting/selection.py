"""
Best-pool selection over quote candidates.
"""

from typing import Iterable, Optional

from .quote_types import Quote, SwapDirection


def select_best(direction: SwapDirection, quotes: Iterable[Quote]) -> Optional[Quote]:
    """
    Pick the best quote for the swap direction.

    Exact input maximizes the output amount; exact output minimizes the
    required input. A failed quote loses to any successful one, even one
    with an equal amount, so it is only picked when every quote failed.
    Remaining ties go to the lowest pool index.
    """
    quotes = list(quotes)
    if not quotes:
        return None

    if direction is SwapDirection.EXACT_INPUT:
        return min(quotes, key=lambda q: (q.failed, -q.amount, q.pool.index))
    return min(quotes, key=lambda q: (q.failed, q.amount, q.pool.index))
