"""Pool index, pool records and pool creation requests."""

from .pool_index import PoolIndex, canonicalize_pair
from .pool_types import PairInfo, PoolInfo, PoolSummary
from .requests import CreatePoolParams, build_create_pool_call
from .summary import build_pool_summaries, summarize_pool

__all__ = [
    "PoolIndex",
    "canonicalize_pair",
    "PairInfo",
    "PoolInfo",
    "PoolSummary",
    "CreatePoolParams",
    "build_create_pool_call",
    "build_pool_summaries",
    "summarize_pool",
]
