"""Token metadata caching."""

from .metadata_cache import (
    EMPTY_TOKEN_SYMBOL,
    NATIVE_TOKEN_ADDRESS,
    ZERO_ADDRESS,
    TokenMetadataCache,
    TokenOption,
    is_empty_address,
)

__all__ = [
    "EMPTY_TOKEN_SYMBOL",
    "NATIVE_TOKEN_ADDRESS",
    "ZERO_ADDRESS",
    "TokenMetadataCache",
    "TokenOption",
    "is_empty_address",
]
