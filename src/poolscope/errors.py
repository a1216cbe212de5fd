"""
Exception hierarchy shared across poolscope.

Pure math functions raise these directly. Caches and index lookups catch
chain failures and degrade to fallback values instead.
"""


class PoolscopeError(Exception):
    """Base exception for poolscope."""
    pass


class InvalidInputError(PoolscopeError, ValueError):
    """Raised when caller input is rejected before any remote call."""
    pass


class FixedPointOverflowError(PoolscopeError, OverflowError):
    """Raised when a fixed-point conversion would exceed its integer width."""

    def __init__(self, message: str, bits: int = 160):
        super().__init__(message)
        self.bits = bits


class StaleQuoteError(PoolscopeError):
    """Raised when a settled quote no longer matches the current swap inputs."""
    pass
