"""
Error handling utilities for chain read operations.

This module provides the exception classes raised by chain collaborators and
the classification used to decide retries and log levels.
"""

from typing import Optional, Dict, Any
import logging

from ..errors import PoolscopeError

logger = logging.getLogger(__name__)


class ChainError(PoolscopeError):
    """Base exception for chain collaborator failures."""
    pass


class RemoteCallError(ChainError):
    """Raised when a remote read fails for network or unknown reasons."""

    def __init__(self, message: str, function_name: Optional[str] = None):
        super().__init__(message)
        self.function_name = function_name


class ContractError(RemoteCallError):
    """Raised when the contract itself reverts the call."""
    pass


class ErrorHandler:
    """
    Centralized error classification for chain reads.

    Provides classification, logging, and retry decisions for errors
    raised by the RPC layer.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def classify_error(self, error: Exception) -> str:
        """
        Classify an error into a category for appropriate handling.

        Args:
            error: Exception to classify

        Returns:
            Error category string
        """
        if isinstance(error, ContractError):
            return 'contract'

        error_str = str(error).lower()

        if any(keyword in error_str for keyword in ['rate limit', 'too many requests', '429']):
            return 'rate_limit'

        if any(keyword in error_str for keyword in ['connection', 'timeout', 'network', 'dns']):
            return 'network'

        # Reverts are deterministic
        if any(keyword in error_str for keyword in ['revert', 'execution reverted', 'out of gas']):
            return 'contract'

        if any(keyword in error_str for keyword in ['invalid', 'bad request', '400']):
            return 'validation'

        return 'unknown'

    def should_retry(self, error: Exception, attempt: int, max_retries: int) -> bool:
        """
        Determine if an error should trigger a retry.

        Args:
            error: Exception that occurred
            attempt: Current attempt number (0-based)
            max_retries: Maximum number of attempts allowed

        Returns:
            True if operation should be retried
        """
        if attempt + 1 >= max_retries:
            return False

        return self.classify_error(error) in ['network', 'rate_limit', 'unknown']

    def get_retry_delay(self, error: Exception, attempt: int, base_delay: float = 1.0) -> float:
        """
        Calculate retry delay based on error type and attempt.

        Args:
            error: Exception that occurred
            attempt: Current attempt number (0-based)
            base_delay: Delay for the first retry in seconds

        Returns:
            Delay in seconds before retry
        """
        delay = min(base_delay * 2 ** attempt, 60)

        if self.classify_error(error) == 'rate_limit':
            return delay * 2

        return delay

    def log_error(self, error: Exception, context: Dict[str, Any]):
        """
        Log error with appropriate level and context.

        Args:
            error: Exception to log
            context: Additional context for logging
        """
        error_category = self.classify_error(error)

        log_data = {
            'error_type': type(error).__name__,
            'error_category': error_category,
            'error_message': str(error),
            **context
        }

        if error_category == 'contract':
            self.logger.warning("Contract call reverted", extra=log_data)
        elif error_category == 'rate_limit':
            self.logger.info("Rate limit encountered", extra=log_data)
        else:
            self.logger.warning("Chain read error", extra=log_data)
