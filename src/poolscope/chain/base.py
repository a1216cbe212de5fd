"""
Chain collaborator interfaces.

The core only talks to the chain through these seams: a reader for contract
calls (pool sets, symbols, balances, quote simulation), a writer for final
submissions made by the UI layer, and the wallet session that supplies the
current account.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from eth_utils import to_checksum_address
from web3 import Web3
from web3.exceptions import ContractLogicError

from .errors import ChainError, ContractError, ErrorHandler, RemoteCallError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContractCall:
    """A contract write prepared for the external chain-write collaborator."""

    address: str
    abi: List[Dict[str, Any]] = field(repr=False)
    function_name: str
    args: tuple = ()
    value: Optional[int] = None


@dataclass(frozen=True)
class WalletSession:
    """Current wallet state as supplied by the wallet collaborator."""

    account: Optional[str] = None
    is_connected: bool = False

    @property
    def owner(self) -> Optional[str]:
        """Connected account, or None when there is no usable owner."""
        if not self.is_connected or not self.account:
            return None
        return self.account


@dataclass
class ReadConfig:
    """Configuration for chain reads."""

    max_retries: int = 3
    retry_delay: float = 1.0


class ChainReader(ABC):
    """Read-only access to contract state."""

    @abstractmethod
    async def read_contract(
        self,
        address: str,
        abi: List[Dict[str, Any]],
        function_name: str,
        args: Sequence[Any] = (),
    ) -> Any:
        """
        Call a view function and return its decoded value.

        Raises:
            ChainError: If the call fails
        """
        pass


class ChainWriter(ABC):
    """Transaction submission, implemented by the wallet layer."""

    @abstractmethod
    async def write_contract(self, call: ContractCall) -> str:
        """Submit the call and return the transaction hash."""
        pass

    async def write_all(self, calls: Sequence[ContractCall]) -> List[Any]:
        """
        Submit independent calls concurrently.

        A failed submission never stops the others. Returns one entry per
        call, in order: the transaction hash or the exception it raised.
        """
        results = await asyncio.gather(*(self.write_contract(call) for call in calls), return_exceptions=True)
        for call, result in zip(calls, results):
            if isinstance(result, Exception):
                logger.warning(f"{call.function_name} on {call.address} failed: {result}")
        return results


class Web3ChainReader(ChainReader):
    """
    ChainReader backed by a web3.py provider.

    Blocking RPC calls run in the event loop's default executor. Network
    errors are retried with backoff; reverts are raised immediately.
    """

    def __init__(self, web3: Web3, config: Optional[ReadConfig] = None):
        self.web3 = web3
        self.config = config or ReadConfig()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.error_handler = ErrorHandler(self.logger)

    async def read_contract(
        self,
        address: str,
        abi: List[Dict[str, Any]],
        function_name: str,
        args: Sequence[Any] = (),
    ) -> Any:
        contract = self.web3.eth.contract(address=to_checksum_address(address), abi=abi)
        bound = getattr(contract.functions, function_name)(*args)

        async def _call():
            loop = asyncio.get_running_loop()
            return await loop.run_in_executor(None, bound.call)

        return await self._retry_operation(_call, function_name)

    async def _retry_operation(self, operation, function_name: str) -> Any:
        """Retry an operation with exponential backoff, wrapping failures in ChainError."""
        for attempt in range(self.config.max_retries):
            try:
                return await operation()
            except ContractLogicError as e:
                self.error_handler.log_error(e, {"function": function_name, "attempt": attempt + 1})
                raise ContractError(f"{function_name} reverted: {e}", function_name) from e
            except ChainError:
                raise
            except Exception as e:
                self.error_handler.log_error(e, {"function": function_name, "attempt": attempt + 1})

                if not self.error_handler.should_retry(e, attempt, self.config.max_retries):
                    if self.error_handler.classify_error(e) == 'contract':
                        raise ContractError(f"{function_name} reverted: {e}", function_name) from e
                    raise RemoteCallError(f"{function_name} failed: {e}", function_name) from e

                delay = self.error_handler.get_retry_delay(e, attempt, self.config.retry_delay)
                self.logger.info(
                    f"Retrying {function_name} in {delay}s... "
                    f"(attempt {attempt + 1}/{self.config.max_retries})"
                )
                await asyncio.sleep(delay)

        raise RemoteCallError(f"{function_name} failed: no attempts made", function_name)
