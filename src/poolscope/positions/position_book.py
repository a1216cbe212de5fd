"""
Position book.

Loads every position from the position manager and answers id and owner
lookups over the loaded set.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from ..chain.abis import POSITION_MANAGER_ABI
from ..chain.base import ChainReader
from .position_types import PositionInfo

logger = logging.getLogger(__name__)


def decode_positions(records) -> List[PositionInfo]:
    return [PositionInfo.from_chain(record) for record in records or []]


class PositionBook:
    """In-memory view of the position manager's positions, replaced wholesale on refresh."""

    def __init__(
        self,
        reader: ChainReader,
        position_manager_address: str,
        positions: Optional[Iterable[PositionInfo]] = None,
    ):
        self.reader = reader
        self.position_manager_address = position_manager_address
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        self._positions: Tuple[PositionInfo, ...] = ()
        self._by_id: Dict[int, PositionInfo] = {}

        if positions is not None:
            self.load(positions)

    @property
    def positions(self) -> Tuple[PositionInfo, ...]:
        return self._positions

    def load(self, positions: Iterable[PositionInfo]) -> None:
        positions = tuple(positions)
        self._by_id = {position.id: position for position in positions}
        self._positions = positions

    async def refresh(self) -> Tuple[PositionInfo, ...]:
        """
        Reload every position from the position manager.

        Raises:
            ChainError: If the read fails
        """
        records = await self.reader.read_contract(
            self.position_manager_address, POSITION_MANAGER_ABI, "getAllPositions"
        )
        self.load(decode_positions(records))
        self.logger.info(f"Loaded {len(self._positions)} positions")
        return self._positions

    def get_position_by_id(self, position_id: int) -> Optional[PositionInfo]:
        return self._by_id.get(int(position_id))

    def get_positions_by_owner(self, owner: str) -> List[PositionInfo]:
        """Positions held by `owner`, compared case-insensitively."""
        if not owner:
            return []
        owner = owner.lower()
        return [position for position in self._positions if position.owner == owner]
