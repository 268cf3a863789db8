# Standard library imports
import logging
from typing import Optional

# Local application imports
from ..domain.models.station_position import StationPosition
from ..domain.repositories.station_position_repository import StationPositionRepository

logger = logging.getLogger(__name__)

# Snake pattern across the two rows of the fixture
FALLBACK_STATION_ORDER: tuple[int, ...] = (1, 2, 3, 6, 5, 4, 7, 8, 9, 12, 11, 10)


class StationSequenceProvider:
    """
    Resolves which physical station is visited at each sequence step.

    Station 0 (code scan) and positions without a positive sequence index are
    excluded. Any load failure or an empty result falls back to the fixed
    snake order; the provider never raises to its caller.
    """

    def __init__(
        self,
        repository: StationPositionRepository,
        fallback: tuple[int, ...] = FALLBACK_STATION_ORDER,
    ):
        self._repository = repository
        self._fallback = tuple(fallback)

    @property
    def fallback(self) -> tuple[int, ...]:
        return self._fallback

    async def _load_positions(self) -> Optional[list[StationPosition]]:
        try:
            positions = await self._repository.load_positions()
        except Exception as e:
            logger.error(f"Station map load failed, using fallback sequence: {e}")
            return None
        valid = [p for p in positions if p.is_inspection_station]
        if not valid:
            logger.error("Station map has no sequenced stations, using fallback sequence")
            return None
        return valid

    async def load_station_order(self) -> list[int]:
        """
        Physical station ids ordered by sequence index.

        Element i is the physical station inspected at sequence step i.
        """
        positions = await self._load_positions()
        if positions is None:
            return list(self._fallback)
        return [p.position_id for p in sorted(positions, key=lambda p: p.sequence_index)]

    async def load_sequence_order(self) -> list[int]:
        """
        Sequence indices ordered by physical station id.

        Element i is the sequence index of physical station i + 1. With the
        fallback, the fallback list itself is returned.
        """
        positions = await self._load_positions()
        if positions is None:
            return list(self._fallback)
        return [p.sequence_index for p in sorted(positions, key=lambda p: p.position_id)]

    async def load_position_table(self) -> dict[int, int]:
        """
        Map of internal step counter to physical station id, including the
        code-scan station at step 0. Empty when nothing can be loaded.
        """
        try:
            positions = await self._repository.load_positions()
        except Exception as e:
            logger.error(f"Position table load failed, using step index as station id: {e}")
            return {}
        table: dict[int, int] = {}
        for position in positions:
            if position.position_id == 0:
                table[0] = 0
            elif position.sequence_index > 0:
                table[position.sequence_index] = position.position_id
        return table
