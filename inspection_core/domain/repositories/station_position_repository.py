from abc import ABC, abstractmethod
from ..models.station_position import StationPosition


class StationPositionRepository(ABC):
    """Repository interface - defines contract for servo calibration positions"""

    @abstractmethod
    async def load_positions(self) -> list[StationPosition]:
        """Return all calibrated positions, including station 0"""
        pass
