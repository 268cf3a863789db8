from abc import ABC, abstractmethod
from ..models.shift import ShiftConfig


class ShiftRepository(ABC):
    """Repository interface - defines contract for shift definitions"""

    @abstractmethod
    async def load_shifts(self) -> list[ShiftConfig]:
        """Return all shift definitions (active and inactive)"""
        pass
