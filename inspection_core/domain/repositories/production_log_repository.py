from abc import ABC, abstractmethod
from ..models.oee import ProductionRecord


class ProductionLogRepository(ABC):
    """Repository interface - defines contract for the durable production log"""

    @abstractmethod
    async def append_record(self, record: ProductionRecord) -> None:
        """Append one finalized cycle"""
        pass
