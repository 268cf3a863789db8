from abc import ABC, abstractmethod
from ..models.tag_config import TagConfig


class TagConfigRepository(ABC):
    """Repository interface - defines contract for tag configuration access"""

    @abstractmethod
    async def get_all_tags(self) -> list[TagConfig]:
        """Return every configured tag"""
        pass
