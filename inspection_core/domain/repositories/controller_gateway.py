from abc import ABC, abstractmethod
from ..models.tag_config import TagConfig
from ..models.tag_value import TagSnapshot, TagValue


class ControllerGateway(ABC):
    """
    Contract for the controller transport.

    Reads are owned by the poll loop; writes are addressed through the tag's
    configured controller number and register address.
    """

    @abstractmethod
    async def read_snapshot(self) -> TagSnapshot:
        """Read every polled tag at one instant"""
        pass

    @abstractmethod
    async def write_tag(self, tag: TagConfig, value: TagValue) -> bool:
        """Write one value; return False when the controller rejects it"""
        pass
