from .controller_registry import get_controller_gateway, set_controller_gateway
from .tag_writer import TagWriter

__all__ = ["TagWriter", "get_controller_gateway", "set_controller_gateway"]
