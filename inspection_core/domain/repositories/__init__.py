from .tag_config_repository import TagConfigRepository
from .station_position_repository import StationPositionRepository
from .shift_repository import ShiftRepository
from .production_log_repository import ProductionLogRepository
from .controller_gateway import ControllerGateway

__all__ = [
    "TagConfigRepository",
    "StationPositionRepository",
    "ShiftRepository",
    "ProductionLogRepository",
    "ControllerGateway",
]
