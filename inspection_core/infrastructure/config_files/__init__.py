from .tag_config_csv_repository import TagConfigCsvRepository
from .shift_csv_repository import ShiftCsvRepository
from .station_position_json_repository import StationPositionJsonRepository

__all__ = [
    "TagConfigCsvRepository",
    "ShiftCsvRepository",
    "StationPositionJsonRepository",
]
