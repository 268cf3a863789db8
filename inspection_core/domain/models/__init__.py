from .tag_value import TagSnapshot, TagValue, to_bool, to_float, to_int, to_text
from .cycle import CycleSnapshot, ProductionCycle, StationReading, map_station_status, normalize_code
from .cycle_state import CycleStateRecord, StationResult
from .oee import OeeResult, ProductionRecord, StationCapture
from .shift import ResetState, ShiftConfig
from .tag_config import TagConfig
from .station_position import StationPosition
from .external_status import ExternalQualityStatus, ExternalStatusReport
from .heartbeat import HeartbeatState

__all__ = [
    "TagSnapshot",
    "TagValue",
    "to_bool",
    "to_int",
    "to_float",
    "to_text",
    "ProductionCycle",
    "StationReading",
    "CycleSnapshot",
    "map_station_status",
    "normalize_code",
    "CycleStateRecord",
    "StationResult",
    "OeeResult",
    "ProductionRecord",
    "StationCapture",
    "ResetState",
    "ShiftConfig",
    "TagConfig",
    "StationPosition",
    "ExternalStatusReport",
    "ExternalQualityStatus",
    "HeartbeatState",
]
