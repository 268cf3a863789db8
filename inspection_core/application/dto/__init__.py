from .line_dto import (
    CycleResponse,
    HeartbeatResponse,
    OeeResponse,
    QualityResponse,
    StationResultResponse,
)

__all__ = [
    "CycleResponse",
    "HeartbeatResponse",
    "OeeResponse",
    "QualityResponse",
    "StationResultResponse",
]
