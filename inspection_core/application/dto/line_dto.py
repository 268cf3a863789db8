from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel


class OeeResponse(BaseModel):
    """DTO for live OEE figures"""
    availability: float
    performance: float
    quality: float
    overall_oee: float
    operating_time: float
    downtime: float
    total_time: float
    ok_parts: int
    ng_parts: int
    total_parts: int
    cycle_time: float


class HeartbeatResponse(BaseModel):
    """DTO for controller liveness"""
    connected: bool
    ipc_pulse: bool
    time_synced: bool


class StationResultResponse(BaseModel):
    station_number: int
    image_path: str
    status: Optional[str] = None
    x: float
    y: float
    z: float
    timestamp: Optional[datetime] = None


class CycleResponse(BaseModel):
    """DTO for the active cycle and its UI state record"""
    active: bool
    code: Optional[str] = None
    step: int
    sequence_length: int
    stations: Dict[int, StationResultResponse] = {}
    last_updated: Optional[datetime] = None


class QualityResponse(BaseModel):
    """DTO for the external quality sync state"""
    enabled: bool
    connected: bool
    quarantine: List[bool]
    serials: Dict[int, str] = {}
