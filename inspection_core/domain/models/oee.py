# Standard library imports
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

# Station slots 0..12: slot 0 is the code scan, 1..12 the inspection stations
STATION_SLOTS = 13


@dataclass
class OeeResult:
    """
    Availability, Performance and Quality for one set of counters.

    Ratios are not clamped; values above 1 are reported as computed.
    """
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


@dataclass
class StationCapture:
    status: str = ""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass
class ProductionRecord:
    """One row of the production log, built while a part moves through the stations."""
    code: str
    started_at: datetime
    stations: list[StationCapture] = field(
        default_factory=lambda: [StationCapture() for _ in range(STATION_SLOTS)]
    )
    oee: Optional[OeeResult] = None
    finished_at: Optional[datetime] = None
    aborted: bool = False

    @property
    def display_code(self) -> str:
        return f"{self.code} [RESET]" if self.aborted else self.code
