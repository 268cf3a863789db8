# Standard library imports
from datetime import datetime
from typing import Dict, Optional

# External package imports
from pydantic import BaseModel, ConfigDict, Field


class StationResult(BaseModel):
    """One station's entry in the UI state file."""
    model_config = ConfigDict(populate_by_name=True)

    station_number: int = Field(alias="StationNumber")
    image_path: str = Field(default="", alias="ImagePath")
    # unset on the code-scan entry (station 0)
    status: Optional[str] = Field(default=None, alias="Status")
    x: float = Field(default=0.0, alias="X")
    y: float = Field(default=0.0, alias="Y")
    z: float = Field(default=0.0, alias="Z")
    timestamp: Optional[datetime] = Field(default=None, alias="Timestamp")


class CycleStateRecord(BaseModel):
    """
    UI-facing record of the active cycle.

    Serialized with the PascalCase keys the dashboard reads:
    {BatchId, Stations: {stationNo: {...}}, LastUpdated}.
    """
    model_config = ConfigDict(populate_by_name=True)

    batch_id: str = Field(default="", alias="BatchId")
    stations: Dict[int, StationResult] = Field(default_factory=dict, alias="Stations")
    last_updated: Optional[datetime] = Field(default=None, alias="LastUpdated")

    def merge(self, result: StationResult, batch_id: str, updated_at: datetime) -> None:
        """Insert or replace the entry for the result's station number."""
        self.batch_id = batch_id
        self.stations[result.station_number] = result
        self.last_updated = updated_at
