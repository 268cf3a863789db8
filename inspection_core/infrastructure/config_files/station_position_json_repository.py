# Standard library imports
import asyncio
import json
from pathlib import Path

# Local application imports
from ...core.exceptions import ConfigurationError
from ...domain.models.station_position import StationPosition
from ...domain.repositories.station_position_repository import StationPositionRepository


class StationPositionJsonRepository(StationPositionRepository):
    """
    Servo calibration positions read from a JSON array.

    Each entry carries at least `PositionId`; `SequenceIndex` defaults to 0
    (not part of the inspection sequence) when absent.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    async def load_positions(self) -> list[StationPosition]:
        return await asyncio.to_thread(self._read)

    def _read(self) -> list[StationPosition]:
        if not self.path.is_file():
            raise ConfigurationError(
                f"Servo positions file not found: {self.path}",
                details={"path": str(self.path)},
            )
        try:
            data = json.loads(self.path.read_text(encoding="utf-8-sig"))
        except ValueError as e:
            raise ConfigurationError(f"Invalid servo positions file {self.path}: {e}") from e

        if not isinstance(data, list):
            raise ConfigurationError(f"Servo positions file {self.path} must contain a list")

        positions: list[StationPosition] = []
        for entry in data:
            if not isinstance(entry, dict) or "PositionId" not in entry:
                continue
            positions.append(
                StationPosition(
                    position_id=int(entry["PositionId"]),
                    sequence_index=int(entry.get("SequenceIndex") or 0),
                )
            )
        return positions
