# Standard library imports
import asyncio
import logging
from datetime import time
from pathlib import Path

# Local application imports
from .csv_rows import read_data_rows
from ...core.exceptions import ConfigurationError
from ...domain.models.shift import ShiftConfig
from ...domain.repositories.shift_repository import ShiftRepository

logger = logging.getLogger(__name__)


def parse_time_of_day(value: str) -> time:
    """Parse HH:MM or HH:MM:SS."""
    parts = value.strip().split(":")
    if len(parts) not in (2, 3):
        raise ValueError(f"Invalid time of day: {value!r}")
    hour, minute = int(parts[0]), int(parts[1])
    second = int(parts[2]) if len(parts) == 3 else 0
    return time(hour, minute, second)


def parse_bool(value: str) -> bool:
    text = value.strip().lower()
    if text in ("true", "1"):
        return True
    if text in ("false", "0"):
        return False
    raise ValueError(f"Invalid boolean: {value!r}")


class ShiftCsvRepository(ShiftRepository):
    """Shift definitions read from `Id,ShiftName,StartTime,EndTime,IsActive`. Bad lines are skipped."""

    def __init__(self, path: Path):
        self.path = Path(path)

    async def load_shifts(self) -> list[ShiftConfig]:
        return await asyncio.to_thread(self._read)

    def _read(self) -> list[ShiftConfig]:
        if not self.path.is_file():
            raise ConfigurationError(
                f"Shift file not found: {self.path}",
                details={"path": str(self.path)},
            )

        shifts: list[ShiftConfig] = []
        for line_no, row in read_data_rows(self.path):
            if len(row) < 5:
                continue
            try:
                shifts.append(
                    ShiftConfig(
                        id=int(row[0]) if row[0] else None,
                        name=row[1],
                        start_time=parse_time_of_day(row[2]),
                        end_time=parse_time_of_day(row[3]),
                        is_active=parse_bool(row[4]),
                    )
                )
            except ValueError as e:
                logger.debug(f"Ignoring bad shift line {self.path}:{line_no}: {e}")
        return shifts
