# Standard library imports
from dataclasses import dataclass


@dataclass(frozen=True)
class StationPosition:
    """Calibrated servo position: physical station id and its visit order."""
    position_id: int
    sequence_index: int

    @property
    def is_inspection_station(self) -> bool:
        """Station 0 is the code scan; non-positive indices are unused slots."""
        return self.position_id != 0 and self.sequence_index > 0
