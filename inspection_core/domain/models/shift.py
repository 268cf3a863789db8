# Standard library imports
from dataclasses import dataclass
from datetime import time
from enum import Enum
from typing import Optional


class ResetState(str, Enum):
    IDLE = "idle"
    TRIGGERING = "triggering"
    WAITING_FOR_ACK = "waiting_for_ack"


@dataclass
class ShiftConfig:
    """
    Pure domain model for a production shift.

    Start and end are times of day; only active shifts can trigger a reset.
    """
    id: Optional[int]
    name: str
    start_time: time
    end_time: time
    is_active: bool = True

    def __post_init__(self) -> None:
        """Business validations"""
        if not self.name or len(self.name.strip()) < 1:
            raise ValueError("Shift name is required")
