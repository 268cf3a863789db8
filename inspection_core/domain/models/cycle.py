# Standard library imports
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

STATUS_OK = "OK"
STATUS_NG = "NG"


def map_station_status(value: Any, default: str = STATUS_OK) -> str:
    """
    Map a raw controller status to its display form.

    Numeric 1 is "OK", numeric 2 is "NG", any other value is kept raw.
    An absent value yields the default.
    """
    if value is None:
        return default
    text = str(value).strip()
    if isinstance(value, bool):
        return text
    try:
        number = float(text)
    except ValueError:
        return text
    if number == 1:
        return STATUS_OK
    if number == 2:
        return STATUS_NG
    return text


def normalize_code(raw: Optional[str]) -> tuple[Optional[str], bool]:
    """
    Clean a code read from the controller's string register.

    Returns (code, valid). Trailing NUL padding and whitespace are dropped;
    an empty result means no code. A NUL inside the code means the register
    was read mid-update and the trigger must be ignored.
    """
    if raw is None:
        return None, True
    code = raw.rstrip("\0").strip()
    if "\0" in code:
        return None, False
    return (code or None), True


@dataclass(frozen=True)
class StationReading:
    """Status and measurements read for one station visit from a single snapshot."""
    status: str = STATUS_OK
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass
class ProductionCycle:
    """
    One inspection run of one physical part.

    `step` is the next sequence step to be visited; it is 0 right after the
    code-scan image and never exceeds the sequence length.
    """
    code: str
    created_at: datetime
    step: int = 0
    generation: int = 0
    results: dict[int, StationReading] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Business validations"""
        if not self.code or not self.code.strip():
            raise ValueError("Cycle code is required")
        if self.step < 0:
            raise ValueError("Cycle step cannot be negative")

    def is_complete(self, sequence_length: int) -> bool:
        return self.step >= sequence_length


@dataclass(frozen=True)
class CycleSnapshot:
    """Read-only view of the workflow state for status queries."""
    active: bool
    code: Optional[str]
    step: int
    sequence_length: int
