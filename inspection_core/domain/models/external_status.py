# Standard library imports
from dataclasses import dataclass, field


@dataclass
class ExternalStatusReport:
    """
    Parsed response of the external quality system for one carrier.

    Only ids reported as OK are listed; every other cavity is NG.
    """
    ok_ids: set[int] = field(default_factory=set)
    serials: dict[int, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ExternalQualityStatus:
    """Read-only view of the external quality sync for status queries."""
    enabled: bool
    connected: bool
    quarantine: tuple[bool, ...]
    serials: dict[int, str]
