# Standard library imports
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional, Union

TagValue = Union[bool, int, float, str]


def to_bool(value: Any) -> bool:
    """
    Shared truthiness rule for controller values.

    - bool passes through
    - numbers are true when > 0
    - strings are parsed as a boolean literal first, then as an integer
    - anything else (including None) is false
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value > 0
    if isinstance(value, str):
        text = value.strip().lower()
        if text == "true":
            return True
        if text == "false":
            return False
        try:
            return int(text) > 0
        except ValueError:
            return False
    return False


def to_int(value: Any, default: int = 0) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(round(value))
    try:
        return int(round(float(str(value).strip())))
    except ValueError:
        return default


def to_float(value: Any, default: float = 0.0) -> float:
    if value is None:
        return default
    if isinstance(value, (bool, int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return default


def to_text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value)


class TagSnapshot(Mapping[int, TagValue]):
    """
    Immutable set of tag values captured at one poll instant.

    Every event derived from a tick reads its fields from the same snapshot,
    never from a blend of two ticks.
    """

    def __init__(self, values: Optional[Mapping[int, TagValue]] = None):
        self._values = MappingProxyType(dict(values or {}))

    def __getitem__(self, tag_id: int) -> TagValue:
        return self._values[tag_id]

    def __iter__(self) -> Iterator[int]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"TagSnapshot({dict(self._values)!r})"

    def get_bool(self, tag_id: int) -> bool:
        """Absent tags coerce to False."""
        return to_bool(self._values.get(tag_id))

    def get_int(self, tag_id: int, default: int = 0) -> int:
        return to_int(self._values.get(tag_id), default)

    def get_float(self, tag_id: int, default: float = 0.0) -> float:
        return to_float(self._values.get(tag_id), default)

    def get_text(self, tag_id: int) -> Optional[str]:
        value = self._values.get(tag_id)
        return None if value is None else to_text(value)
