"""
Edge detection over polled snapshots.

One detector instance per logical channel: two subsystems watching the same
physical tag each own a detector and never see each other's history.
"""

# Standard library imports
from enum import Enum

# Local application imports
from ..domain.models.tag_value import TagSnapshot


class Edge(str, Enum):
    RISING = "rising"
    FALLING = "falling"
    UNCHANGED = "unchanged"


class EdgeDetector:
    """Tracks the last boolean value per tag id and reports transitions."""

    def __init__(self) -> None:
        self._previous: dict[int, bool] = {}

    def observe(self, tag_id: int, snapshot: TagSnapshot) -> Edge:
        """
        Compare the tag's value in this snapshot with the last observation.

        An absent tag reads as False. The first observation of a tag only
        records its value and is never an edge.
        """
        current = snapshot.get_bool(tag_id)
        previous = self._previous.get(tag_id)
        self._previous[tag_id] = current

        if previous is None or previous == current:
            return Edge.UNCHANGED
        return Edge.RISING if current else Edge.FALLING
