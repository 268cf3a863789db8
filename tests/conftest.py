"""
Shared pytest fixtures for inspection core tests.
"""
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest

from inspection_core.core.config import TagMap


class RecordingTagWriter:
    """Stands in for TagWriter; records every write intent in order."""

    def __init__(self, result: bool = True):
        self.result = result
        self.writes: list[tuple[int, object]] = []

    def submit(self, tag_id, value):
        self.writes.append((tag_id, value))
        return None

    async def write(self, tag_id, value):
        self.writes.append((tag_id, value))
        return self.result

    def values_for(self, tag_id):
        return [value for written_id, value in self.writes if written_id == tag_id]


class FakeMonotonic:
    """Controllable monotonic clock (seconds)."""

    def __init__(self, start: float = 1000.0):
        self.value = start

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


class FakeWallClock:
    """Controllable wall clock."""

    def __init__(self, start: datetime):
        self.value = start

    def __call__(self) -> datetime:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += timedelta(seconds=seconds)


@pytest.fixture
def mock_settings():
    """Fixture to mock get_settings for tests. Patches all modules that use it."""
    mock = MagicMock()
    mock.local_timezone = "UTC"
    mock.external_protocol = "http"
    mock.external_host = "10.0.0.5"
    mock.external_port = 8080
    mock.external_endpoint = "/api/sfc"
    mock.external_http_timeout_seconds = 5.0
    mock.tag_map = TagMap()

    with patch("inspection_core.core.config.get_settings", return_value=mock), patch(
        "inspection_core.utils.datetime_utils.get_settings", return_value=mock
    ), patch(
        "inspection_core.infrastructure.external.quality_api_client.get_settings", return_value=mock
    ):
        yield mock


@pytest.fixture
def tag_map() -> TagMap:
    return TagMap()


@pytest.fixture
def recording_writer() -> RecordingTagWriter:
    return RecordingTagWriter()


@pytest.fixture
def fake_monotonic() -> FakeMonotonic:
    return FakeMonotonic()


@pytest.fixture
def fake_wall_clock() -> FakeWallClock:
    return FakeWallClock(datetime(2025, 6, 2, 5, 59, 58, tzinfo=timezone.utc))


@pytest.fixture
def ccd_folders(tmp_path):
    """Temp drop folder, UI/state folder and production output folder."""
    folders = {
        "temp": tmp_path / "ccd" / "temp",
        "ui": tmp_path / "ccd" / "ui",
        "output": tmp_path / "ccd" / "production",
    }
    for folder in folders.values():
        folder.mkdir(parents=True)
    return folders
