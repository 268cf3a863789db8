"""
Integration tests for the line status API endpoints.
Uses TestClient with a mocked runtime (no controller, no files).
Note: Runs full app lifespan. Use: pytest tests/unit/ for fast unit-only runs.
"""
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

pytestmark = pytest.mark.integration
from fastapi.testclient import TestClient

from inspection_core.domain.models.cycle import CycleSnapshot
from inspection_core.domain.models.cycle_state import CycleStateRecord, StationResult
from inspection_core.domain.models.external_status import ExternalQualityStatus
from inspection_core.domain.models.heartbeat import HeartbeatState
from inspection_core.processing.oee.oee_calculator import compute_oee
from inspection_core.processing.runner import LineRuntime


@pytest.fixture
def mock_runtime():
    runtime = MagicMock(spec=LineRuntime)
    runtime.start = AsyncMock()
    runtime.stop = AsyncMock()
    runtime.last_snapshot = MagicMock()
    runtime.oee_engine = MagicMock()
    runtime.heartbeat = MagicMock()
    runtime.time_sync = MagicMock()
    runtime.cycle_engine = MagicMock()
    runtime.external_sync = MagicMock()
    return runtime


@pytest.fixture
def mock_container(mock_runtime):
    container = MagicMock()
    container.get.side_effect = lambda cls: {LineRuntime: mock_runtime}.get(cls, None)
    return container


@pytest.fixture
def client(mock_container):
    """Create test client with mocked container."""
    from inspection_core.main import app

    with patch("inspection_core.main.get_container", return_value=mock_container), patch(
        "inspection_core.api.v1.line_controller.get_container", return_value=mock_container
    ):
        with TestClient(app) as c:
            yield c


class TestLineAPI:
    """Tests for /api/v1/line endpoints"""

    def test_lifespan_starts_and_stops_runtime(self, mock_container, mock_runtime):
        from inspection_core.main import app

        with patch("inspection_core.main.get_container", return_value=mock_container):
            with TestClient(app):
                mock_runtime.start.assert_awaited_once()
        mock_runtime.stop.assert_awaited_once()

    def test_oee(self, client, mock_runtime):
        mock_runtime.oee_engine.calculate.return_value = compute_oee(50, 10, 100, 90, 10, 24, cycle_time=31)

        response = client.get("/api/v1/line/oee")

        assert response.status_code == 200
        data = response.json()
        assert data["availability"] == pytest.approx(50 / 60)
        assert data["performance"] == pytest.approx(0.8)
        assert data["total_parts"] == 100
        assert data["cycle_time"] == 31

    def test_heartbeat(self, client, mock_runtime):
        mock_runtime.heartbeat.state = HeartbeatState(connected=True, ipc_value=True)
        mock_runtime.time_sync.synced = False

        response = client.get("/api/v1/line/heartbeat")

        assert response.status_code == 200
        assert response.json() == {"connected": True, "ipc_pulse": True, "time_synced": False}

    def test_cycle_with_state_record(self, client, mock_runtime):
        workflow = mock_runtime.cycle_engine.workflow
        workflow.snapshot.return_value = CycleSnapshot(active=True, code="ABC123", step=1, sequence_length=12)
        record = CycleStateRecord(batch_id="ABC123", last_updated=datetime(2025, 6, 2, tzinfo=timezone.utc))
        record.stations[0] = StationResult(station_number=0, image_path="/ui/0.bmp")
        record.stations[1] = StationResult(station_number=1, status="NG", x=0.5)
        workflow.load_state_record = AsyncMock(return_value=record)

        response = client.get("/api/v1/line/cycle")

        assert response.status_code == 200
        data = response.json()
        assert data["active"] is True
        assert data["code"] == "ABC123"
        assert data["step"] == 1
        assert set(data["stations"]) == {"0", "1"}
        assert data["stations"]["1"]["status"] == "NG"
        assert data["stations"]["0"]["status"] is None

    def test_cycle_without_state_record(self, client, mock_runtime):
        workflow = mock_runtime.cycle_engine.workflow
        workflow.snapshot.return_value = CycleSnapshot(active=False, code=None, step=0, sequence_length=12)
        workflow.load_state_record = AsyncMock(return_value=None)

        response = client.get("/api/v1/line/cycle")

        assert response.status_code == 200
        assert response.json()["stations"] == {}
        assert response.json()["code"] is None

    def test_quality(self, client, mock_runtime):
        mock_runtime.external_sync.status.return_value = ExternalQualityStatus(
            enabled=True,
            connected=True,
            quarantine=(False, True),
            serials={1: "SN1"},
        )

        response = client.get("/api/v1/line/quality")

        assert response.status_code == 200
        data = response.json()
        assert data["quarantine"] == [False, True]
        assert data["serials"] == {"1": "SN1"}
