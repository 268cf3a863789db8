"""
Unit tests for the cycle workflow state machine.
Uses real file collaborators in tmp folders.
"""
import asyncio
import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from inspection_core.core.exceptions import ConfigurationError, ImageHandoffError
from inspection_core.domain.models.cycle import StationReading
from inspection_core.domain.models.station_position import StationPosition
from inspection_core.infrastructure.images.production_image_service import ProductionImageService
from inspection_core.infrastructure.storage.cycle_state_store import CycleStateStore
from inspection_core.processing.cycle.cycle_workflow import CycleWorkflow
from inspection_core.processing.station_sequence import StationSequenceProvider

FIXED_NOW = datetime(2025, 6, 2, 8, 30, 15, 123000, tzinfo=timezone.utc)


def _clock():
    return FIXED_NOW


def _provider(positions=None):
    repo = AsyncMock()
    if positions is None:
        repo.load_positions.side_effect = ConfigurationError("no calibration")
    else:
        repo.load_positions.return_value = positions
    return StationSequenceProvider(repo)


def _three_station_provider():
    return _provider([StationPosition(1, 1), StationPosition(2, 2), StationPosition(3, 3)])


def _drop_image(folder, name="cam.bmp"):
    path = folder / name
    path.write_bytes(b"BM" + b"\x00" * 64)
    return path


def _workflow(ccd_folders, provider=None, reset_delay=10.0, on_cycle_started=None):
    return CycleWorkflow(
        sequence_provider=provider or _provider(),
        image_service=ProductionImageService(ccd_folders["output"], ccd_folders["ui"], clock=_clock),
        state_store=CycleStateStore(ccd_folders["ui"]),
        reset_delay=reset_delay,
        clock=_clock,
        on_cycle_started=on_cycle_started,
    )


def _state(ccd_folders):
    return json.loads((ccd_folders["ui"] / "CurrentCycleState.json").read_text(encoding="utf-8"))


class TestCycleStart:
    @pytest.mark.asyncio
    async def test_code_with_no_active_cycle_starts_cycle(self, ccd_folders):
        started = MagicMock()
        workflow = _workflow(ccd_folders, on_cycle_started=started)
        image = _drop_image(ccd_folders["temp"])

        await workflow.handle_incoming(image, StationReading(), "ABC123")

        snapshot = workflow.snapshot()
        assert snapshot.active is True
        assert snapshot.code == "ABC123"
        assert snapshot.step == 0
        state = _state(ccd_folders)
        assert state["BatchId"] == "ABC123"
        assert list(state["Stations"].keys()) == ["0"]
        assert state["Stations"]["0"]["ImagePath"].endswith("_raw.bmp")
        assert state["Stations"]["0"]["Status"] is None
        assert not image.exists()
        started.assert_called_once_with("ABC123")

    @pytest.mark.asyncio
    async def test_image_copied_to_batch_folder(self, ccd_folders):
        workflow = _workflow(ccd_folders)
        await workflow.handle_incoming(_drop_image(ccd_folders["temp"]), StationReading(), "ABC123")

        batch_folder = ccd_folders["output"] / "ABC123_02-06-2025"
        files = [p.name for p in batch_folder.iterdir()]
        assert files == ["0_ABC123_02-06-2025_08-30-15-123_raw.bmp"]

    @pytest.mark.asyncio
    async def test_no_cycle_and_no_code_is_noop(self, ccd_folders):
        workflow = _workflow(ccd_folders)
        image = _drop_image(ccd_folders["temp"])

        consumed = await workflow.handle_incoming(image, StationReading(), None)

        assert consumed is False
        assert workflow.snapshot().active is False
        assert not (ccd_folders["ui"] / "CurrentCycleState.json").exists()
        assert image.exists()

    @pytest.mark.asyncio
    async def test_failed_handoff_does_not_start_cycle(self, ccd_folders):
        started = MagicMock()
        workflow = _workflow(ccd_folders, on_cycle_started=started)

        with pytest.raises(ImageHandoffError):
            await workflow.handle_incoming(ccd_folders["temp"] / "gone.bmp", StationReading(), "ABC123")

        assert workflow.snapshot().active is False
        assert not (ccd_folders["ui"] / "CurrentCycleState.json").exists()
        started.assert_not_called()

    @pytest.mark.asyncio
    async def test_sequence_reloaded_at_cycle_start(self, ccd_folders):
        workflow = _workflow(ccd_folders, provider=_three_station_provider())
        assert len(workflow.sequence) == 12

        await workflow.handle_incoming(_drop_image(ccd_folders["temp"]), StationReading(), "ABC123")

        assert workflow.sequence == [1, 2, 3]


class TestInspectionSteps:
    @pytest.mark.asyncio
    async def test_steps_follow_station_sequence(self, ccd_folders):
        workflow = _workflow(ccd_folders)
        await workflow.handle_incoming(_drop_image(ccd_folders["temp"]), StationReading(), "ABC123")

        for _ in range(4):
            await workflow.handle_incoming(
                _drop_image(ccd_folders["temp"]), StationReading("NG", 1.5, 2.5, 3.5), "ABC123"
            )

        assert workflow.snapshot().step == 4
        stations = _state(ccd_folders)["Stations"]
        # snake order: 1, 2, 3, 6
        assert sorted(int(k) for k in stations) == [0, 1, 2, 3, 6]
        assert stations["6"]["Status"] == "NG"
        assert stations["6"]["X"] == 1.5
        assert stations["6"]["Z"] == 3.5

    @pytest.mark.asyncio
    async def test_failed_handoff_does_not_advance_step(self, ccd_folders):
        workflow = _workflow(ccd_folders)
        await workflow.handle_incoming(_drop_image(ccd_folders["temp"]), StationReading(), "ABC123")

        with pytest.raises(ImageHandoffError):
            await workflow.handle_incoming(ccd_folders["temp"] / "gone.bmp", StationReading(), "ABC123")

        assert workflow.snapshot().step == 0
        assert list(_state(ccd_folders)["Stations"]) == ["0"]

        consumed = await workflow.handle_incoming(_drop_image(ccd_folders["temp"]), StationReading(), "ABC123")
        assert consumed is True
        assert workflow.snapshot().step == 1
        assert sorted(_state(ccd_folders)["Stations"]) == ["0", "1"]

    @pytest.mark.asyncio
    async def test_completed_cycle_resets_after_delay(self, ccd_folders):
        workflow = _workflow(ccd_folders, provider=_three_station_provider(), reset_delay=0.01)
        await workflow.handle_incoming(_drop_image(ccd_folders["temp"]), StationReading(), "ABC123")
        for _ in range(3):
            await workflow.handle_incoming(_drop_image(ccd_folders["temp"]), StationReading(), "ABC123")

        assert workflow.snapshot().step == 3
        await asyncio.sleep(0.1)

        assert workflow.snapshot().active is False
        assert list(ccd_folders["ui"].iterdir()) == []

    @pytest.mark.asyncio
    async def test_step_never_exceeds_sequence_length(self, ccd_folders):
        workflow = _workflow(ccd_folders, provider=_three_station_provider(), reset_delay=0.5)
        await workflow.handle_incoming(_drop_image(ccd_folders["temp"]), StationReading(), "ABC123")
        steps = []
        for _ in range(4):
            await workflow.handle_incoming(_drop_image(ccd_folders["temp"]), StationReading(), "ABC123")
            steps.append(workflow.snapshot().step)

        # fourth trigger arrives after completion: forced reset instead of step 4
        assert steps == [1, 2, 3, 0]
        assert workflow.snapshot().active is False
        await workflow.stop()

    @pytest.mark.asyncio
    async def test_stale_delayed_reset_does_not_clear_new_cycle(self, ccd_folders):
        workflow = _workflow(ccd_folders, provider=_three_station_provider(), reset_delay=0.05)
        await workflow.handle_incoming(_drop_image(ccd_folders["temp"]), StationReading(), "FIRST")
        for _ in range(3):
            await workflow.handle_incoming(_drop_image(ccd_folders["temp"]), StationReading(), "FIRST")

        await workflow.force_reset()
        await workflow.handle_incoming(_drop_image(ccd_folders["temp"]), StationReading(), "SECOND")
        await asyncio.sleep(0.15)

        snapshot = workflow.snapshot()
        assert snapshot.active is True
        assert snapshot.code == "SECOND"


class TestForceReset:
    @pytest.mark.asyncio
    async def test_force_reset_clears_cycle_and_state_folder(self, ccd_folders):
        workflow = _workflow(ccd_folders)
        await workflow.handle_incoming(_drop_image(ccd_folders["temp"]), StationReading(), "ABC123")
        (ccd_folders["ui"] / "leftover").mkdir()

        await workflow.force_reset()

        assert workflow.snapshot().active is False
        assert workflow.snapshot().step == 0
        assert list(ccd_folders["ui"].iterdir()) == []

    @pytest.mark.asyncio
    async def test_force_reset_without_cycle_is_safe(self, ccd_folders):
        workflow = _workflow(ccd_folders)
        await workflow.force_reset()
        assert workflow.snapshot().active is False
