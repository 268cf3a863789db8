"""
Unit tests for LineRuntime dispatch, polling and lifecycle.
"""
from unittest.mock import AsyncMock, MagicMock

import pytest

from inspection_core.domain.models.tag_value import TagSnapshot
from inspection_core.processing.runner.line_runtime import LineRuntime


def _subsystems():
    calls = []
    parts = {}
    for name in ("heartbeat", "time_sync", "cycle_engine", "oee_engine", "shift_reset"):
        part = MagicMock()
        part.on_snapshot.side_effect = lambda snapshot, name=name: calls.append(name)
        part.stop = AsyncMock()
        parts[name] = part
    parts["cycle_engine"].workflow.initialize = AsyncMock()
    parts["oee_engine"].initialize = AsyncMock()
    parts["shift_reset"].reload_shifts = AsyncMock()
    parts["external_sync"] = MagicMock(stop=AsyncMock())
    parts["writer"] = MagicMock(stop=AsyncMock())
    return parts, calls


def _runtime(parts, gateway=None):
    return LineRuntime(poll_interval=0.01, gateway_provider=lambda: gateway, **parts)


class TestDispatch:
    def test_subsystems_called_in_fixed_order(self):
        parts, calls = _subsystems()
        runtime = _runtime(parts)
        snapshot = TagSnapshot({10: True})

        runtime.dispatch(snapshot)

        assert calls == ["heartbeat", "time_sync", "cycle_engine", "oee_engine", "shift_reset"]
        assert runtime.last_snapshot is snapshot


class TestPollOnce:
    @pytest.mark.asyncio
    async def test_successful_read_is_dispatched(self):
        parts, calls = _subsystems()
        gateway = MagicMock()
        gateway.read_snapshot = AsyncMock(return_value=TagSnapshot({40: True}))
        runtime = _runtime(parts, gateway)

        assert await runtime.poll_once() is True
        assert len(calls) == 5

    @pytest.mark.asyncio
    async def test_failed_read_only_reaches_heartbeat(self):
        parts, calls = _subsystems()
        gateway = MagicMock()
        gateway.read_snapshot = AsyncMock(side_effect=ConnectionError("link down"))
        runtime = _runtime(parts, gateway)

        assert await runtime.poll_once() is False
        assert calls == ["heartbeat"]
        delivered = parts["heartbeat"].on_snapshot.call_args.args[0]
        assert len(delivered) == 0

    @pytest.mark.asyncio
    async def test_no_gateway_registered(self):
        parts, calls = _subsystems()
        runtime = _runtime(parts, None)

        assert await runtime.poll_once() is False
        assert calls == []


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_start_initializes_then_stop_shuts_down(self):
        parts, _ = _subsystems()
        runtime = _runtime(parts)

        await runtime.start(run_poll_loop=False)

        assert runtime.started is True
        parts["writer"].start.assert_called_once()
        parts["cycle_engine"].workflow.initialize.assert_awaited_once()
        parts["oee_engine"].initialize.assert_awaited_once()
        parts["shift_reset"].reload_shifts.assert_awaited_once()
        parts["external_sync"].start_monitor.assert_called_once()

        await runtime.stop()

        assert runtime.started is False
        parts["writer"].stop.assert_awaited_once()
        parts["external_sync"].stop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_stop_continues_after_subsystem_failure(self):
        parts, _ = _subsystems()
        parts["cycle_engine"].stop.side_effect = RuntimeError("stuck")
        runtime = _runtime(parts)
        await runtime.start()

        await runtime.stop()

        parts["oee_engine"].stop.assert_awaited_once()
        parts["writer"].stop.assert_awaited_once()
