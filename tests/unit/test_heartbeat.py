"""
Unit tests for HeartbeatMonitor.
"""
from inspection_core.domain.models.tag_value import TagSnapshot
from inspection_core.processing.system.heartbeat_monitor import HeartbeatMonitor


def _monitor(writer, tag_map, clock):
    return HeartbeatMonitor(
        writer, tag_map, read_timeout=3.0, heartbeat_timeout=5.0, toggle_interval=1.0, clock=clock
    )


class TestHeartbeatMonitor:
    def test_changing_pulse_keeps_connection_and_toggles_ipc(self, recording_writer, tag_map, fake_monotonic):
        monitor = _monitor(recording_writer, tag_map, fake_monotonic)

        pulse = True
        for _ in range(5):
            assert monitor.on_snapshot(TagSnapshot({tag_map.heartbeat_plc: pulse})) is True
            pulse = not pulse
            fake_monotonic.advance(0.5)

        # ticks at +1.0s and +2.0s flip the local pulse
        assert recording_writer.values_for(tag_map.heartbeat_ipc) == [True, False]
        assert monitor.connected is True

    def test_frozen_pulse_disconnects_and_stops_ipc(self, recording_writer, tag_map, fake_monotonic):
        monitor = _monitor(recording_writer, tag_map, fake_monotonic)
        snapshot = TagSnapshot({tag_map.heartbeat_plc: True})

        monitor.on_snapshot(snapshot)
        fake_monotonic.advance(4.0)
        assert monitor.on_snapshot(snapshot) is True
        recording_writer.writes.clear()

        fake_monotonic.advance(1.0)
        assert monitor.on_snapshot(snapshot) is False
        fake_monotonic.advance(2.0)
        monitor.on_snapshot(snapshot)

        assert recording_writer.values_for(tag_map.heartbeat_ipc) == []

    def test_failed_reads_disconnect_after_read_timeout(self, recording_writer, tag_map, fake_monotonic):
        monitor = _monitor(recording_writer, tag_map, fake_monotonic)
        monitor.on_snapshot(TagSnapshot({tag_map.heartbeat_plc: False}))

        fake_monotonic.advance(2.0)
        assert monitor.on_snapshot(TagSnapshot({})) is True
        fake_monotonic.advance(1.0)
        assert monitor.on_snapshot(TagSnapshot({})) is False

    def test_recovers_when_pulse_resumes(self, recording_writer, tag_map, fake_monotonic):
        monitor = _monitor(recording_writer, tag_map, fake_monotonic)
        monitor.on_snapshot(TagSnapshot({tag_map.heartbeat_plc: True}))
        fake_monotonic.advance(6.0)
        assert monitor.on_snapshot(TagSnapshot({tag_map.heartbeat_plc: True})) is False

        fake_monotonic.advance(0.2)
        assert monitor.on_snapshot(TagSnapshot({tag_map.heartbeat_plc: False})) is True

    def test_reset_clears_state(self, recording_writer, tag_map, fake_monotonic):
        monitor = _monitor(recording_writer, tag_map, fake_monotonic)
        monitor.on_snapshot(TagSnapshot({tag_map.heartbeat_plc: True}))

        fake_monotonic.advance(10)
        monitor.reset()

        assert monitor.connected is False
        assert monitor.state.last_plc_value is None
        assert monitor.state.last_read == fake_monotonic()
