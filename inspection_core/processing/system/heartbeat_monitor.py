# Standard library imports
import logging
from typing import Callable, Optional

# Local application imports
from ...core.config import TagMap
from ...domain.models.heartbeat import HeartbeatState
from ...domain.models.tag_value import TagSnapshot
from ...infrastructure.plc.tag_writer import TagWriter
from ...utils.datetime_utils import monotonic

logger = logging.getLogger(__name__)


class HeartbeatMonitor:
    """
    Bidirectional liveness between this process and the controller.

    The controller is connected only while polls keep succeeding AND its
    pulse tag keeps changing; a link that is up but a pulse that is frozen
    still counts as unresponsive. The local IPC pulse is flipped at a fixed
    interval and written only while the controller is connected.
    """

    def __init__(
        self,
        writer: TagWriter,
        tag_map: TagMap,
        read_timeout: float = 3.0,
        heartbeat_timeout: float = 5.0,
        toggle_interval: float = 1.0,
        clock: Optional[Callable[[], float]] = None,
    ):
        self._writer = writer
        self._tags = tag_map
        self._read_timeout = read_timeout
        self._heartbeat_timeout = heartbeat_timeout
        self._toggle_interval = toggle_interval
        self._clock = clock or monotonic
        self._state = HeartbeatState()
        self.reset()

    @property
    def state(self) -> HeartbeatState:
        return self._state

    @property
    def connected(self) -> bool:
        return self._state.connected

    def reset(self) -> None:
        started = self._clock()
        self._state = HeartbeatState(
            last_plc_value=None,
            last_plc_change=started,
            last_read=started,
            ipc_value=False,
            last_ipc_toggle=started,
            connected=False,
        )
        logger.info("Heartbeat state reset")

    def on_snapshot(self, snapshot: TagSnapshot) -> bool:
        try:
            return self._process(snapshot)
        except Exception as e:
            logger.error(f"Heartbeat tick failed: {e}", exc_info=True)
            return self._state.connected

    def _process(self, snapshot: TagSnapshot) -> bool:
        state = self._state
        current_time = self._clock()

        if len(snapshot) > 0:
            state.last_read = current_time
            pulse = snapshot.get_bool(self._tags.heartbeat_plc)
            if state.last_plc_value is None or pulse != state.last_plc_value:
                state.last_plc_value = pulse
                state.last_plc_change = current_time

        read_ok = current_time - state.last_read < self._read_timeout
        pulse_ok = current_time - state.last_plc_change < self._heartbeat_timeout
        connected = read_ok and pulse_ok

        if connected != state.connected:
            if connected:
                logger.info("Controller heartbeat restored")
            else:
                logger.warning(
                    f"Controller heartbeat lost (read_ok={read_ok}, pulse_ok={pulse_ok})"
                )
        state.connected = connected

        if connected and current_time - state.last_ipc_toggle >= self._toggle_interval:
            state.ipc_value = not state.ipc_value
            state.last_ipc_toggle = current_time
            self._writer.submit(self._tags.heartbeat_ipc, state.ipc_value)

        return connected
