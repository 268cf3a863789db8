# Standard library imports
import logging
from datetime import datetime
from typing import Callable, Optional

# Local application imports
from ...core.config import TagMap
from ...domain.models.shift import ResetState, ShiftConfig
from ...domain.models.tag_value import TagSnapshot
from ...domain.repositories.shift_repository import ShiftRepository
from ...infrastructure.plc.tag_writer import TagWriter
from ...utils.background_tasks import BackgroundTasks
from ...utils.datetime_utils import monotonic, now

logger = logging.getLogger(__name__)

# A shift start is only recognised in the first seconds of its minute
TRIGGER_WINDOW_SECONDS = 5
# Guard against a second trigger inside the same minute
RETRIGGER_GUARD_SECONDS = 65


class ShiftAutoReset:
    """
    Asserts the controller's reset line at the start of every active shift.

    Idle -> Triggering -> WaitingForAck -> Idle. The reset line is always
    released: on ack, or when the ack does not arrive within the timeout.
    The shift-time check does not run while a reset is in progress.
    """

    def __init__(
        self,
        repository: ShiftRepository,
        writer: TagWriter,
        tag_map: TagMap,
        reload_interval: float = 60.0,
        ack_timeout: float = 5.0,
        clock: Optional[Callable[[], datetime]] = None,
        monotonic_clock: Optional[Callable[[], float]] = None,
        on_reset: Optional[Callable[[], None]] = None,
        tasks: Optional[BackgroundTasks] = None,
    ):
        self._repository = repository
        self._writer = writer
        self._tags = tag_map
        self._reload_interval = reload_interval
        self._ack_timeout = ack_timeout
        self._clock = clock or now
        self._monotonic = monotonic_clock or monotonic
        self._on_reset = on_reset
        self._tasks = tasks if tasks is not None else BackgroundTasks("shift-reset")

        self._shifts: list[ShiftConfig] = []
        self._last_load: Optional[float] = None
        self._reload_in_flight = False
        self._state = ResetState.IDLE
        self._last_trigger: Optional[datetime] = None
        self._timeout_start: Optional[float] = None

    @property
    def state(self) -> ResetState:
        return self._state

    @property
    def shifts(self) -> list[ShiftConfig]:
        return list(self._shifts)

    def set_reset_callback(self, callback: Optional[Callable[[], None]]) -> None:
        self._on_reset = callback

    async def reload_shifts(self) -> None:
        try:
            self._shifts = await self._repository.load_shifts()
            logger.debug(f"Loaded {len(self._shifts)} shift definitions")
        except Exception as e:
            logger.error(f"Shift load failed, keeping previous definitions: {e}")
        finally:
            self._last_load = self._monotonic()
            self._reload_in_flight = False

    def on_snapshot(self, snapshot: TagSnapshot) -> None:
        try:
            self._maybe_reload()
            self._check_shift_times()
            self._execute_reset_sequence(snapshot)
        except Exception as e:
            logger.error(f"Shift reset tick failed: {e}", exc_info=True)

    def _maybe_reload(self) -> None:
        if self._reload_in_flight:
            return
        if self._last_load is not None and self._monotonic() - self._last_load <= self._reload_interval:
            return
        self._reload_in_flight = True
        self._tasks.spawn(self.reload_shifts(), name="shift-reload")

    def _check_shift_times(self) -> None:
        if self._state is not ResetState.IDLE:
            return

        current = self._clock()
        if (
            self._last_trigger is not None
            and (current - self._last_trigger).total_seconds() < RETRIGGER_GUARD_SECONDS
        ):
            return

        for shift in self._shifts:
            if not shift.is_active:
                continue
            if (
                current.hour == shift.start_time.hour
                and current.minute == shift.start_time.minute
                and current.second < TRIGGER_WINDOW_SECONDS
            ):
                logger.info(f"Shift '{shift.name}' started at {shift.start_time}; triggering auto reset")
                self._state = ResetState.TRIGGERING
                self._last_trigger = current
                if self._on_reset is not None:
                    self._on_reset()
                break

    def _execute_reset_sequence(self, snapshot: TagSnapshot) -> None:
        if self._state is ResetState.TRIGGERING:
            self._writer.submit(self._tags.reset, True)
            self._timeout_start = self._monotonic()
            self._state = ResetState.WAITING_FOR_ACK
            logger.info(f"Reset tag {self._tags.reset} set; waiting for ack")
            return

        if self._state is not ResetState.WAITING_FOR_ACK:
            return

        if snapshot.get_bool(self._tags.reset_ack):
            logger.info("Reset ack received; releasing reset tag")
            self._writer.submit(self._tags.reset, False)
            self._state = ResetState.IDLE
        elif self._monotonic() - self._timeout_start >= self._ack_timeout:
            logger.error(f"No reset ack within {self._ack_timeout:.1f}s; forcing reset tag off")
            self._writer.submit(self._tags.reset, False)
            self._state = ResetState.IDLE

    async def stop(self) -> None:
        await self._tasks.drain(timeout=1.0)
