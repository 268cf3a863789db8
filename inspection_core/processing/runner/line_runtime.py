"""
Line runtime
------------

Role:
- Own the poll loop: read one snapshot per tick from the registered
  controller gateway and hand it to every subsystem
- Dispatch in a fixed order (heartbeat, time sync, cycle engine, OEE
  engine, shift reset) so runs are reproducible
- Start and stop the background pieces (tag writer, connection monitor)

Every subsystem entry point is synchronous and non-blocking; slow work is
spawned by the subsystem itself. A failed read only reaches the heartbeat
monitor, so a transport glitch never looks like falling edges to the engines.
"""

# Standard library imports
import asyncio
import logging
from typing import Callable, Optional

# Local application imports
from ..cycle.cycle_engine import ProductionCycleEngine
from ..oee.oee_engine import OeeEngine
from ..quality.external_quality_sync import ExternalQualitySync
from ..shift.shift_auto_reset import ShiftAutoReset
from ..system.heartbeat_monitor import HeartbeatMonitor
from ..system.time_sync import TimeSyncService
from ...domain.models.tag_value import TagSnapshot
from ...domain.repositories.controller_gateway import ControllerGateway
from ...infrastructure.plc.controller_registry import get_controller_gateway
from ...infrastructure.plc.tag_writer import TagWriter

logger = logging.getLogger(__name__)


class LineRuntime:
    def __init__(
        self,
        writer: TagWriter,
        heartbeat: HeartbeatMonitor,
        time_sync: TimeSyncService,
        cycle_engine: ProductionCycleEngine,
        oee_engine: OeeEngine,
        shift_reset: ShiftAutoReset,
        external_sync: ExternalQualitySync,
        poll_interval: float = 0.1,
        gateway_provider: Callable[[], Optional[ControllerGateway]] = get_controller_gateway,
    ):
        self.writer = writer
        self.heartbeat = heartbeat
        self.time_sync = time_sync
        self.cycle_engine = cycle_engine
        self.oee_engine = oee_engine
        self.shift_reset = shift_reset
        self.external_sync = external_sync
        self._poll_interval = poll_interval
        self._gateway_provider = gateway_provider

        self._poll_task: Optional[asyncio.Task] = None
        self._last_snapshot = TagSnapshot()
        self._started = False

    @property
    def last_snapshot(self) -> TagSnapshot:
        return self._last_snapshot

    @property
    def started(self) -> bool:
        return self._started

    def dispatch(self, snapshot: TagSnapshot) -> None:
        """Deliver one snapshot to every subsystem in a fixed order."""
        self._last_snapshot = snapshot
        self.heartbeat.on_snapshot(snapshot)
        self.time_sync.on_snapshot(snapshot)
        self.cycle_engine.on_snapshot(snapshot)
        self.oee_engine.on_snapshot(snapshot)
        self.shift_reset.on_snapshot(snapshot)

    async def start(self, run_poll_loop: bool = True) -> None:
        if self._started:
            return
        self.writer.start()
        await self.cycle_engine.workflow.initialize()
        await self.oee_engine.initialize()
        await self.shift_reset.reload_shifts()
        self.external_sync.start_monitor()
        if run_poll_loop:
            self._poll_task = asyncio.get_running_loop().create_task(
                self._poll_loop(), name="line-poll-loop"
            )
        self._started = True
        logger.info("Line runtime started")

    async def stop(self) -> None:
        if self._poll_task is not None:
            self._poll_task.cancel()
            try:
                await self._poll_task
            except asyncio.CancelledError:
                pass
            self._poll_task = None

        for name, stopper in (
            ("cycle engine", self.cycle_engine.stop),
            ("OEE engine", self.oee_engine.stop),
            ("shift reset", self.shift_reset.stop),
            ("time sync", self.time_sync.stop),
            ("external sync", self.external_sync.stop),
        ):
            try:
                await stopper()
            except Exception as e:
                logger.error(f"Error stopping {name}: {e}", exc_info=True)

        await self.writer.stop()
        self._started = False
        logger.info("Line runtime stopped")

    async def poll_once(self) -> bool:
        """Read and dispatch one snapshot. Returns False when no read happened."""
        gateway = self._gateway_provider()
        if gateway is None:
            return False
        try:
            snapshot = await gateway.read_snapshot()
        except Exception as e:
            logger.warning(f"Controller read failed: {e}")
            self.heartbeat.on_snapshot(TagSnapshot())
            return False
        self.dispatch(snapshot)
        return True

    async def _poll_loop(self) -> None:
        logger.info("Poll loop started")
        waiting_logged = False
        while True:
            try:
                if not await self.poll_once() and self._gateway_provider() is None:
                    if not waiting_logged:
                        logger.info("No controller gateway registered yet; waiting")
                        waiting_logged = True
                else:
                    waiting_logged = False
            except asyncio.CancelledError:
                logger.info("Poll loop cancelled")
                raise
            except Exception as e:
                logger.error(f"Poll loop iteration failed: {e}", exc_info=True)
            await asyncio.sleep(self._poll_interval)
