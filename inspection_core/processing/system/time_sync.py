# Standard library imports
import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

# Local application imports
from ..edge_detector import Edge, EdgeDetector
from ...core.config import TagMap
from ...core.exceptions import TagWriteError
from ...domain.models.tag_value import TagSnapshot
from ...infrastructure.plc.tag_writer import TagWriter
from ...utils.background_tasks import BackgroundTasks
from ...utils.datetime_utils import now

logger = logging.getLogger(__name__)


class TimeSyncService:
    """
    Pushes the local clock to the controller on request.

    Request rising edge: write year, month, day, hour, minute and second in
    order, wait a settle delay, then write the ack. Request falling edge
    clears the ack. A failed write aborts the sequence and marks the clock
    as not synced.
    """

    def __init__(
        self,
        writer: TagWriter,
        tag_map: TagMap,
        settle_delay: float = 0.1,
        clock: Optional[Callable[[], datetime]] = None,
        tasks: Optional[BackgroundTasks] = None,
    ):
        self._writer = writer
        self._tags = tag_map
        self._settle_delay = settle_delay
        self._clock = clock or now
        self._tasks = tasks if tasks is not None else BackgroundTasks("time-sync")
        self._request_edges = EdgeDetector()
        self.synced = False

    def on_snapshot(self, snapshot: TagSnapshot) -> None:
        try:
            edge = self._request_edges.observe(self._tags.time_sync_request, snapshot)
            if edge is Edge.RISING:
                logger.info("Controller requested time sync")
                self._tasks.spawn(self.sync_time(), name="time-sync")
            elif edge is Edge.FALLING:
                self._writer.submit(self._tags.time_sync_ack, False)
        except Exception as e:
            logger.error(f"Time sync tick failed: {e}", exc_info=True)

    async def sync_time(self) -> None:
        try:
            moment = self._clock()
            tags = self._tags
            for tag_id, value in (
                (tags.time_year, moment.year),
                (tags.time_month, moment.month),
                (tags.time_day, moment.day),
                (tags.time_hour, moment.hour),
                (tags.time_minute, moment.minute),
                (tags.time_second, moment.second),
            ):
                if not await self._writer.write(tag_id, value):
                    raise TagWriteError(f"Time sync write to tag {tag_id} failed", tag_id=tag_id)

            await asyncio.sleep(self._settle_delay)
            if not await self._writer.write(tags.time_sync_ack, True):
                raise TagWriteError(
                    f"Time sync ack write to tag {tags.time_sync_ack} failed",
                    tag_id=tags.time_sync_ack,
                )
            self.synced = True
            logger.info(f"Controller clock set to {moment:%Y-%m-%d %H:%M:%S}")
        except Exception as e:
            self.synced = False
            logger.error(f"Time sync failed: {e}")

    async def stop(self) -> None:
        await self._tasks.drain(timeout=1.0)
