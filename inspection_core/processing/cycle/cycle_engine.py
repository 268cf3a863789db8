# Standard library imports
import asyncio
import logging
from pathlib import Path
from typing import Optional

# Local application imports
from .cycle_workflow import CycleWorkflow
from ..edge_detector import Edge, EdgeDetector
from ...core.config import TagMap
from ...core.exceptions import ImageHandoffError, ImageNotFoundError
from ...domain.models.cycle import StationReading, map_station_status, normalize_code
from ...domain.models.tag_value import TagSnapshot
from ...infrastructure.images.image_drop_watcher import ImageDropWatcher
from ...infrastructure.plc.tag_writer import TagWriter
from ...utils.background_tasks import BackgroundTasks

logger = logging.getLogger(__name__)


def read_station(snapshot: TagSnapshot, tag_map: TagMap) -> StationReading:
    """Status and X/Y/Z from one snapshot, with OK / 0.0 for absent tags."""
    return StationReading(
        status=map_station_status(snapshot.get(tag_map.station_status)),
        x=snapshot.get_float(tag_map.value_x),
        y=snapshot.get_float(tag_map.value_y),
        z=snapshot.get_float(tag_map.value_z),
    )


class ProductionCycleEngine:
    """
    Turns CCD trigger edges into cycle workflow steps.

    Per tick (never blocks):
    - cycle start falling edge: force-reset the cycle
    - cycle start low: ignore triggers and clear a still-asserted ack
    - trigger rising edge: capture code and station data, then wait for the
      image and run the workflow in the background; ack true once the
      workflow consumed the image. Triggers are handled one at a time so
      each image is claimed by exactly one trigger.
    - trigger falling edge: clear the ack
    """

    def __init__(
        self,
        workflow: CycleWorkflow,
        watcher: ImageDropWatcher,
        writer: TagWriter,
        tag_map: TagMap,
        tasks: Optional[BackgroundTasks] = None,
    ):
        self._workflow = workflow
        self._watcher = watcher
        self._writer = writer
        self._tags = tag_map
        self._tasks = tasks if tasks is not None else BackgroundTasks("cycle-engine")
        self._cycle_start_edges = EdgeDetector()
        self._trigger_edges = EdgeDetector()
        self._image_lock = asyncio.Lock()

    @property
    def workflow(self) -> CycleWorkflow:
        return self._workflow

    def request_reset(self, reason: str) -> None:
        """Force-reset the cycle in the background."""
        logger.info(f"Forcing cycle reset: {reason}")
        self._tasks.spawn(self._workflow.force_reset(), name="cycle-force-reset")

    def on_snapshot(self, snapshot: TagSnapshot) -> None:
        try:
            self._process(snapshot)
        except Exception as e:
            logger.error(f"Cycle engine tick failed: {e}", exc_info=True)

    def _process(self, snapshot: TagSnapshot) -> None:
        tags = self._tags

        if self._cycle_start_edges.observe(tags.cycle_start, snapshot) is Edge.FALLING:
            self.request_reset("cycle start went low")

        trigger_edge = self._trigger_edges.observe(tags.ccd_trigger, snapshot)

        if not snapshot.get_bool(tags.cycle_start):
            if snapshot.get_bool(tags.trigger_ack):
                self._writer.submit(tags.trigger_ack, False)
            return

        if trigger_edge is Edge.RISING:
            code, valid = normalize_code(snapshot.get_text(tags.code))
            if not valid:
                logger.warning("Code register contains NUL characters; trigger ignored")
                return
            reading = read_station(snapshot, tags)
            logger.info(f"CCD trigger detected (code={code!r}, status={reading.status})")
            self._tasks.spawn(self._execute_workflow(code, reading), name="cycle-workflow")
        elif trigger_edge is Edge.FALLING:
            self._writer.submit(tags.trigger_ack, False)

    async def _execute_workflow(self, code: Optional[str], reading: StationReading) -> None:
        try:
            async with self._image_lock:
                if code is None and not self._workflow.snapshot().active:
                    logger.debug("Trigger with no code and no active cycle; nothing to do")
                    return

                image_path = await self._watcher.wait_for_image()
                if image_path is None:
                    raise ImageNotFoundError("Triggered but no image found")

                if not await self._workflow.handle_incoming(image_path, reading, code):
                    await self._discard(image_path)
                    return

            if not await self._writer.write(self._tags.trigger_ack, True):
                logger.error(f"Failed to write trigger ack to tag {self._tags.trigger_ack}")
        except (ImageNotFoundError, ImageHandoffError) as e:
            logger.error(f"{e.message}; cycle not advanced, no ack written")
        except Exception as e:
            logger.error(f"Cycle workflow failed: {e}", exc_info=True)

    async def _discard(self, image_path: Path) -> None:
        """Remove an image the workflow did not take so a later trigger cannot claim it."""
        try:
            await asyncio.to_thread(image_path.unlink, missing_ok=True)
            logger.info(f"Discarded unused image {image_path}")
        except OSError as e:
            logger.warning(f"Could not discard unused image {image_path}: {e}")

    async def stop(self) -> None:
        await self._tasks.drain(timeout=1.0)
        await self._workflow.stop()
