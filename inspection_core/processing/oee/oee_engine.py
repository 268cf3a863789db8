# Standard library imports
import logging
from datetime import datetime
from typing import Callable, Optional

# Local application imports
from .oee_calculator import compute_oee
from ..edge_detector import Edge, EdgeDetector
from ..station_sequence import StationSequenceProvider
from ...core.config import TagMap
from ...domain.models.cycle import map_station_status, normalize_code
from ...domain.models.oee import STATION_SLOTS, OeeResult, ProductionRecord, StationCapture
from ...domain.models.tag_value import TagSnapshot
from ...domain.repositories.production_log_repository import ProductionLogRepository
from ...infrastructure.plc.tag_writer import TagWriter
from ...utils.background_tasks import BackgroundTasks
from ...utils.datetime_utils import now

logger = logging.getLogger(__name__)


class OeeEngine:
    """
    Builds one production record per part and computes OEE.

    Three watchers run on every tick, each with its own edge detector:
    - CCD trigger rising: capture the station result into the current record
    - cycle time A1 rising: finalize the record as complete and ack with B1;
      A1 falling clears B1
    - cycle start falling: finalize the active record as aborted
    """

    def __init__(
        self,
        writer: TagWriter,
        production_log: ProductionLogRepository,
        sequence_provider: StationSequenceProvider,
        tag_map: TagMap,
        ideal_cycle_seconds: float = 0.0,
        clock: Optional[Callable[[], datetime]] = None,
        tasks: Optional[BackgroundTasks] = None,
    ):
        self._writer = writer
        self._production_log = production_log
        self._sequence_provider = sequence_provider
        self._tags = tag_map
        self._ideal_cycle_seconds = ideal_cycle_seconds
        self._clock = clock or now
        self._tasks = tasks if tasks is not None else BackgroundTasks("oee-engine")

        self._ccd_edges = EdgeDetector()
        self._a1_edges = EdgeDetector()
        self._cycle_start_edges = EdgeDetector()

        self._position_table: dict[int, int] = {}
        self._record: Optional[ProductionRecord] = None
        self._station_counter = 0
        self._last_cycle_time = 1

    @property
    def current_record(self) -> Optional[ProductionRecord]:
        return self._record

    @property
    def last_cycle_time(self) -> int:
        return self._last_cycle_time

    async def initialize(self) -> None:
        self._position_table = await self._sequence_provider.load_position_table()
        logger.info(f"OEE engine loaded {len(self._position_table)} station positions")

    def on_snapshot(self, snapshot: TagSnapshot) -> None:
        try:
            self._process_station_capture(snapshot)
            self._process_cycle_time(snapshot)
            self._process_cycle_start(snapshot)
        except Exception as e:
            logger.error(f"OEE engine tick failed: {e}", exc_info=True)

    def calculate(self, snapshot: TagSnapshot) -> OeeResult:
        """Live OEE for display. Reads only the snapshot and the last cycle time."""
        tags = self._tags
        cycle_time_value = snapshot.get_int(tags.cycle_time)
        ideal = self._ideal_cycle_seconds if self._ideal_cycle_seconds > 0 else cycle_time_value
        return compute_oee(
            uptime_min=snapshot.get_int(tags.uptime),
            downtime_min=snapshot.get_int(tags.downtime),
            total_parts=snapshot.get_int(tags.in_flow),
            ok_parts=snapshot.get_int(tags.ok_count),
            ng_parts=snapshot.get_int(tags.ng_count),
            ideal_cycle_seconds=ideal,
            cycle_time=cycle_time_value if cycle_time_value > 0 else self._last_cycle_time,
        )

    def _process_station_capture(self, snapshot: TagSnapshot) -> None:
        tags = self._tags
        if self._ccd_edges.observe(tags.ccd_trigger, snapshot) is not Edge.RISING:
            return

        code, valid = normalize_code(snapshot.get_text(tags.code))
        if not valid:
            return
        if code is not None and (self._record is None or self._record.code != code):
            self._record = ProductionRecord(code=code, started_at=self._clock())
            self._station_counter = 0
        if self._record is None:
            logger.debug("CCD trigger without a code and no open record; nothing captured")
            return

        station_id = self._position_table.get(self._station_counter, self._station_counter)
        if not 0 <= station_id < STATION_SLOTS:
            logger.error(
                f"Mapped station id {station_id} for step {self._station_counter} is out of range; using 0"
            )
            station_id = 0

        self._record.stations[station_id] = StationCapture(
            status=map_station_status(snapshot.get(tags.station_status)),
            x=snapshot.get_float(tags.value_x),
            y=snapshot.get_float(tags.value_y),
            z=snapshot.get_float(tags.value_z),
        )
        self._station_counter += 1

    def _process_cycle_time(self, snapshot: TagSnapshot) -> None:
        tags = self._tags
        edge = self._a1_edges.observe(tags.cycle_time_a1, snapshot)
        if edge is Edge.RISING:
            self._last_cycle_time = snapshot.get_int(tags.cycle_time)
            logger.info(f"Cycle complete signal (cycle time {self._last_cycle_time}s)")
            if self._record is not None:
                self._finalize(snapshot, aborted=False)
            self._writer.submit(tags.cycle_time_b1, True)
        elif edge is Edge.FALLING:
            self._writer.submit(tags.cycle_time_b1, False)

    def _process_cycle_start(self, snapshot: TagSnapshot) -> None:
        if self._cycle_start_edges.observe(self._tags.cycle_start, snapshot) is not Edge.FALLING:
            return
        if self._record is not None:
            logger.warning(f"Cycle start dropped mid-cycle; aborting record {self._record.code}")
            self._finalize(snapshot, aborted=True)

    def _finalize(self, snapshot: TagSnapshot, aborted: bool) -> None:
        record = self._record
        record.aborted = aborted
        record.finished_at = self._clock()
        record.oee = self.calculate(snapshot)

        self._record = None
        self._station_counter = 0
        self._tasks.spawn(self._append(record), name="production-log-append")

    async def _append(self, record: ProductionRecord) -> None:
        try:
            await self._production_log.append_record(record)
        except Exception as e:
            logger.error(f"Failed to append production record {record.display_code}: {e}", exc_info=True)

    async def stop(self) -> None:
        await self._tasks.drain(timeout=5.0)
