# Standard library imports
import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

# Local application imports
from ..station_sequence import StationSequenceProvider
from ...domain.models.cycle import CycleSnapshot, ProductionCycle, StationReading
from ...domain.models.cycle_state import CycleStateRecord, StationResult
from ...infrastructure.images.production_image_service import ProductionImageService
from ...infrastructure.storage.cycle_state_store import CycleStateStore
from ...utils.background_tasks import BackgroundTasks
from ...utils.datetime_utils import now

logger = logging.getLogger(__name__)

CODE_SCAN_STATION = 0


class CycleWorkflow:
    """
    State machine for one part moving through the stations.

    States are "no active cycle" and "active cycle at step N". The first
    image after a code scan starts a cycle; every following image is the
    next station visit. Once every step has been visited the cycle is reset
    after a short delay so the dashboard can show the final result.

    All state changes happen under one lock. The delayed reset only clears
    the cycle it was scheduled for, so a new cycle started in the meantime
    is never wiped by a stale reset.
    """

    def __init__(
        self,
        sequence_provider: StationSequenceProvider,
        image_service: ProductionImageService,
        state_store: CycleStateStore,
        reset_delay: float = 1.5,
        clock: Optional[Callable[[], datetime]] = None,
        on_cycle_started: Optional[Callable[[str], None]] = None,
    ):
        self._sequence_provider = sequence_provider
        self._image_service = image_service
        self._state_store = state_store
        self._reset_delay = reset_delay
        self._clock = clock or now
        self._on_cycle_started = on_cycle_started

        self._lock = asyncio.Lock()
        self._cycle: Optional[ProductionCycle] = None
        self._sequence: list[int] = list(sequence_provider.fallback)
        self._generation = 0
        self._tasks = BackgroundTasks("cycle-workflow")

    @property
    def sequence(self) -> list[int]:
        return list(self._sequence)

    def snapshot(self) -> CycleSnapshot:
        cycle = self._cycle
        return CycleSnapshot(
            active=cycle is not None,
            code=cycle.code if cycle else None,
            step=cycle.step if cycle else 0,
            sequence_length=len(self._sequence),
        )

    async def initialize(self) -> None:
        """Load the station sequence at service start."""
        self._sequence = await self._sequence_provider.load_sequence_order()
        logger.info(f"Cycle workflow ready with {len(self._sequence)} sequence steps")

    async def load_state_record(self) -> Optional[CycleStateRecord]:
        return await self._state_store.load()

    async def handle_incoming(
        self,
        image_path: Path,
        reading: StationReading,
        code: Optional[str] = None,
    ) -> bool:
        """
        Advance the state machine with one ready image.

        Returns True when the image was consumed: a cycle started or a station
        was recorded. A failed image hand-off raises `ImageHandoffError` and
        leaves the cycle exactly as it was.
        """
        async with self._lock:
            if self._cycle is None:
                if code:
                    await self._start_new_cycle(image_path, code)
                    return True
                logger.debug("Image received with no active cycle and no code; ignoring")
                return False
            return await self._inspect_step(image_path, reading)

    async def force_reset(self) -> None:
        """Clear the active cycle and every file in the state folder."""
        async with self._lock:
            await self._reset_locked()

    async def stop(self) -> None:
        await self._tasks.drain(timeout=self._reset_delay + 1.0)

    async def _start_new_cycle(self, image_path: Path, code: str) -> None:
        logger.info(f"New cycle start: {code}")
        self._sequence = await self._sequence_provider.load_sequence_order()
        await self._state_store.clear()
        dest_path = await self._image_service.process_and_move(image_path, code, CODE_SCAN_STATION)

        self._generation += 1
        self._cycle = ProductionCycle(
            code=code,
            created_at=self._clock(),
            generation=self._generation,
        )
        await self._state_store.merge_station(
            code,
            StationResult(
                station_number=CODE_SCAN_STATION,
                image_path=dest_path,
                timestamp=self._clock(),
            ),
            self._clock(),
        )

        if self._on_cycle_started is not None:
            try:
                self._on_cycle_started(code)
            except Exception as e:
                logger.error(f"Cycle start listener failed for {code}: {e}", exc_info=True)

    async def _inspect_step(self, image_path: Path, reading: StationReading) -> bool:
        cycle = self._cycle
        sequence_length = len(self._sequence)

        if cycle.step >= sequence_length:
            logger.error(
                f"Trigger received after cycle {cycle.code} completed all {sequence_length} steps; resetting"
            )
            await self._reset_locked()
            return False

        station_id = self._sequence[cycle.step]
        if not 0 < station_id <= sequence_length:
            logger.error(
                f"Mapped station id {station_id} for step {cycle.step} is out of range; using 0"
            )
            station_id = 0

        logger.info(f"Processing station {station_id} (step {cycle.step}) for {cycle.code}")
        dest_path = await self._image_service.process_and_move(image_path, cycle.code, station_id)
        await self._state_store.merge_station(
            cycle.code,
            StationResult(
                station_number=station_id,
                image_path=dest_path,
                status=reading.status,
                x=reading.x,
                y=reading.y,
                z=reading.z,
                timestamp=self._clock(),
            ),
            self._clock(),
        )

        cycle.results[station_id] = reading
        cycle.step += 1

        if cycle.is_complete(sequence_length):
            logger.info(f"Cycle {cycle.code} complete; resetting in {self._reset_delay:.1f}s")
            self._tasks.spawn(
                self._delayed_reset(cycle.generation),
                name=f"cycle-reset-{cycle.generation}",
            )
        return True

    async def _delayed_reset(self, generation: int) -> None:
        await asyncio.sleep(self._reset_delay)
        async with self._lock:
            if self._cycle is not None and self._cycle.generation == generation:
                await self._reset_locked()

    async def _reset_locked(self) -> None:
        if self._cycle is not None:
            logger.info(f"Cycle {self._cycle.code} reset at step {self._cycle.step}")
        self._cycle = None
        await self._state_store.purge_folder()
