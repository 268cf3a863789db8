# Standard library imports
import asyncio
import logging
from typing import Optional

# Local application imports
from .status_parser import all_ok_word, map_ok_to_sequence, parse_status_response
from ..station_sequence import StationSequenceProvider
from ...core.config import TagMap
from ...core.exceptions import ExternalSyncError
from ...domain.models.external_status import ExternalQualityStatus
from ...infrastructure.external.host_probe import HostProbe
from ...infrastructure.external.quality_api_client import QualityApiClient
from ...infrastructure.plc.tag_writer import TagWriter
from ...utils.background_tasks import BackgroundTasks

logger = logging.getLogger(__name__)


class ExternalQualitySync:
    """
    Synchronizes the external quality verdict for each new carrier.

    The quarantine flags (one per sequence step, True = rejected) are only
    replaced wholesale: by a successful sync, by the disabled short-circuit,
    or reset to all-True on a mapping failure or an interface reset. A
    failed fetch keeps the previous flags.

    The connectivity flag is written by the monitor loop and read by the
    sync; both run on the same event loop.
    """

    def __init__(
        self,
        api_client: QualityApiClient,
        probe: HostProbe,
        sequence_provider: StationSequenceProvider,
        writer: TagWriter,
        tag_map: TagMap,
        enabled: bool,
        previous_machine: str,
        this_machine: str,
        total_items: int = 12,
        connect_wait: float = 8.0,
        connect_poll: float = 0.5,
        monitor_interval: float = 1.0,
        tasks: Optional[BackgroundTasks] = None,
    ):
        self._api_client = api_client
        self._probe = probe
        self._sequence_provider = sequence_provider
        self._writer = writer
        self._tags = tag_map
        self.enabled = enabled
        self._previous_machine = previous_machine
        self._this_machine = this_machine
        self._total_items = total_items if total_items > 0 else 12
        self._connect_wait = connect_wait
        self._connect_poll = connect_poll
        self._monitor_interval = monitor_interval
        self._tasks = tasks if tasks is not None else BackgroundTasks("external-sync")

        self._quarantine: tuple[bool, ...] = (True,) * self._total_items
        self._serials: dict[int, str] = {}
        self._connected = False
        self._monitor_task: Optional[asyncio.Task] = None
        self._sync_lock = asyncio.Lock()

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def total_items(self) -> int:
        return self._total_items

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def quarantine_snapshot(self) -> tuple[bool, ...]:
        """Per-step quarantine flags; all False when the integration is disabled."""
        if not self.enabled:
            return (False,) * self._total_items
        return self._quarantine

    def is_sequence_restricted(self, step: int) -> bool:
        if not self.enabled:
            return False
        if 0 <= step < len(self._quarantine):
            return self._quarantine[step]
        return True

    def get_serial_number(self, station_id: int) -> Optional[str]:
        if not self.enabled or not self._connected:
            return None
        serial = self._serials.get(station_id)
        if not serial or not serial.strip() or serial.strip().upper() == "NA":
            return None
        return serial

    def status(self) -> ExternalQualityStatus:
        return ExternalQualityStatus(
            enabled=self.enabled,
            connected=self._connected,
            quarantine=self.quarantine_snapshot(),
            serials=dict(self._serials),
        )

    # ------------------------------------------------------------------
    # Sync
    # ------------------------------------------------------------------

    def schedule_sync(self, code: str) -> None:
        """Start a sync for a new carrier without blocking the caller."""
        self._tasks.spawn(self.sync_batch_status(code), name=f"external-sync-{code}")

    async def sync_batch_status(self, code: str) -> None:
        async with self._sync_lock:
            try:
                await self._sync(code)
            except ExternalSyncError as e:
                logger.error(f"External sync failed: {e.message}")
            except Exception as e:
                logger.error(f"External sync failed for {code}: {e}", exc_info=True)

    async def _sync(self, code: str) -> None:
        if not self.enabled:
            logger.info("External quality system disabled; reporting all cavities OK")
            await self._write_all_ok()
            return

        if not self._connected and not await self.wait_for_connection():
            logger.error(f"External quality system not connected; sync for {code} aborted")
            return

        logger.info(f"Requesting external quality status for {code}")
        raw = await self._api_client.fetch_carrier_status(
            code, self._previous_machine, self._this_machine
        )
        if raw is None:
            await self._writer.write(self._tags.external_not_connected, True)
            raise ExternalSyncError(f"No verdict received from external quality system for {code}")

        report = parse_status_response(raw)
        self._serials = dict(report.serials)

        try:
            station_order = await self._sequence_provider.load_station_order()
            quarantine, word = map_ok_to_sequence(report.ok_ids, station_order, self._total_items)
        except Exception as e:
            logger.error(f"Cavity mapping failed for {code}; quarantining all: {e}", exc_info=True)
            self._quarantine = (True,) * self._total_items
            return

        self._quarantine = tuple(quarantine)
        await self._writer.write(self._tags.cavity_status, word)
        await self._writer.write(self._tags.data_ready, True)
        await self._writer.write(self._tags.external_not_connected, False)
        logger.info(f"External quality synced for {code}: word=0x{word:04X}")

    async def _write_all_ok(self) -> None:
        self._quarantine = (False,) * self._total_items
        await self._writer.write(self._tags.cavity_status, all_ok_word(self._total_items))
        await self._writer.write(self._tags.data_ready, True)

    async def wait_for_connection(self) -> bool:
        """Wait for the monitor to report connected, up to the configured window."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._connect_wait
        while loop.time() < deadline:
            if self._connected:
                return True
            await asyncio.sleep(self._connect_poll)
        return self._connected

    async def reset_plc_interface(self) -> None:
        """Withdraw the verdict: data ready off, status word cleared, everything quarantined."""
        await self._writer.write(self._tags.data_ready, False)
        await self._writer.write(self._tags.cavity_status, 0)
        self._quarantine = (True,) * self._total_items

    # ------------------------------------------------------------------
    # Connectivity monitor
    # ------------------------------------------------------------------

    def start_monitor(self) -> None:
        if self._monitor_task is None or self._monitor_task.done():
            self._monitor_task = asyncio.get_running_loop().create_task(
                self._monitor_loop(), name="external-connection-monitor"
            )
            logger.info("External connection monitor started")

    async def stop(self) -> None:
        if self._monitor_task is not None:
            self._monitor_task.cancel()
            try:
                await self._monitor_task
            except asyncio.CancelledError:
                pass
            self._monitor_task = None
        await self._tasks.drain(timeout=1.0)

    async def check_connection(self) -> None:
        """One monitor iteration: probe, and on a transition log and write the flag."""
        try:
            current = await self._probe.ping()
        except Exception as e:
            logger.debug(f"Ping failed: {e}")
            current = False

        if current == self._connected:
            return
        self._connected = current
        if current:
            logger.info("External quality system connected")
        else:
            logger.error("External quality system connection lost")
        await self._writer.write(self._tags.external_not_connected, not current)

    async def _monitor_loop(self) -> None:
        while True:
            try:
                if self.enabled:
                    await self.check_connection()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Connection monitor iteration failed: {e}", exc_info=True)
            await asyncio.sleep(self._monitor_interval)
