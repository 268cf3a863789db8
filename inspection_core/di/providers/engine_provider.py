"""Processing engines provider for dependency injection."""
from typing import TYPE_CHECKING

from ...core.config import get_settings
from ...domain.repositories.production_log_repository import ProductionLogRepository
from ...domain.repositories.shift_repository import ShiftRepository
from ...domain.repositories.station_position_repository import StationPositionRepository
from ...infrastructure.external import HostProbe, QualityApiClient
from ...infrastructure.images import ImageDropWatcher, ProductionImageService
from ...infrastructure.plc import TagWriter
from ...infrastructure.storage import CycleStateStore
from ...processing.cycle import CycleWorkflow, ProductionCycleEngine
from ...processing.oee import OeeEngine
from ...processing.quality import ExternalQualitySync
from ...processing.runner import LineRuntime
from ...processing.shift import ShiftAutoReset
from ...processing.station_sequence import StationSequenceProvider
from ...processing.system import HeartbeatMonitor, TimeSyncService

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class EngineProvider:
    """
    Registers the tag-driven engines and wires their cross-links:
    a new cycle schedules an external quality sync, and a shift reset
    force-resets the active cycle.
    """

    @staticmethod
    def register(container: "BaseContainer") -> None:
        settings = get_settings()
        tag_map = settings.tag_map
        writer = container.get(TagWriter)

        sequence_provider = StationSequenceProvider(container.get(StationPositionRepository))
        container.register_singleton(StationSequenceProvider, sequence_provider)

        external_sync = ExternalQualitySync(
            api_client=container.get(QualityApiClient),
            probe=container.get(HostProbe),
            sequence_provider=sequence_provider,
            writer=writer,
            tag_map=tag_map,
            enabled=settings.external_enabled,
            previous_machine=settings.previous_machine_code,
            this_machine=settings.this_machine_code,
            total_items=settings.total_items,
            connect_wait=settings.external_connect_wait_seconds,
            connect_poll=settings.external_connect_poll_seconds,
            monitor_interval=settings.external_monitor_interval_seconds,
        )
        container.register_singleton(ExternalQualitySync, external_sync)

        workflow = CycleWorkflow(
            sequence_provider=sequence_provider,
            image_service=container.get(ProductionImageService),
            state_store=container.get(CycleStateStore),
            reset_delay=settings.cycle_reset_delay_seconds,
            on_cycle_started=external_sync.schedule_sync,
        )
        container.register_singleton(CycleWorkflow, workflow)

        cycle_engine = ProductionCycleEngine(
            workflow=workflow,
            watcher=container.get(ImageDropWatcher),
            writer=writer,
            tag_map=tag_map,
        )
        container.register_singleton(ProductionCycleEngine, cycle_engine)

        oee_engine = OeeEngine(
            writer=writer,
            production_log=container.get(ProductionLogRepository),
            sequence_provider=sequence_provider,
            tag_map=tag_map,
            ideal_cycle_seconds=settings.ideal_cycle_time_seconds,
        )
        container.register_singleton(OeeEngine, oee_engine)

        shift_reset = ShiftAutoReset(
            repository=container.get(ShiftRepository),
            writer=writer,
            tag_map=tag_map,
            reload_interval=settings.shift_reload_interval_seconds,
            ack_timeout=settings.reset_ack_timeout_seconds,
        )
        shift_reset.set_reset_callback(lambda: cycle_engine.request_reset("shift start"))
        container.register_singleton(ShiftAutoReset, shift_reset)

        heartbeat = HeartbeatMonitor(
            writer=writer,
            tag_map=tag_map,
            read_timeout=settings.read_timeout_seconds,
            heartbeat_timeout=settings.heartbeat_timeout_seconds,
            toggle_interval=settings.ipc_toggle_interval_seconds,
        )
        container.register_singleton(HeartbeatMonitor, heartbeat)

        time_sync = TimeSyncService(
            writer=writer,
            tag_map=tag_map,
            settle_delay=settings.time_sync_settle_seconds,
        )
        container.register_singleton(TimeSyncService, time_sync)

        container.register_singleton(
            LineRuntime,
            LineRuntime(
                writer=writer,
                heartbeat=heartbeat,
                time_sync=time_sync,
                cycle_engine=cycle_engine,
                oee_engine=oee_engine,
                shift_reset=shift_reset,
                external_sync=external_sync,
                poll_interval=settings.poll_interval_seconds,
            ),
        )
