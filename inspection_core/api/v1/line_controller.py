# Standard library imports
from dataclasses import asdict

# External package imports
from fastapi import APIRouter

# Local application imports
from ...application.dto.line_dto import (
    CycleResponse,
    HeartbeatResponse,
    OeeResponse,
    QualityResponse,
    StationResultResponse,
)
from ...di.container import get_container
from ...processing.runner import LineRuntime


router = APIRouter(tags=["line"])


@router.get("/oee", response_model=OeeResponse)
async def get_oee() -> OeeResponse:
    """
    Live OEE computed from the most recent snapshot

    Returns:
        OeeResponse with the three ratios, overall OEE and raw counters
    """
    runtime = get_container().get(LineRuntime)
    result = runtime.oee_engine.calculate(runtime.last_snapshot)
    return OeeResponse(**asdict(result))


@router.get("/heartbeat", response_model=HeartbeatResponse)
async def get_heartbeat() -> HeartbeatResponse:
    """Controller liveness and local clock sync state"""
    runtime = get_container().get(LineRuntime)
    state = runtime.heartbeat.state
    return HeartbeatResponse(
        connected=state.connected,
        ipc_pulse=state.ipc_value,
        time_synced=runtime.time_sync.synced,
    )


@router.get("/cycle", response_model=CycleResponse)
async def get_cycle() -> CycleResponse:
    """
    Active cycle and the station results recorded for it

    Returns:
        CycleResponse; stations are empty when no state record exists
    """
    workflow = get_container().get(LineRuntime).cycle_engine.workflow
    snapshot = workflow.snapshot()
    record = await workflow.load_state_record()

    stations = {}
    last_updated = None
    if record is not None:
        last_updated = record.last_updated
        stations = {
            number: StationResultResponse(**result.model_dump())
            for number, result in record.stations.items()
        }

    return CycleResponse(
        active=snapshot.active,
        code=snapshot.code,
        step=snapshot.step,
        sequence_length=snapshot.sequence_length,
        stations=stations,
        last_updated=last_updated,
    )


@router.get("/quality", response_model=QualityResponse)
async def get_quality() -> QualityResponse:
    """External quality system connectivity and per-step quarantine flags"""
    status = get_container().get(LineRuntime).external_sync.status()
    return QualityResponse(
        enabled=status.enabled,
        connected=status.connected,
        quarantine=list(status.quarantine),
        serials=status.serials,
    )
