# Local application imports
from ...domain.models.oee import OeeResult


def compute_oee(
    uptime_min: float,
    downtime_min: float,
    total_parts: int,
    ok_parts: int,
    ng_parts: int,
    ideal_cycle_seconds: float,
    cycle_time: float = 0.0,
) -> OeeResult:
    """
    Availability, Performance and Quality from raw counters.

    Each ratio is 0 when its denominator is not positive. Performance uses
    operating time in seconds derived from uptime minutes. Ratios are not
    clamped to [0, 1].
    """
    total_time = uptime_min + downtime_min
    availability = uptime_min / total_time if total_time > 0 else 0.0
    quality = ok_parts / total_parts if total_parts > 0 else 0.0

    performance = 0.0
    if uptime_min > 0 and ideal_cycle_seconds > 0:
        performance = (ideal_cycle_seconds * total_parts) / (uptime_min * 60.0)

    return OeeResult(
        availability=availability,
        performance=performance,
        quality=quality,
        overall_oee=availability * performance * quality,
        operating_time=uptime_min,
        downtime=downtime_min,
        total_time=total_time,
        ok_parts=ok_parts,
        ng_parts=ng_parts,
        total_parts=total_parts,
        cycle_time=cycle_time,
    )
