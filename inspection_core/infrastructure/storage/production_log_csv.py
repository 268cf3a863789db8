# Standard library imports
import asyncio
import csv
import logging
import re
import threading
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

# Local application imports
from ...domain.models.oee import STATION_SLOTS, ProductionRecord
from ...domain.repositories.production_log_repository import ProductionLogRepository
from ...utils.datetime_utils import now

logger = logging.getLogger(__name__)

_DATE_TOKEN = re.compile(r"\{([^{}]+)\}")


def build_header() -> list[str]:
    header = ["2D_Code"]
    for station in range(STATION_SLOTS):
        header.extend([f"St{station}_result", f"St{station}_X", f"St{station}_Y", f"St{station}_Z"])
    header.extend(["OEE", "Availability", "Performance", "Quality"])
    header.extend(["Total_IN", "OK", "NG"])
    header.extend(["Uptime", "Downtime", "TotalTime", "CT"])
    return header


def build_row(record: ProductionRecord) -> list[str]:
    row = [record.display_code]
    for capture in record.stations[:STATION_SLOTS]:
        row.extend([capture.status, str(capture.x), str(capture.y), str(capture.z)])
    oee = record.oee
    if oee is None:
        row.extend([""] * 11)
        return row
    row.extend([str(oee.overall_oee), str(oee.availability), str(oee.performance), str(oee.quality)])
    row.extend([str(oee.total_parts), str(oee.ok_parts), str(oee.ng_parts)])
    row.extend([str(oee.operating_time), str(oee.downtime), str(oee.total_time), str(oee.cycle_time)])
    return row


def resolve_file_name(pattern: str, moment: datetime) -> str:
    """
    Expand `{strftime}` tokens in a file name, e.g. `Production_{%Y%m%d}.csv`.

    An empty pattern yields the daily default; `.csv` is appended when missing.
    """
    name = pattern.strip() if pattern else ""
    if not name:
        name = "Production_{%Y%m%d}.csv"
    name = _DATE_TOKEN.sub(lambda match: moment.strftime(match.group(1)), name)
    if not name.lower().endswith(".csv"):
        name += ".csv"
    return name


class CsvProductionLog(ProductionLogRepository):
    """
    Append-only CSV production log, one row per finalized cycle.

    The file name is resolved on every append so a date token rolls the log
    over to a new file; the header is written when a file is created.
    """

    def __init__(
        self,
        folder: Path,
        file_name_pattern: str,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.folder = Path(folder)
        self.file_name_pattern = file_name_pattern
        self._clock = clock or now
        self._lock = threading.Lock()

    def current_path(self) -> Path:
        return self.folder / resolve_file_name(self.file_name_pattern, self._clock())

    async def append_record(self, record: ProductionRecord) -> None:
        await asyncio.to_thread(self._append, record)

    def _append(self, record: ProductionRecord) -> None:
        row = build_row(record)
        with self._lock:
            path = self.current_path()
            path.parent.mkdir(parents=True, exist_ok=True)
            is_new = not path.exists()
            with open(path, "a", encoding="utf-8", newline="") as handle:
                writer = csv.writer(handle)
                if is_new:
                    writer.writerow(build_header())
                writer.writerow(row)
        logger.info(f"Production record appended for {record.display_code} -> {path.name}")
