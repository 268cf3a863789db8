# Standard library imports
import asyncio
import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Optional

# External package imports
from pydantic import ValidationError

# Local application imports
from ...domain.models.cycle_state import CycleStateRecord, StationResult

logger = logging.getLogger(__name__)


class CycleStateStore:
    """
    JSON state file read by the dashboard.

    Every station event is a load-merge-save keyed by station number, so
    replaying an event for the same station replaces its entry. Only one
    engine instance owns the folder.
    """

    def __init__(self, folder: Path, file_name: str = "CurrentCycleState.json"):
        self.folder = Path(folder)
        self.path = self.folder / file_name

    async def load(self) -> Optional[CycleStateRecord]:
        return await asyncio.to_thread(self._load)

    async def save(self, record: CycleStateRecord) -> None:
        await asyncio.to_thread(self._save, record)

    async def merge_station(
        self,
        batch_id: str,
        result: StationResult,
        updated_at: datetime,
    ) -> CycleStateRecord:
        """Merge one station result into the current record and persist it."""
        return await asyncio.to_thread(self._merge_station, batch_id, result, updated_at)

    async def clear(self) -> None:
        """Delete the state file only."""
        await asyncio.to_thread(self._clear)

    async def purge_folder(self) -> None:
        """Delete every file and sub-folder of the state folder."""
        await asyncio.to_thread(self._purge_folder)

    def _load(self) -> Optional[CycleStateRecord]:
        if not self.path.is_file():
            return None
        try:
            return CycleStateRecord.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.warning(f"Discarding unreadable cycle state file {self.path}: {e}")
            return None

    def _save(self, record: CycleStateRecord) -> None:
        self.folder.mkdir(parents=True, exist_ok=True)
        payload = record.model_dump_json(by_alias=True, indent=2)
        temp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        temp_path.write_text(payload, encoding="utf-8")
        temp_path.replace(self.path)

    def _merge_station(
        self,
        batch_id: str,
        result: StationResult,
        updated_at: datetime,
    ) -> CycleStateRecord:
        record = self._load()
        if record is None or record.batch_id != batch_id:
            record = CycleStateRecord(batch_id=batch_id)
        record.merge(result, batch_id, updated_at)
        self._save(record)
        return record

    def _clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass

    def _purge_folder(self) -> None:
        if not self.folder.is_dir():
            return
        for entry in self.folder.iterdir():
            try:
                if entry.is_dir():
                    shutil.rmtree(entry)
                else:
                    entry.unlink()
            except OSError as e:
                logger.warning(f"Could not delete {entry} while purging state folder: {e}")
