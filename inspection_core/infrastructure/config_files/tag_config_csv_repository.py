# Standard library imports
import asyncio
import logging
from pathlib import Path

# Local application imports
from .csv_rows import read_data_rows
from ...core.exceptions import ConfigurationError
from ...domain.models.tag_config import TagConfig
from ...domain.repositories.tag_config_repository import TagConfigRepository

logger = logging.getLogger(__name__)

# Id,TagNo,Name,PLCNo,ModbusAddress,Length,AlgoNo,DataType,BitNo,Offset,Span,Description,Remark,CanWrite
_MIN_COLUMNS = 5


def _int(value: str, default: int = 0) -> int:
    try:
        return int(value)
    except ValueError:
        return default


class TagConfigCsvRepository(TagConfigRepository):
    """
    Tag configuration read from the PLC tag CSV file.

    The file is re-read on every call so edits made by the configuration
    screens are picked up without a restart.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    async def get_all_tags(self) -> list[TagConfig]:
        return await asyncio.to_thread(self._read)

    def _read(self) -> list[TagConfig]:
        if not self.path.is_file():
            raise ConfigurationError(
                f"Tag configuration file not found: {self.path}",
                details={"path": str(self.path)},
            )

        tags: list[TagConfig] = []
        for line_no, row in read_data_rows(self.path):
            if len(row) < _MIN_COLUMNS:
                logger.warning(f"Skipping short tag row at {self.path}:{line_no}")
                continue
            padded = row + [""] * (14 - len(row))
            try:
                tags.append(
                    TagConfig(
                        id=int(padded[0]),
                        tag_no=int(padded[1]),
                        name=padded[2],
                        plc_no=int(padded[3]),
                        address=int(padded[4]),
                        length=_int(padded[5], 1),
                        algo_no=_int(padded[6]),
                        data_type=_int(padded[7]),
                        bit_no=_int(padded[8]),
                        offset=_int(padded[9]),
                        span=_int(padded[10]),
                        description=padded[11],
                        remark=padded[12],
                        can_write=padded[13].lower() == "true",
                    )
                )
            except ValueError as e:
                logger.warning(f"Skipping invalid tag row at {self.path}:{line_no}: {e}")
        return tags
