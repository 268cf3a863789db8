"""Configuration file repositories provider for dependency injection."""
from typing import TYPE_CHECKING

from ...core.config import get_settings
from ...domain.repositories.production_log_repository import ProductionLogRepository
from ...domain.repositories.shift_repository import ShiftRepository
from ...domain.repositories.station_position_repository import StationPositionRepository
from ...domain.repositories.tag_config_repository import TagConfigRepository
from ...infrastructure.config_files import (
    ShiftCsvRepository,
    StationPositionJsonRepository,
    TagConfigCsvRepository,
)
from ...infrastructure.storage import CsvProductionLog

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class RepositoryProvider:
    """Registers the file-backed collaborators under their abstract contracts"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        settings = get_settings()

        container.register_singleton(
            TagConfigRepository,
            TagConfigCsvRepository(settings.data_file(settings.plc_tags_file_name)),
        )
        container.register_singleton(
            StationPositionRepository,
            StationPositionJsonRepository(settings.data_file(settings.servo_positions_file_name)),
        )
        container.register_singleton(
            ShiftRepository,
            ShiftCsvRepository(settings.data_file(settings.shift_file_name)),
        )
        container.register_singleton(
            ProductionLogRepository,
            CsvProductionLog(settings.production_log_folder, settings.production_log_file_name),
        )
