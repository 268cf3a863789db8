"""Infrastructure services provider for dependency injection."""
from typing import TYPE_CHECKING

from ...core.config import get_settings
from ...domain.repositories.tag_config_repository import TagConfigRepository
from ...infrastructure.external import HostProbe, QualityApiClient
from ...infrastructure.http_client_factory import get_shared_http_client
from ...infrastructure.images import ImageDropWatcher, ProductionImageService
from ...infrastructure.plc import TagWriter
from ...infrastructure.storage import CycleStateStore

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class InfrastructureProvider:
    """Registers controller writes, image handling, state file and external clients"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        settings = get_settings()

        container.register_singleton(TagWriter, TagWriter(container.get(TagConfigRepository)))

        container.register_singleton(
            ImageDropWatcher,
            ImageDropWatcher(
                settings.temp_image_folder,
                poll_interval=settings.image_poll_interval_seconds,
                timeout=settings.image_wait_timeout_seconds,
            ),
        )
        container.register_singleton(
            ProductionImageService,
            ProductionImageService(settings.base_output_dir, settings.ui_image_folder),
        )
        # The dashboard reads the state file and the UI images from the same folder
        container.register_singleton(
            CycleStateStore,
            CycleStateStore(settings.ui_image_folder, settings.cycle_state_file_name),
        )

        http_client = get_shared_http_client(settings.external_http_timeout_seconds, name="quality")
        container.register_singleton(QualityApiClient, QualityApiClient(http_client=http_client))
        container.register_singleton(
            HostProbe,
            HostProbe(settings.external_host, settings.external_ping_timeout_ms),
        )
