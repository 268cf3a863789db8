from .image_drop_watcher import ImageDropWatcher
from .production_image_service import ProductionImageService

__all__ = ["ImageDropWatcher", "ProductionImageService"]
