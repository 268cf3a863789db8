from .config import Settings, TagMap, get_settings
from .exceptions import (
    ConfigurationError,
    ExternalSyncError,
    ImageNotFoundError,
    InspectionCoreError,
    TagWriteError,
)

__all__ = [
    "Settings",
    "TagMap",
    "get_settings",
    "InspectionCoreError",
    "ConfigurationError",
    "TagWriteError",
    "ImageNotFoundError",
    "ExternalSyncError",
]
