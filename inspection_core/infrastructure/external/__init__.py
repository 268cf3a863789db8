"""External service clients for communicating with external systems"""

from .quality_api_client import QualityApiClient
from .host_probe import HostProbe

__all__ = [
    "QualityApiClient",
    "HostProbe",
]
