from .repository_provider import RepositoryProvider
from .infrastructure_provider import InfrastructureProvider
from .engine_provider import EngineProvider


__all__ = [
    "RepositoryProvider",
    "InfrastructureProvider",
    "EngineProvider",
]
