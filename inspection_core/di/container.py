# Local application imports
from .base_container import BaseContainer
from .providers import (
    EngineProvider,
    InfrastructureProvider,
    RepositoryProvider,
)

# Each provider only reads services registered by the ones before it:
# file repositories, then writer / images / external clients, then engines.
PROVIDERS = (
    RepositoryProvider,
    InfrastructureProvider,
    EngineProvider,
)


class DIContainer(BaseContainer):
    """Composition root of the inspection line; builds every singleton eagerly."""

    def __init__(self) -> None:
        super().__init__()
        for provider in PROVIDERS:
            provider.register(self)


_container: DIContainer | None = None


def get_container() -> DIContainer:
    """
    Get the process-wide container, building it on first use.

    The engines are created here, outside the event loop; they only create
    tasks once the runtime is started from the lifespan.
    """
    global _container
    if _container is None:
        _container = DIContainer()
    return _container


def reset_container() -> None:
    """Drop the process-wide container so the next call rebuilds it."""
    global _container
    _container = None
