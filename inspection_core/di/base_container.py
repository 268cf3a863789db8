# Standard library imports
import logging
from typing import Any, Dict, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseContainer:
    """
    Minimal service registry keyed by type.

    Every service in the inspection core is a process-wide singleton, so the
    container only stores instances.
    """

    def __init__(self) -> None:
        self._singletons: Dict[Type[Any], Any] = {}

    def register_singleton(self, service_type: Type[T], instance: T) -> None:
        self._singletons[service_type] = instance

    def get(self, service_type: Type[T]) -> T:
        try:
            return self._singletons[service_type]
        except KeyError:
            raise KeyError(f"Service not registered: {service_type.__name__}") from None

    def has(self, service_type: Type[Any]) -> bool:
        return service_type in self._singletons
