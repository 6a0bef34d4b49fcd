"""
Dependency Container

Process-wide lookup of the shared service instances built by the app
factory. Request handlers resolve the transfer service and the relay
configuration from it instead of importing globals.
"""

import threading
from typing import Any, Dict, Type, TypeVar

T = TypeVar('T')


class DependencyContainer:
    """
    Type-keyed registry of shared instances.

    Every registration is a singleton; the app builds each service once at
    startup and the handlers only read.
    """

    def __init__(self):
        self._services: Dict[Type, Any] = {}
        self._lock = threading.Lock()

    def register_singleton(self, interface: Type[T], implementation: T) -> None:
        with self._lock:
            self._services[interface] = implementation

    def resolve(self, interface: Type[T]) -> T:
        """
        Return the instance registered for a type.

        Raises:
            LookupError: If nothing was registered for the type
        """
        with self._lock:
            if interface not in self._services:
                raise LookupError(f"No service registered for {interface.__name__}")
            return self._services[interface]

    def is_registered(self, interface: Type) -> bool:
        with self._lock:
            return interface in self._services
