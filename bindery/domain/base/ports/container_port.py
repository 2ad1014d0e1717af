"""Container port for dependency injection concerns."""
from abc import ABC, abstractmethod
from typing import Any


class ContainerPort(ABC):
    """Port for dependency injection container operations."""

    @abstractmethod
    def bind(self, key: Any, target: Any = None, **options: Any) -> None:
        """Register or overwrite the binding for a key."""

    @abstractmethod
    def resolve(self, key: Any) -> Any:
        """Produce an instance for a key."""

    @abstractmethod
    def has(self, key: Any) -> bool:
        """Check if a binding is registered for a key."""
