"""Binding table management for the DI container."""

import threading
from typing import Any, Dict, Optional, Tuple, Type

from bindery.domain.base.di_contracts import (
    DependencyRegistration,
    DIScope,
    candidate_keys,
    describe_key,
)
from bindery.infrastructure.di.exceptions import RegistrationClosedError
from bindery.infrastructure.logging.logger import get_logger

logger = get_logger(__name__)


class ServiceRegistry:
    """
    Stores bindings, cached singletons and the type catalog.

    Writes are accepted until seal() is called; after that every write raises
    RegistrationClosedError. Reads are always allowed.
    """

    def __init__(self):
        self._registrations: Dict[Any, DependencyRegistration] = {}
        self._singletons: Dict[Any, Any] = {}
        self._catalog: Dict[str, Type] = {}
        self._lock = threading.RLock()
        self._sealed = False

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    def seal(self) -> None:
        """Close the registration phase."""
        with self._lock:
            if not self._sealed:
                self._sealed = True
                logger.debug(f"Registry sealed with {len(self._registrations)} registrations")

    def _ensure_open(self, key: Any, action: str) -> None:
        if self._sealed:
            logger.error(f"Rejected {action} of {describe_key(key)} on sealed registry")
            raise RegistrationClosedError(key, action)

    def register(self, registration: DependencyRegistration) -> None:
        """Register a binding. An existing binding for the same key is replaced."""
        with self._lock:
            self._ensure_open(registration.key, "bind")

            replaced = registration.key in self._registrations
            self._registrations[registration.key] = registration
            # A stale cached singleton must not outlive its binding
            self._singletons.pop(registration.key, None)

            if registration.has_instance():
                self._singletons[registration.key] = registration.instance

            for candidate in (registration.key, registration.implementation):
                if isinstance(candidate, type):
                    self._add_to_catalog(candidate)

            logger.debug(
                f"{'Re-registered' if replaced else 'Registered'} {describe_key(registration.key)} "
                f"-> {registration.to_dict()['target']} ({registration.to_dict()['scope']})"
            )

    def catalog(self, *classes: Type) -> None:
        """Make classes reachable by their bare name and dotted path."""
        with self._lock:
            for cls in classes:
                self._ensure_open(cls, "catalog")
                if not isinstance(cls, type):
                    raise TypeError(f"Only classes can be catalogued, got {cls!r}")
                self._add_to_catalog(cls)

    def _add_to_catalog(self, cls: Type) -> None:
        for name in candidate_keys(cls)[1:]:
            existing = self._catalog.get(name)
            if existing is not None and existing is not cls:
                logger.debug(f"Catalog name '{name}' now refers to {describe_key(cls)}")
            self._catalog[name] = cls

    def lookup_type(self, name: str) -> Optional[Type]:
        """Find a catalogued class by bare name or dotted path."""
        with self._lock:
            return self._catalog.get(name)

    def find(self, key: Any) -> Optional[DependencyRegistration]:
        """Find the registration that applies to a key."""
        with self._lock:
            for candidate in candidate_keys(key):
                registration = self._registrations.get(candidate)
                if registration is not None:
                    return registration
            return None

    def is_registered(self, key: Any) -> bool:
        """Check if a key has a binding."""
        return self.find(key) is not None

    def get_singleton_instance(self, key: Any) -> Tuple[bool, Any]:
        """Get a cached singleton as a (found, instance) pair."""
        with self._lock:
            if key in self._singletons:
                return True, self._singletons[key]
            return False, None

    def set_singleton_instance(self, key: Any, instance: Any) -> None:
        """Cache singleton instance."""
        with self._lock:
            self._singletons[key] = instance

    def unregister(self, key: Any) -> bool:
        """Remove the binding registered under exactly this key."""
        with self._lock:
            self._ensure_open(key, "unbind")
            if key in self._registrations:
                del self._registrations[key]
                self._singletons.pop(key, None)
                logger.debug(f"Unregistered: {describe_key(key)}")
                return True
            return False

    def get_registrations(self) -> Dict[Any, DependencyRegistration]:
        """Get all registrations."""
        with self._lock:
            return self._registrations.copy()

    def clear(self) -> None:
        """Clear all registrations and reopen the registry."""
        with self._lock:
            self._registrations.clear()
            self._singletons.clear()
            self._catalog.clear()
            self._sealed = False
            logger.debug("Service registry cleared")

    def get_stats(self) -> Dict[str, Any]:
        """Get registry statistics."""
        with self._lock:
            return {
                "total_registrations": len(self._registrations),
                "singleton_instances": len(self._singletons),
                "catalogued_types": len(set(self._catalog.values())),
                "sealed": self._sealed,
                "scope_types": {
                    scope.value: sum(
                        1 for reg in self._registrations.values()
                        if (DIScope.SINGLETON if reg.is_singleton() else reg.scope) == scope
                    )
                    for scope in DIScope
                },
            }
