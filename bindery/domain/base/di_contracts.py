"""
Dependency injection contracts.

These types describe a binding independently of the container that stores
it: what key is bound, how the value is produced, and how long it lives.
"""
import inspect
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional


class DIScope(str, Enum):
    """Lifetime of a resolved value."""

    TRANSIENT = "transient"
    SINGLETON = "singleton"


class RegistrationKind(str, Enum):
    """How a registration produces its value."""

    INSTANCE = "instance"
    FACTORY = "factory"
    TYPE = "type"
    IDENTIFIER = "identifier"


_UNSET = object()


def describe_key(key: Any) -> str:
    """Human readable name for a key (class, string or other object)."""
    if isinstance(key, str):
        return key
    if isinstance(key, type):
        return f"{key.__module__}.{key.__qualname__}"
    name = getattr(key, "__qualname__", None) or getattr(key, "__name__", None)
    return name if name else repr(key)


def candidate_keys(key: Any) -> List[Any]:
    """
    Keys to try, in order, when looking up a binding for ``key``.

    A class is also reachable by its dotted path and by its bare name, so that
    ``bind("PaymentInterface", ...)`` satisfies a parameter annotated with the
    ``PaymentInterface`` class.
    """
    if isinstance(key, type):
        return [key, f"{key.__module__}.{key.__qualname__}", key.__name__]
    return [key]


@dataclass
class DependencyRegistration:
    """One row of the binding table."""

    key: Any
    implementation: Any = None
    factory: Optional[Callable[..., Any]] = None
    instance: Any = _UNSET
    scope: DIScope = DIScope.TRANSIENT
    dependencies: Optional[List[Any]] = field(default=None)

    @classmethod
    def for_target(
        cls,
        key: Any,
        target: Any = None,
        scope: DIScope = DIScope.TRANSIENT,
        dependencies: Optional[List[Any]] = None,
    ) -> "DependencyRegistration":
        """
        Build a registration from a bind target.

        A class or string target is an implementation, any other callable is a
        factory, and ``None`` binds the key to itself.
        """
        if target is None:
            target = key
        if isinstance(target, (type, str)):
            return cls(key=key, implementation=target, scope=scope, dependencies=dependencies)
        if callable(target):
            return cls(key=key, factory=target, scope=scope, dependencies=dependencies)
        raise TypeError(
            f"Cannot bind {describe_key(key)} to {target!r}: "
            "target must be a class, a type name or a factory callable"
        )

    @property
    def kind(self) -> RegistrationKind:
        if self.has_instance():
            return RegistrationKind.INSTANCE
        if self.has_factory():
            return RegistrationKind.FACTORY
        if isinstance(self.implementation, type):
            return RegistrationKind.TYPE
        return RegistrationKind.IDENTIFIER

    def has_instance(self) -> bool:
        return self.instance is not _UNSET

    def has_factory(self) -> bool:
        return self.factory is not None

    def is_singleton(self) -> bool:
        return self.scope == DIScope.SINGLETON or self.has_instance()

    def is_self_binding(self) -> bool:
        """True when the key is bound to itself rather than to another key."""
        return self.implementation is self.key or (
            isinstance(self.implementation, str) and self.implementation == self.key
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert registration to a JSON-serialisable dictionary."""
        if self.has_instance():
            target = type(self.instance).__name__
        elif self.has_factory():
            target = describe_key(self.factory)
        else:
            target = describe_key(self.implementation)

        data: Dict[str, Any] = {
            "key": describe_key(self.key),
            "kind": self.kind.value,
            "target": target,
            "scope": DIScope.SINGLETON.value if self.is_singleton() else self.scope.value,
        }
        if self.dependencies is not None:
            data["dependencies"] = [describe_key(dep) for dep in self.dependencies]
        return data


def is_abstract_contract(cls: Any) -> bool:
    """Check if a class is a contract that cannot be instantiated directly."""
    if not isinstance(cls, type):
        return False
    return inspect.isabstract(cls) or bool(getattr(cls, "_is_protocol", False))
