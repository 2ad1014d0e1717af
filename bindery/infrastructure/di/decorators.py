"""
Injectable decorator for declaring how a class is resolved.

The decorator only attaches metadata. Constructors are left untouched, so a
decorated class can still be instantiated by hand; the container reads the
metadata when it builds the class.
"""
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Tuple, Type, TypeVar, Union, overload

from bindery.infrastructure.logging.logger import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


@dataclass(frozen=True)
class InjectableMetadata:
    """Resolution metadata attached to an @injectable class."""

    singleton: bool = False
    dependencies: Optional[Tuple[Any, ...]] = None


@overload
def injectable(cls: Type[T]) -> Type[T]: ...


@overload
def injectable(
    *, singleton: bool = False, dependencies: Optional[Sequence[Any]] = None
) -> Callable[[Type[T]], Type[T]]: ...


def injectable(
    cls: Optional[Type[T]] = None,
    *,
    singleton: bool = False,
    dependencies: Optional[Sequence[Any]] = None,
) -> Union[Type[T], Callable[[Type[T]], Type[T]]]:
    """
    Mark a class as injectable.

    Usage:
        @injectable
        class CheckoutController:
            def __init__(self, payment: PaymentInterface): ...

        @injectable(singleton=True, dependencies=["PaymentInterface", AuditLog])
        class CheckoutController:
            def __init__(self, payment, audit): ...

    Args:
        cls: The class to mark (when used without arguments)
        singleton: Cache the first resolved instance when the class is
            registered through DIContainer.register_injectable_class
        dependencies: Keys resolved in order and passed positionally to the
            constructor, instead of introspecting its annotations

    Returns:
        The same class with metadata attached
    """

    def decorate(target: Type[T]) -> Type[T]:
        if not isinstance(target, type):
            raise TypeError(f"@injectable can only decorate classes, got {target!r}")
        metadata = InjectableMetadata(
            singleton=singleton,
            dependencies=tuple(dependencies) if dependencies is not None else None,
        )
        target._injectable_metadata = metadata
        logger.debug(f"Made {target.__name__} injectable")
        return target

    if cls is not None:
        return decorate(cls)
    return decorate


def is_injectable(cls: Type) -> bool:
    """Check if a class has been marked as injectable."""
    return get_injectable_metadata(cls) is not None


def get_injectable_metadata(cls: Type) -> Optional[InjectableMetadata]:
    """Get metadata of an injectable class, ignoring metadata inherited from a base."""
    if not isinstance(cls, type):
        return None
    return cls.__dict__.get("_injectable_metadata")
