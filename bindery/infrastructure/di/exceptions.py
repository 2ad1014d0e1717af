"""
Dependency injection exceptions.

Every resolution failure derives from DependencyResolutionError, which records
the key that failed and, when known, the type and parameter that required it.
"""
from typing import Any, List, Optional

from bindery.domain.base.di_contracts import describe_key
from bindery.domain.base.exceptions import DomainException


class DependencyResolutionError(DomainException):
    """Base exception for failures while resolving a key."""

    def __init__(
        self,
        dependency_key: Any,
        message: str,
        parent_type: Optional[Any] = None,
        parameter_name: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        self.dependency_key = dependency_key
        self.parent_type = parent_type
        self.parameter_name = parameter_name
        self.cause = cause

        full_message = message
        if parent_type is not None:
            full_message += f" (required by {describe_key(parent_type)}"
            if parameter_name:
                full_message += f" parameter '{parameter_name}'"
            full_message += ")"

        details = {"key": describe_key(dependency_key)}
        if parent_type is not None:
            details["parent"] = describe_key(parent_type)
        if parameter_name:
            details["parameter"] = parameter_name
        super().__init__(full_message, details=details)


class UnresolvableBindingError(DependencyResolutionError):
    """Raised when a key has no binding and is not itself instantiable."""

    def __init__(
        self,
        dependency_key: Any,
        reason: str = "no binding registered and it is not instantiable",
        parent_type: Optional[Any] = None,
        parameter_name: Optional[str] = None,
    ):
        super().__init__(
            dependency_key,
            f"Cannot resolve '{describe_key(dependency_key)}': {reason}",
            parent_type,
            parameter_name,
        )


class NotInstantiableError(DependencyResolutionError):
    """Raised when a concrete type's constructor cannot be satisfied."""

    def __init__(
        self,
        dependency_key: Any,
        reason: str,
        parameter_name: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(
            dependency_key,
            f"Cannot instantiate '{describe_key(dependency_key)}': {reason}",
            None,
            parameter_name,
            cause,
        )


class UntypedParameterError(NotInstantiableError):
    """Raised when a constructor parameter has neither annotation nor default."""

    def __init__(self, owner: Any, parameter_name: str):
        super().__init__(
            owner,
            f"parameter '{parameter_name}' has no type annotation and no default value",
            parameter_name,
        )


class FactoryError(DependencyResolutionError):
    """Raised when a registered factory fails."""

    def __init__(self, dependency_key: Any, message: str, cause: Optional[BaseException] = None):
        super().__init__(dependency_key, message, cause=cause)


class CircularDependencyError(DependencyResolutionError, RecursionError):
    """
    Raised when a key re-enters its own resolution.

    Also a RecursionError, so callers that treat a binding cycle as stack
    exhaustion keep working.
    """

    def __init__(self, chain: List[Any]):
        self.chain = list(chain)
        rendered = " -> ".join(describe_key(key) for key in self.chain)
        super().__init__(self.chain[-1], f"Circular dependency detected: {rendered}")


class DependencyRegistrationError(DomainException):
    """Raised when a binding cannot be registered."""


class RegistrationClosedError(DependencyRegistrationError):
    """Raised when registering after the container has been sealed."""

    def __init__(self, key: Any, action: str = "bind"):
        self.key = key
        super().__init__(
            f"Cannot {action} '{describe_key(key)}': the container is sealed "
            "and no longer accepts registrations",
            details={"key": describe_key(key), "action": action},
        )
