"""Base domain layer - shared kernel for the resolver."""

from .di_contracts import DependencyRegistration, DIScope, RegistrationKind
from .exceptions import DomainException
from .ports import ContainerPort

__all__ = [
    "ContainerPort",
    "DependencyRegistration",
    "DIScope",
    "DomainException",
    "RegistrationKind",
]
