"""Dependency Injection package."""
from bindery.domain.base.di_contracts import DIScope

from .container import DIContainer
from .decorators import injectable, is_injectable
from .exceptions import (
    CircularDependencyError,
    DependencyRegistrationError,
    DependencyResolutionError,
    FactoryError,
    NotInstantiableError,
    RegistrationClosedError,
    UnresolvableBindingError,
    UntypedParameterError,
)

__all__ = [
    'DIContainer',
    'DIScope',
    'injectable',
    'is_injectable',
    'CircularDependencyError',
    'DependencyRegistrationError',
    'DependencyResolutionError',
    'FactoryError',
    'NotInstantiableError',
    'RegistrationClosedError',
    'UnresolvableBindingError',
    'UntypedParameterError',
]
