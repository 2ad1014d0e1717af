"""bindery - Reflective Binding Resolver.

This package provides a small dependency injection container that maps
abstract identifiers (interface classes or names) to concrete constructors
and recursively instantiates a requested type by inspecting the declared
parameter types of its constructor.

Key Components:
    - domain: DI contracts, registration records and base exceptions
    - infrastructure: the container, binding registry, resolver and logging
    - config: pydantic configuration schemas and the configuration manager
    - cli: command line front-end for binding, resolving and explaining keys
    - demo: toy Strategy/Observer collaborators used to exercise resolution

Usage:
    >>> from bindery import DIContainer
    >>> container = DIContainer()
    >>> container.bind("PaymentInterface", "CreditCardPayment")
    >>> controller = container.resolve("CheckoutController")
"""

from ._version import __version__
from .infrastructure.di import DIContainer, DIScope, injectable

__all__ = ["__version__", "DIContainer", "DIScope", "injectable"]
