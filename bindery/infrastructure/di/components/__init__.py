"""
DI Container components package.

This package provides modular dependency injection components:
- ServiceRegistry: Binding table, singleton cache and type catalog
- DependencyResolver: Constructor introspection and dependency plans
"""

from .dependency_resolver import DependencyPlan, DependencyResolver, ParameterPlan
from .service_registry import ServiceRegistry

__all__ = [
    'DependencyPlan',
    'DependencyResolver',
    'ParameterPlan',
    'ServiceRegistry',
]
