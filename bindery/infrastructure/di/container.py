"""
Dependency Injection Container implementation.

The container maps abstract keys (interface classes or their names) to
concrete types, type identifiers or factories, and builds concrete types by
recursively resolving the declared types of their constructor parameters.
Every container owns its own binding table; there is no process-wide
instance.
"""
import threading
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence, Set, Type

from bindery.config.schemas.container_schema import ContainerConfig
from bindery.domain.base.di_contracts import (
    DependencyRegistration,
    DIScope,
    candidate_keys,
    describe_key,
    is_abstract_contract,
)
from bindery.domain.base.ports import ContainerPort
from bindery.infrastructure.di.components.dependency_resolver import (
    DependencyResolver,
    ParameterPlan,
    describe_annotation,
    extract_optional_inner_type,
    is_primitive_type,
)
from bindery.infrastructure.di.components.service_registry import ServiceRegistry
from bindery.infrastructure.di.decorators import get_injectable_metadata
from bindery.infrastructure.di.exceptions import (
    CircularDependencyError,
    DependencyResolutionError,
    FactoryError,
    NotInstantiableError,
    UnresolvableBindingError,
    UntypedParameterError,
)
from bindery.infrastructure.logging.logger import get_logger
from bindery.infrastructure.utilities.imports import try_import_class

logger = get_logger(__name__)


@contextmanager
def timed_operation(operation_name: str) -> Iterator[None]:
    """Context manager to time and log an operation."""
    start_time = time.time()
    try:
        yield
    finally:
        elapsed_time = time.time() - start_time
        logger.debug(f"{operation_name} completed in {elapsed_time:.4f}s")


class DIContainer(ContainerPort):
    """
    Dependency injection container.

    Features:
    - bind() abstract keys to classes, type names or factories (last write wins)
    - resolve() keys, recursively satisfying constructor parameters
    - transient resolution by default, singleton() as explicit opt-in
    - one-shot registration barrier via seal() or seal_on_first_resolve
    - cycle detection raising CircularDependencyError (a RecursionError)
    """

    def __init__(self, config: Optional[ContainerConfig] = None):
        """Initialize container with its own binding table."""
        self._config = config or ContainerConfig()
        self._registry = ServiceRegistry()
        self._resolver = DependencyResolver()
        self._local = threading.local()
        # Held while a singleton is built so concurrent resolves build it once
        self._singleton_lock = threading.RLock()

    @property
    def config(self) -> ContainerConfig:
        return self._config

    @property
    def is_sealed(self) -> bool:
        return self._registry.is_sealed

    # Registration

    def bind(
        self,
        key: Any,
        target: Any = None,
        scope: Optional[DIScope] = None,
        dependencies: Optional[Sequence[Any]] = None,
    ) -> None:
        """
        Register or overwrite the binding for a key.

        Nothing about the target is validated here; problems surface when the
        key is resolved.

        Args:
            key: Abstract key, a class or a string
            target: Concrete class, type identifier string, or a factory
                called with this container. Defaults to the key itself.
            scope: Lifetime of resolved values; the configured default scope
                when omitted
            dependencies: Keys to resolve and pass positionally to the target
                constructor instead of introspecting it

        Raises:
            RegistrationClosedError: If the container is sealed
        """
        registration = DependencyRegistration.for_target(
            key,
            target,
            scope=scope or self._config.default_scope,
            dependencies=list(dependencies) if dependencies is not None else None,
        )
        self._registry.register(registration)

    def singleton(self, key: Any, target: Any = None, dependencies: Optional[Sequence[Any]] = None) -> None:
        """Bind a key whose first resolved value is cached and reused."""
        self.bind(key, target, scope=DIScope.SINGLETON, dependencies=dependencies)

    def instance(self, key: Any, instance: Any) -> None:
        """Bind a key to a pre-built object."""
        self._registry.register(
            DependencyRegistration(key=key, instance=instance, scope=DIScope.SINGLETON)
        )

    def catalog(self, *classes: Type) -> None:
        """Make classes resolvable by their bare name or dotted path."""
        self._registry.catalog(*classes)

    def register_injectable_class(self, cls: Type) -> None:
        """
        Register a class using the metadata from its @injectable decorator.

        Classes without metadata are registered as transient self-bindings.
        """
        metadata = get_injectable_metadata(cls)
        scope = DIScope.SINGLETON if metadata is not None and metadata.singleton else None
        self.bind(cls, cls, scope=scope)
        logger.debug(f"Registered injectable class {cls.__name__}")

    def unbind(self, key: Any) -> bool:
        """
        Remove the binding registered under a key.

        Returns:
            True if a binding was removed, False if none was found
        """
        return self._registry.unregister(key)

    def seal(self) -> None:
        """Close the registration phase; later registrations raise."""
        self._registry.seal()

    def clear(self) -> None:
        """Clear all registrations and reopen the container."""
        self._registry.clear()
        self._resolver.clear()
        logger.debug("Cleared all registrations")

    # Queries

    def has(self, key: Any) -> bool:
        """Check if a key has a binding."""
        return self._registry.is_registered(key)

    def is_bound(self, key: Any) -> bool:
        return self.has(key)

    def get_registrations(self) -> Dict[Any, DependencyRegistration]:
        return self._registry.get_registrations()

    def get_stats(self) -> Dict[str, Any]:
        return self._registry.get_stats()

    # Resolution

    def resolve(self, key: Any) -> Any:
        """
        Produce an instance for a key.

        Bound keys use their registration; unbound keys are instantiated
        directly when they name a concrete class.

        Args:
            key: Class or string key to resolve

        Returns:
            The resolved instance

        Raises:
            UnresolvableBindingError: If the key is unbound and not instantiable
            NotInstantiableError: If a constructor parameter cannot be satisfied
            FactoryError: If a registered factory fails
            CircularDependencyError: If the key depends on itself
        """
        stack = self._resolution_stack()
        if not stack and self._config.seal_on_first_resolve and not self.is_sealed:
            self.seal()

        if self._config.detect_cycles and key in stack:
            chain = stack + [key]
            logger.error(f"Circular dependency while resolving {describe_key(key)}")
            raise CircularDependencyError(chain)

        logger.debug(f"Resolving dependency: {describe_key(key)}")
        stack.append(key)
        try:
            with timed_operation(f"Resolve {describe_key(key)}"):
                return self._resolve_key(key)
        finally:
            stack.pop()

    def get_optional(self, key: Any) -> Optional[Any]:
        """Resolve a key, returning None instead of raising a resolution error."""
        try:
            return self.resolve(key)
        except CircularDependencyError:
            raise
        except DependencyResolutionError as e:
            logger.debug(f"Optional dependency {describe_key(key)} not resolved: {e}")
            return None

    def _resolution_stack(self) -> List[Any]:
        stack = getattr(self._local, "stack", None)
        if stack is None:
            stack = []
            self._local.stack = stack
        return stack

    def _resolve_key(self, key: Any) -> Any:
        registration = self._registry.find(key)

        if registration is None and isinstance(key, str):
            located = self._locate_type(key)
            if located is not None:
                registration = self._registry.find(located)
                if registration is None:
                    return self._build_unbound(located)

        if registration is None:
            return self._build_unbound(key)

        return self._from_registration(registration)

    def _from_registration(self, registration: DependencyRegistration) -> Any:
        if registration.has_instance():
            logger.debug(f"Found pre-registered instance for {describe_key(registration.key)}")
            return registration.instance

        if registration.is_singleton():
            found, instance = self._registry.get_singleton_instance(registration.key)
            if found:
                logger.debug(f"Using existing singleton instance for {describe_key(registration.key)}")
                return instance
            with self._singleton_lock:
                found, instance = self._registry.get_singleton_instance(registration.key)
                if found:
                    return instance
                instance = self._produce(registration)
                self._registry.set_singleton_instance(registration.key, instance)
            logger.debug(f"Singleton instance created for {describe_key(registration.key)}")
            return instance

        return self._produce(registration)

    def _produce(self, registration: DependencyRegistration) -> Any:
        if registration.has_factory():
            return self._call_factory(registration)

        target = registration.implementation
        if self._builds_target(registration):
            concrete = self._target_type(target)
            if concrete is None:
                raise UnresolvableBindingError(target, "no type with that name could be located")
            if is_abstract_contract(concrete):
                raise UnresolvableBindingError(concrete, "abstract contract bound to itself")
            return self._instantiate(concrete, registration.dependencies)

        # The target is another key; follow its own binding
        return self.resolve(target)

    def _target_type(self, target: Any) -> Any:
        return self._locate_type(target) if isinstance(target, str) else target

    def _builds_target(self, registration: DependencyRegistration) -> bool:
        """
        Check if a registration instantiates its target instead of following it.

        A key bound to the type it names, by bare name or dotted path (e.g.
        `bind("CreditCardPayment", CreditCardPayment)`), is a self-binding.
        """
        if registration.is_self_binding() or registration.dependencies is not None:
            return True
        concrete = self._target_type(registration.implementation)
        return isinstance(concrete, type) and registration.key in candidate_keys(concrete)

    def _is_registered(self, key: Any) -> bool:
        """Check for a binding under a key, or under the type a string key names."""
        if self._registry.find(key) is not None:
            return True
        if isinstance(key, str):
            located = self._locate_type(key)
            return located is not None and self._registry.find(located) is not None
        return False

    def _call_factory(self, registration: DependencyRegistration) -> Any:
        key_name = describe_key(registration.key)
        logger.debug(f"Using factory to create instance of {key_name}")
        try:
            instance = registration.factory(self)
        except (DependencyResolutionError, RecursionError):
            raise
        except Exception as e:
            logger.error(f"Factory failed to create instance of {key_name}: {str(e)}")
            raise FactoryError(registration.key, f"Factory function failed: {str(e)}", e) from e
        logger.debug(f"Factory successfully created instance of {key_name}")
        return instance

    def _build_unbound(self, key: Any) -> Any:
        if isinstance(key, str):
            raise UnresolvableBindingError(key, "no binding registered and no type with that name could be located")
        if not isinstance(key, type):
            raise UnresolvableBindingError(key, "no binding registered and it is not a class")
        if is_abstract_contract(key):
            raise UnresolvableBindingError(key, "abstract contract with no registered implementation")

        logger.debug(f"No registration found for {key.__name__}, attempting direct creation")
        return self._instantiate(key)

    def _locate_type(self, name: str) -> Optional[Type]:
        located = self._registry.lookup_type(name)
        if located is None:
            located = try_import_class(name)
        return located

    def _instantiate(self, cls: Type, dependencies: Optional[Sequence[Any]] = None) -> Any:
        """
        Create an instance of a concrete class, resolving its constructor parameters.

        Raises:
            NotInstantiableError: If a parameter cannot be satisfied or the
                constructor itself fails
        """
        with timed_operation(f"Create instance of {cls.__name__}"):
            plan = self._resolver.plan_for(cls, dependencies)

            args: List[Any] = []
            kwargs: Dict[str, Any] = {}
            for parameter in plan.parameters:
                value = self._resolve_parameter(cls, parameter)
                if parameter.keyword_only:
                    kwargs[parameter.name] = value
                else:
                    args.append(value)

            try:
                instance = cls(*args, **kwargs)
            except (DependencyResolutionError, RecursionError):
                raise
            except Exception as e:
                logger.error(f"Failed to instantiate {cls.__name__} with resolved dependencies: {str(e)}")
                raise NotInstantiableError(cls, f"constructor raised {type(e).__name__}: {str(e)}", cause=e) from e

            logger.debug(f"Successfully created instance of {cls.__name__}")
            return instance

    def _resolve_parameter(self, owner: Type, parameter: ParameterPlan) -> Any:
        if not parameter.is_typed:
            if parameter.has_default:
                return parameter.default
            logger.error(f"Cannot resolve untyped parameter '{parameter.name}' for {owner.__name__}")
            raise UntypedParameterError(owner, parameter.name)

        annotation = parameter.annotation
        if parameter.optional:
            annotation = extract_optional_inner_type(annotation)

        if is_primitive_type(annotation):
            if parameter.has_default:
                return parameter.default
            if parameter.optional:
                return None
            logger.error(
                f"Cannot supply scalar parameter '{parameter.name}' "
                f"({describe_annotation(annotation)}) for {owner.__name__}"
            )
            raise NotInstantiableError(
                owner,
                f"parameter '{parameter.name}' has scalar type {describe_annotation(annotation)} "
                "and no default value",
                parameter.name,
            )

        logger.debug(
            f"Resolving dependency '{parameter.name}' of type "
            f"{describe_annotation(annotation)} for {owner.__name__}"
        )
        try:
            return self.resolve(annotation)
        except CircularDependencyError:
            raise
        except DependencyResolutionError as e:
            if not isinstance(e, UnresolvableBindingError):
                raise
            # Defaults only stand in for a key with no binding at all
            if not self._is_registered(annotation):
                if parameter.has_default:
                    logger.debug(f"Using default for '{parameter.name}' of {owner.__name__}: {e}")
                    return parameter.default
                if parameter.optional:
                    logger.debug(f"Optional parameter '{parameter.name}' of {owner.__name__} set to None: {e}")
                    return None
            logger.error(f"Failed to resolve dependency '{parameter.name}' for {owner.__name__}: {e}")
            raise NotInstantiableError(
                owner,
                f"cannot resolve parameter '{parameter.name}' of type "
                f"{describe_annotation(annotation)}: {e.message}",
                parameter.name,
                cause=e,
            ) from e

    # Introspection

    def explain(self, key: Any) -> Dict[str, Any]:
        """
        Describe how a key would be resolved, without instantiating anything.

        Returns:
            JSON-serialisable dictionary with the binding chain and, for
            concrete types, the constructor plan with each parameter explained
        """
        return self._explain(key, set())

    def _explain(self, key: Any, seen: Set[str]) -> Dict[str, Any]:
        name = describe_key(key)
        node: Dict[str, Any] = {"key": name}
        if name in seen:
            node["error"] = "circular dependency"
            return node
        seen = seen | {name}

        registration = self._registry.find(key)
        concrete: Any = key
        if registration is None and isinstance(key, str):
            located = self._locate_type(key)
            if located is not None:
                concrete = located
                registration = self._registry.find(located)

        if registration is not None:
            node["binding"] = registration.to_dict()
            if registration.has_instance() or registration.has_factory():
                return node
            if not self._builds_target(registration):
                node["resolves_to"] = self._explain(registration.implementation, seen)
                return node
            target = registration.implementation
            concrete = self._target_type(target)

        if not isinstance(concrete, type):
            node["error"] = "no binding registered and no type could be located"
            return node
        if is_abstract_contract(concrete):
            node["error"] = "abstract contract with no registered implementation"
            return node

        dependencies = registration.dependencies if registration is not None else None
        try:
            plan = self._resolver.plan_for(concrete, dependencies)
        except DependencyResolutionError as e:
            node["error"] = e.message
            return node

        node["type"] = describe_key(concrete)
        parameters = []
        for parameter in plan.parameters:
            entry = parameter.to_dict()
            annotation = parameter.annotation
            if parameter.optional:
                annotation = extract_optional_inner_type(annotation)
            if parameter.is_typed and not is_primitive_type(annotation):
                entry["resolves_to"] = self._explain(annotation, seen)
            parameters.append(entry)
        node["parameters"] = parameters
        return node
