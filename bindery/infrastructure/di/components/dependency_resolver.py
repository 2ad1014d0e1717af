"""Constructor introspection for concrete types."""
import inspect
import sys
import threading
import types
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple, Type, Union, get_args, get_origin, get_type_hints

from bindery.domain.base.di_contracts import describe_key
from bindery.infrastructure.di.decorators import get_injectable_metadata
from bindery.infrastructure.di.exceptions import NotInstantiableError
from bindery.infrastructure.logging.logger import get_logger

logger = get_logger(__name__)

# Values of these types can never be produced by the container
PRIMITIVE_TYPES = frozenset(
    {str, int, float, bool, bytes, bytearray, complex, type(None), list, dict, set, frozenset, tuple}
)

_UNION_TYPES = (Union, getattr(types, "UnionType", Union))


def is_primitive_type(annotation: Any) -> bool:
    """Check if a type annotation represents a scalar that shouldn't be resolved from DI."""
    if annotation is Any:
        return True
    try:
        if annotation in PRIMITIVE_TYPES:
            return True
        # Generic aliases such as List[str] or dict[str, int]
        return get_origin(annotation) in PRIMITIVE_TYPES
    except TypeError:
        return False


def is_optional_type(annotation: Any) -> bool:
    """Check if a type annotation represents Optional[T]."""
    if get_origin(annotation) in _UNION_TYPES:
        args = get_args(annotation)
        return len(args) == 2 and type(None) in args
    return False


def extract_optional_inner_type(annotation: Any) -> Any:
    """Extract T from Optional[T]."""
    return next(arg for arg in get_args(annotation) if arg is not type(None))


def describe_annotation(annotation: Any) -> Optional[str]:
    if annotation is inspect.Parameter.empty:
        return None
    if isinstance(annotation, (type, str)):
        return describe_key(annotation)
    return repr(annotation)


@dataclass(frozen=True)
class ParameterPlan:
    """How one constructor parameter will be supplied."""

    name: str
    annotation: Any
    keyword_only: bool = False
    default: Any = inspect.Parameter.empty
    optional: bool = False

    @property
    def has_default(self) -> bool:
        return self.default is not inspect.Parameter.empty

    @property
    def is_typed(self) -> bool:
        return self.annotation is not inspect.Parameter.empty

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "type": describe_annotation(self.annotation),
            "optional": self.optional,
            "keyword_only": self.keyword_only,
        }
        if self.has_default:
            data["default"] = repr(self.default)
        return data


@dataclass(frozen=True)
class DependencyPlan:
    """Ordered constructor parameters of a concrete type."""

    owner: Type
    parameters: Tuple[ParameterPlan, ...] = ()
    explicit: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": describe_key(self.owner),
            "explicit": self.explicit,
            "parameters": [parameter.to_dict() for parameter in self.parameters],
        }


class DependencyResolver:
    """
    Builds and caches constructor plans.

    A plan comes from, in order of precedence: dependencies given at bind
    time, dependencies declared with @injectable, or the constructor's
    signature and type hints.
    """

    def __init__(self):
        self._plans: Dict[Type, DependencyPlan] = {}
        self._lock = threading.RLock()

    def plan_for(self, cls: Type, dependencies: Optional[Sequence[Any]] = None) -> DependencyPlan:
        """
        Get the dependency plan of a concrete type.

        Args:
            cls: Class to inspect
            dependencies: Explicit keys overriding introspection

        Returns:
            The constructor plan

        Raises:
            NotInstantiableError: If the constructor signature cannot be read
        """
        if dependencies is not None:
            return self._explicit_plan(cls, dependencies)

        with self._lock:
            plan = self._plans.get(cls)
            if plan is None:
                plan = self._build_plan(cls)
                self._plans[cls] = plan
            return plan

    def clear(self) -> None:
        """Drop cached plans."""
        with self._lock:
            self._plans.clear()

    def _explicit_plan(self, cls: Type, dependencies: Sequence[Any]) -> DependencyPlan:
        parameters = tuple(
            ParameterPlan(name=describe_key(dependency), annotation=dependency)
            for dependency in dependencies
        )
        return DependencyPlan(owner=cls, parameters=parameters, explicit=True)

    def _build_plan(self, cls: Type) -> DependencyPlan:
        metadata = get_injectable_metadata(cls)
        if metadata is not None and metadata.dependencies is not None:
            logger.debug(f"Using declared dependencies for {cls.__name__}")
            return self._explicit_plan(cls, metadata.dependencies)

        init = cls.__init__
        if init is object.__init__:
            return DependencyPlan(owner=cls)

        try:
            signature = inspect.signature(init)
        except (ValueError, TypeError) as e:
            logger.error(f"Failed to get constructor signature for {cls.__name__}: {str(e)}")
            raise NotInstantiableError(cls, f"failed to get constructor signature: {str(e)}", cause=e) from e

        hints = self._get_type_hints(cls, init)

        parameters = []
        # Skip self parameter
        for param in list(signature.parameters.values())[1:]:
            if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                continue

            annotation = hints.get(param.name, param.annotation)
            if isinstance(annotation, str):
                annotation = self._resolve_string_annotation(annotation, cls)

            parameters.append(
                ParameterPlan(
                    name=param.name,
                    annotation=annotation,
                    keyword_only=param.kind == inspect.Parameter.KEYWORD_ONLY,
                    default=param.default,
                    optional=is_optional_type(annotation),
                )
            )

        if parameters:
            logger.debug(
                f"Dependencies for {cls.__name__}: "
                f"{[p.name + ': ' + str(describe_annotation(p.annotation)) for p in parameters]}"
            )
        else:
            logger.debug(f"No dependencies for {cls.__name__}")

        return DependencyPlan(owner=cls, parameters=tuple(parameters))

    def _get_type_hints(self, cls: Type, init: Any) -> Dict[str, Any]:
        try:
            return get_type_hints(init)
        except Exception as e:
            # Unresolvable forward references fall back to raw annotations
            logger.debug(f"Could not get type hints for {cls.__name__}: {e}")
            return {}

    def _resolve_string_annotation(self, annotation: str, context_class: Type) -> Any:
        """
        Resolve a string annotation in the namespace of the class's module.

        An annotation that cannot be evaluated is returned unchanged and is
        then treated as a string key.
        """
        module = sys.modules.get(context_class.__module__)
        namespace = vars(module) if module is not None else {}

        if annotation in namespace:
            return namespace[annotation]

        try:
            return eval(annotation, dict(namespace))
        except Exception as e:
            logger.debug(f"Could not resolve annotation '{annotation}' in {context_class.__name__}: {e}")
            return annotation
