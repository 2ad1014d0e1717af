"""Import helpers for locating classes by dotted path."""
import importlib
from typing import Any, Optional


def import_string(path: str) -> Any:
    """
    Import an attribute from a dotted path.

    Both ``package.module.Name`` and ``package.module:Name`` are accepted.

    Raises:
        ImportError: If the module or attribute cannot be found
    """
    if ":" in path:
        module_path, _, attribute = path.partition(":")
    else:
        module_path, _, attribute = path.rpartition(".")

    if not module_path or not attribute:
        raise ImportError(f"'{path}' is not a dotted import path")

    module = importlib.import_module(module_path)
    target: Any = module
    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise ImportError(f"Module '{module_path}' has no attribute '{attribute}'") from e
    return target


def try_import_class(path: str) -> Optional[type]:
    """Import a class from a dotted path, returning None if it cannot be found."""
    if "." not in path and ":" not in path:
        return None
    try:
        target = import_string(path)
    except ImportError:
        return None
    return target if isinstance(target, type) else None
