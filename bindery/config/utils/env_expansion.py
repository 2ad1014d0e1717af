"""Environment variable expansion for configuration values."""
import os
import re
from typing import Any, Dict

# $VAR, ${VAR} and ${VAR:default}
_ENV_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::([^}]*))?\}|\$([A-Za-z_][A-Za-z0-9_]*)")


def _expand_string(value: str) -> str:
    def replace(match: "re.Match[str]") -> str:
        braced_name, default, bare_name = match.groups()
        name = braced_name or bare_name
        if name in os.environ:
            return os.environ[name]
        if default is not None:
            return default
        # Unknown variables are left untouched
        return match.group(0)

    return _ENV_PATTERN.sub(replace, value)


def expand_env_vars(value: Any) -> Any:
    """
    Recursively expand environment variables in strings, dicts and lists.

    Non-string scalars are returned unchanged.
    """
    if isinstance(value, str):
        return _expand_string(value)
    if isinstance(value, dict):
        return {key: expand_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    return value


def expand_config_env_vars(config: Dict[str, Any]) -> Dict[str, Any]:
    """Expand environment variables across a whole configuration dictionary."""
    return expand_env_vars(config)
