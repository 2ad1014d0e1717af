"""Configuration loading from files and environment."""
import json
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

import yaml

from bindery.infrastructure.exceptions import ConfigurationError
from bindery.infrastructure.logging.logger import get_logger

from .utils.env_expansion import expand_config_env_vars

logger = get_logger(__name__)

ENV_PREFIX = "BINDERY_"

DEFAULT_CONFIG_FILENAMES = ("bindery.yml", "bindery.yaml", "bindery.json")


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ConfigurationError(f"Invalid boolean value: {value!r}")


# Environment variable -> (config path, converter)
ENVIRONMENT_OVERRIDES: Dict[str, Tuple[Tuple[str, ...], Callable[[str], Any]]] = {
    "LOG_LEVEL": (("logging", "level"), str),
    "LOG_DESTINATION": (("logging", "destination"), str),
    "LOG_FILE": (("logging", "file_path"), str),
    "ENVIRONMENT": (("environment",), str),
    "DEFAULT_SCOPE": (("container", "default_scope"), str),
    "DETECT_CYCLES": (("container", "detect_cycles"), _parse_bool),
    "SEAL_ON_FIRST_RESOLVE": (("container", "seal_on_first_resolve"), _parse_bool),
}


class ConfigurationLoader:
    """Loads raw configuration dictionaries from JSON or YAML files."""

    def __init__(self, search_dirs: Optional[list] = None):
        self._search_dirs = [Path(d) for d in (search_dirs or [os.getcwd()])]

    def load_from_file(self, path: str) -> Dict[str, Any]:
        """
        Load configuration from a JSON or YAML file.

        Args:
            path: Path to the configuration file

        Returns:
            Configuration dictionary with environment variables expanded

        Raises:
            ConfigurationError: If the file is missing or cannot be parsed
        """
        file_path = Path(path)
        if not file_path.is_file():
            raise ConfigurationError(f"Configuration file not found: {path}")

        try:
            text = file_path.read_text(encoding="utf-8")
            if file_path.suffix.lower() in (".yml", ".yaml"):
                data = yaml.safe_load(text)
            else:
                data = json.loads(text)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to parse configuration file {path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration file {path} must contain a mapping, got {type(data).__name__}"
            )

        logger.debug(f"Loaded configuration from {path}")
        return expand_config_env_vars(data)

    def load_configuration(self) -> Dict[str, Any]:
        """Load configuration from the first default file found, or return an empty config."""
        for directory in self._search_dirs:
            for filename in DEFAULT_CONFIG_FILENAMES:
                candidate = directory / filename
                if candidate.is_file():
                    return self.load_from_file(str(candidate))
        logger.debug("No configuration file found, using defaults")
        return {}

    def apply_environment_overrides(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply BINDERY_* environment variable overrides on top of file values."""
        result = {key: (dict(value) if isinstance(value, dict) else value) for key, value in config_data.items()}

        for suffix, (path, convert) in ENVIRONMENT_OVERRIDES.items():
            env_name = f"{ENV_PREFIX}{suffix}"
            if env_name not in os.environ:
                continue

            target = result
            for part in path[:-1]:
                section = target.get(part)
                if not isinstance(section, dict):
                    section = {}
                    target[part] = section
                target = section
            target[path[-1]] = convert(os.environ[env_name])
            logger.debug(f"Applied environment override {env_name}")

        return result
