"""Unified configuration management for the application."""
from __future__ import annotations

import threading
from typing import Any, Dict, Optional, Type, TypeVar

from bindery.infrastructure.logging.logger import get_logger

from .loader import ConfigurationLoader
from .schemas import AppConfig, ContainerConfig, LoggingConfig, validate_config

T = TypeVar("T")
logger = get_logger(__name__)


class ConfigurationManager:
    """
    Configuration manager that serves as the single source of truth.

    Configuration is loaded lazily from (in order of precedence):
    - BINDERY_* environment variable overrides
    - the explicit config file, or the first default file found
    - schema defaults
    """

    def __init__(self, config_file: Optional[str] = None, loader: Optional[ConfigurationLoader] = None):
        """Initialize configuration manager with lazy loading."""
        self._config_file = config_file
        self._lock = threading.RLock()
        self._app_config: Optional[AppConfig] = None
        self._loader = loader

    @property
    def loader(self) -> ConfigurationLoader:
        """Lazy load configuration loader."""
        if self._loader is None:
            self._loader = ConfigurationLoader()
        return self._loader

    @property
    def app_config(self) -> AppConfig:
        """Lazy load application configuration."""
        if self._app_config is None:
            with self._lock:
                if self._app_config is None:
                    self._app_config = self._load_app_config()
        return self._app_config

    def _load_app_config(self) -> AppConfig:
        """Load application configuration from sources."""
        if self._config_file:
            config_data: Dict[str, Any] = self.loader.load_from_file(self._config_file)
        else:
            config_data = self.loader.load_configuration()

        config_data = self.loader.apply_environment_overrides(config_data)

        app_config = validate_config(config_data)
        logger.debug(
            f"Configuration loaded: {len(app_config.container.bindings)} bindings, "
            f"{len(app_config.container.singletons)} singletons"
        )
        return app_config

    def get_typed(self, config_type: Type[T]) -> T:
        """Get a configuration section by its schema type."""
        type_mapping = {
            AppConfig: lambda: self.app_config,
            ContainerConfig: lambda: self.app_config.container,
            LoggingConfig: lambda: self.app_config.logging,
        }
        if config_type not in type_mapping:
            raise ValueError(f"Unknown configuration type: {config_type.__name__}")
        return type_mapping[config_type]()

    def reload(self) -> None:
        """Reload configuration from sources."""
        with self._lock:
            self._app_config = None
        logger.debug("Configuration cache cleared")
