"""Configuration package with clean public API."""

from .loader import ConfigurationLoader
from .manager import ConfigurationManager
from .schemas import AppConfig, ContainerConfig, LoggingConfig, validate_config

__all__ = [
    "AppConfig",
    "ContainerConfig",
    "LoggingConfig",
    "validate_config",
    "ConfigurationLoader",
    "ConfigurationManager",
]
