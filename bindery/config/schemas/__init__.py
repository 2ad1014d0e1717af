"""Configuration schemas package."""

from .app_schema import AppConfig, validate_config
from .container_schema import ContainerConfig
from .logging_schema import LoggingConfig

__all__ = ["AppConfig", "ContainerConfig", "LoggingConfig", "validate_config"]
