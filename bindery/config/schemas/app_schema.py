"""Main application configuration schema."""
from typing import Any, Dict

from pydantic import BaseModel, Field, ValidationError, field_validator

from bindery.infrastructure.exceptions import InvalidConfigurationError

from .container_schema import ContainerConfig
from .logging_schema import LoggingConfig


class AppConfig(BaseModel):
    """Application configuration."""

    version: str = Field("1.0.0", description="Configuration version")
    container: ContainerConfig = Field(default_factory=lambda: ContainerConfig())
    logging: LoggingConfig = Field(default_factory=lambda: LoggingConfig())
    environment: str = Field("development", description="Environment")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """
        Validate environment.

        Args:
            v: Value to validate

        Returns:
            Validated value

        Raises:
            ValueError: If environment is invalid
        """
        valid_environments = ["development", "testing", "staging", "production"]
        if v not in valid_environments:
            raise ValueError(f"Environment must be one of {valid_environments}")
        return v

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        """Create configuration from a dictionary."""
        return validate_config(data)


def validate_config(data: Dict[str, Any]) -> AppConfig:
    """
    Validate raw configuration data.

    Raises:
        InvalidConfigurationError: If the data does not match the schema
    """
    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        raise InvalidConfigurationError(f"Invalid configuration: {e}", details=e.errors()) from e
