"""Application bootstrap - builds a configured container."""

from __future__ import annotations

from typing import Iterable, Optional, Tuple, Type

from bindery.config import AppConfig, ConfigurationManager
from bindery.infrastructure.di.container import DIContainer
from bindery.infrastructure.logging.logger import get_logger, setup_logging

logger = get_logger(__name__)


def build_container(
    app_config: Optional[AppConfig] = None,
    catalog: Iterable[Type] = (),
    extra_bindings: Iterable[Tuple[str, str]] = (),
    extra_singletons: Iterable[str] = (),
) -> DIContainer:
    """
    Create a container and apply configured bindings.

    Bindings from the configuration are applied first, then extra bindings
    (e.g. from the command line), so later entries win for the same key.

    Args:
        app_config: Validated configuration; defaults when None
        catalog: Classes to make resolvable by name
        extra_bindings: Additional (key, target) pairs
        extra_singletons: Additional keys to cache once resolved

    Returns:
        Ready-to-use container, sealed if the configuration asks for it
    """
    app_config = app_config or AppConfig()
    container_config = app_config.container
    container = DIContainer(container_config)

    catalog = tuple(catalog)
    if catalog:
        container.catalog(*catalog)

    bindings = list(container_config.bindings.items()) + list(extra_bindings)
    singletons = set(container_config.singletons) | set(extra_singletons)

    for key, target in bindings:
        if key in singletons:
            container.singleton(key, target)
        else:
            container.bind(key, target)

    bound_keys = {key for key, _ in bindings}
    for key in sorted(singletons - bound_keys):
        container.singleton(key)

    logger.info(f"Container bootstrapped with {len(container.get_registrations())} registrations")

    if container_config.seal_after_bootstrap:
        container.seal()

    return container


class Application:
    """Configuration, logging and container wired together."""

    def __init__(self, config_path: Optional[str] = None) -> None:
        """Initialize the instance."""
        self.config_path = config_path
        self._config_manager: Optional[ConfigurationManager] = None
        self._container: Optional[DIContainer] = None

    @property
    def config_manager(self) -> ConfigurationManager:
        if self._config_manager is None:
            self._config_manager = ConfigurationManager(self.config_path)
        return self._config_manager

    @property
    def config(self) -> AppConfig:
        return self.config_manager.app_config

    def initialize(
        self,
        catalog: Iterable[Type] = (),
        extra_bindings: Iterable[Tuple[str, str]] = (),
        extra_singletons: Iterable[str] = (),
        log_level: Optional[str] = None,
    ) -> DIContainer:
        """Set up logging and build the container."""
        logging_config = self.config.logging
        if log_level:
            logging_config = logging_config.model_copy(update={"level": log_level.upper()})
        setup_logging(logging_config)

        self._container = build_container(self.config, catalog, extra_bindings, extra_singletons)
        return self._container

    @property
    def container(self) -> DIContainer:
        if self._container is None:
            return self.initialize()
        return self._container
