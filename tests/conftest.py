import logging

import pytest

from bindery.demo import register_demo_services
from bindery.infrastructure.di.container import DIContainer


@pytest.fixture
def container():
    """Fresh, empty container."""
    return DIContainer()


@pytest.fixture
def demo_container():
    """Container with the demo types catalogued and their contracts bound."""
    container = DIContainer()
    register_demo_services(container)
    return container


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level changed by setup_logging()."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield root_logger
    for handler in root_logger.handlers[:]:
        if handler not in handlers:
            root_logger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root_logger.handlers:
            root_logger.addHandler(handler)
    root_logger.setLevel(level)
