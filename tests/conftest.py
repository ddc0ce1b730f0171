"""Global pytest configuration."""

import pytest

pytest_plugins = ["tests.fixtures.reports"]


@pytest.fixture(autouse=True)
def _isolate_engine_logger():
    """Drop handlers installed by configure_logging() so tests do not leak log files."""
    import logging

    from core.logging import ROOT_LOGGER_NAME

    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
