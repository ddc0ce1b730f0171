"""Shared infrastructure for the reporting engine: config, logging, enums."""

from .config import EngineConfig, load_engine_config  # noqa: F401
from .logging import configure_logging, get_logger  # noqa: F401
