"""Core utilities for configuration, logging and the block clock."""

from .clock import BlockClock, ManualBlockClock
from .config import EngineSettings, get_env, load_settings
from .logging_config import get_logger, setup_logging

__all__ = [
    "BlockClock",
    "ManualBlockClock",
    "EngineSettings",
    "get_env",
    "load_settings",
    "get_logger",
    "setup_logging",
]
