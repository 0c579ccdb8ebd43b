from __future__ import annotations

from .config import LoggingConfig
from .core import (
    capture_stdlib_logging,
    configure_logging,
    get_logger,
    release_stdlib_logging,
    reset_logging,
)
from .handlers import BridgeHandler, stdlib_to_level

__all__ = [
    "LoggingConfig",
    "BridgeHandler",
    "configure_logging",
    "get_logger",
    "capture_stdlib_logging",
    "release_stdlib_logging",
    "reset_logging",
    "stdlib_to_level",
]
