from __future__ import annotations

"""
Logging Core Orchestrator.

Maintains the idempotent lifecycle of the process default Logger and the
optional bridge capturing records emitted through the standard ``logging``
module, so that third-party libraries end up in the same destinations as
the application entries.
"""

import atexit
import logging
from typing import Optional

from multilogger.infra.hooks.factory import new_console_hook, new_file_hook
from multilogger.infra.logging.config import LoggingConfig
from multilogger.infra.logging.handlers import BridgeHandler, _is_our_handler
from multilogger.logger import Logger

# Process default logger, built by configure_logging
_default_logger: Optional[Logger] = None


# ==============================================================================
# PUBLIC API
# ==============================================================================

def configure_logging(cfg: Optional[LoggingConfig] = None, *, force: bool = False) -> Logger:
    """
    Execute idempotent configuration of the process default Logger.

    The first call builds the Logger from the configuration, subsequent
    calls return it untouched unless a re-configuration is requested. The
    previous Logger is closed on re-configuration.

    Args:
        cfg: Structural configuration, read from the environment when None.
        force: If True, bypass idempotency checks and rebuild the Logger.

    Returns:
        Logger: The configured default logger.

    Raises:
        LevelParseError: If a configured level is invalid.
    """
    global _default_logger

    if _default_logger is not None and not force:
        return _default_logger

    cfg = cfg or LoggingConfig.from_env()

    console_formats = (cfg.console_format,) if cfg.console_format else ()
    hooks = [new_console_hook("", cfg.console_level, *console_formats, color=cfg.color)]
    if cfg.log_file:
        file_formats = (cfg.file_format,) if cfg.file_format else ()
        hooks.append(new_file_hook(cfg.log_file, cfg.file_level, *file_formats, is_dir=cfg.is_dir))

    new_logger = Logger(cfg.module, *hooks, report_caller=cfg.report_caller)

    # Cleanup existing infrastructure to prevent handle leakage
    previous, _default_logger = _default_logger, new_logger
    if previous is not None:
        atexit.unregister(previous.close)
        previous.close()
    atexit.register(new_logger.close)

    if cfg.capture_stdlib:
        capture_stdlib_logging(new_logger, cfg.stdlib_level_int)
    else:
        _remove_our_handlers(logging.getLogger())

    return new_logger


def get_logger(module: str = "") -> Logger:
    """
    Acquire a Logger sharing the default configuration.

    Args:
        module: Module name of the returned logger, appended to the default
            logger module as a child.

    Returns:
        Logger: The default logger itself when no module is given, a child
            owning its own hook instances otherwise.
    """
    root = configure_logging()
    if not module:
        return root
    return root.child(module)


def capture_stdlib_logging(target: Logger, level: int = logging.WARNING) -> BridgeHandler:
    """
    Forward the records of the standard root logger to a Logger.

    Previously installed bridges are detached first, so the capture can be
    redirected without duplicating entries.

    Args:
        target: Logger receiving the records.
        level: Minimum standard logging level of the forwarded records.

    Returns:
        BridgeHandler: The handler attached to the root logger.
    """
    root = logging.getLogger()
    _remove_our_handlers(root)

    handler = BridgeHandler(target, level)
    root.addHandler(handler)
    if root.level == logging.NOTSET or root.level > level:
        root.setLevel(level)
    return handler


def release_stdlib_logging() -> None:
    """Detach the bridges installed on the standard root logger."""
    _remove_our_handlers(logging.getLogger())


def reset_logging() -> None:
    """Close and forget the default logger, detaching the stdlib bridge."""
    global _default_logger
    previous, _default_logger = _default_logger, None
    release_stdlib_logging()
    if previous is not None:
        atexit.unregister(previous.close)
        previous.close()


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _remove_our_handlers(root: logging.Logger) -> None:
    """Identify and detach all internally-managed handlers from the root."""
    for h in list(root.handlers):
        if _is_our_handler(h):
            root.removeHandler(h)
            h.close()
