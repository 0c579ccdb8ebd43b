from __future__ import annotations

"""
Standard Logging Bridge.

Provides the handler forwarding standard ``logging`` records (including the
ones emitted by third-party libraries) to a multilogger Logger, and the
tagging mechanism used to tell our handlers apart from handlers installed
by the application or other libraries.
"""

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Final

from multilogger.domain.entry import CallerFrame
from multilogger.domain.levels import Level

if TYPE_CHECKING:
    from multilogger.logger import Logger

# Internal attribute used to tag and identify our own handlers
_HANDLER_TAG_ATTR: Final[str] = "_multilogger_handler"

# Records of this namespace are never forwarded
_OWN_NAMESPACE: Final[str] = "multilogger"


# ==============================================================================
# INTERNAL LOGGING UTILITIES
# ==============================================================================

def _tag_handler(handler: logging.Handler) -> None:
    """
    Mark a handler as managed by this package.

    Args:
        handler: The logging handler instance to tag.
    """
    setattr(handler, _HANDLER_TAG_ATTR, True)


def _is_our_handler(handler: logging.Handler) -> bool:
    """
    Verify if a handler was installed by this package.

    Args:
        handler: The handler to inspect.

    Returns:
        bool: True if the handler carries our internal tag.
    """
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def stdlib_to_level(levelno: int) -> int:
    """Map a standard logging level number onto the multilogger scale."""
    if levelno >= logging.CRITICAL:
        return Level.FATAL
    if levelno >= logging.ERROR:
        return Level.ERROR
    if levelno >= logging.WARNING:
        return Level.WARNING
    if levelno >= logging.INFO:
        return Level.INFO
    if levelno >= logging.DEBUG:
        return Level.DEBUG
    return Level.TRACE


# ==============================================================================
# BRIDGE HANDLER
# ==============================================================================

class BridgeHandler(logging.Handler):
    """
    Forward standard logging records to a multilogger Logger.

    The record logger name is attached as the ``logger`` field, and the
    record location is used as caller information.
    """

    def __init__(self, target: "Logger", level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.target = target
        _tag_handler(self)

    def emit(self, record: logging.LogRecord) -> None:
        if record.name == _OWN_NAMESPACE or record.name.startswith(_OWN_NAMESPACE + "."):
            return
        try:
            message = record.getMessage()
            if record.exc_info:
                message = f"{message}\n{self.formatException(record.exc_info)}"
            self.target.dispatch(
                stdlib_to_level(record.levelno),
                message,
                caller=CallerFrame(record.funcName or "", record.pathname or "", record.lineno),
                moment=datetime.fromtimestamp(record.created).astimezone(),
                fields={"logger": record.name},
            )
        except Exception:
            self.handleError(record)

    def formatException(self, exc_info) -> str:
        return logging.Formatter().formatException(exc_info)
