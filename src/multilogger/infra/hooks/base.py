from __future__ import annotations

"""
Hook Contracts.

A ``Hook`` is the registration unit of a Logger: a name, a minimum level and
a ``HookTarget`` (the destination). The Logger asks each hook for the levels
it accepts and fires matching entries on it.

``GenericHook`` is the base of the built-in destinations: it owns a
formatter, knows the Logger it is attached to and writes text to streams
while detecting short writes.
"""

import copy
from abc import ABC, abstractmethod
from typing import IO, TYPE_CHECKING, Any, List, Optional

from multilogger.domain.entry import LogEntry
from multilogger.domain.levels import compute_levels, parse_level
from multilogger.errors import HookError, ShortWriteError

if TYPE_CHECKING:
    from multilogger.logger import Logger


class HookTarget(ABC):
    """Destination contract fired by a Hook."""

    # Targets accepting raw PRINT level entries
    supports_print: bool = False

    @property
    def source(self) -> str:
        """Identity used to prefix the errors raised by the target."""
        return type(self).__name__

    def levels(self) -> Optional[List[int]]:
        """Levels the target restricts itself to, None for no restriction."""
        return None

    @abstractmethod
    def fire(self, entry: LogEntry) -> None:
        """Deliver an entry to the destination."""

    def clone(self) -> "HookTarget":
        """Return a copy safe to use from another Logger."""
        return self

    def set_logger(self, logger: "Logger") -> None:
        """Attach the owning Logger; targets needing it override this."""

    def close(self) -> None:
        """Release the resources held by the target."""


class GenericHook(HookTarget):
    """Formatter holder shared by the console and file destinations."""

    supports_print = True

    def __init__(self, formatter: Any = None) -> None:
        self.formatter = formatter
        self.logger: Optional["Logger"] = None

    def set_logger(self, logger: "Logger") -> None:
        self.logger = logger

    def set_formatter(self, formatter: Any) -> None:
        self.formatter = formatter

    def clone(self) -> "GenericHook":
        return copy.copy(self)

    def format_entry(self, entry: LogEntry) -> str:
        if self.formatter is None:
            # Deferred import, the factory module depends on this one
            from multilogger.infra.hooks.factory import default_file_formatter
            self.formatter = default_file_formatter(color=True)
        return self.formatter.format(entry)

    def write(self, out: IO[str], text: str) -> None:
        """
        Write text to a stream.

        Raises:
            ShortWriteError: If the stream reports fewer characters written.
        """
        written = out.write(text)
        if written is not None and written != len(text):
            raise ShortWriteError(written, text)


class Hook:
    """
    Named registration of a target with its own minimum level.

    Args:
        name: Unique name of the hook within a Logger.
        level: Anything ``parse_level`` accepts.
        target: The destination.

    Raises:
        LevelParseError: If the level is invalid.
    """

    def __init__(self, name: str, level: Any, target: HookTarget) -> None:
        self.name = name
        self.level = parse_level(level)
        self.target = target

    def __repr__(self) -> str:
        return f"Hook(name={self.name!r}, level={self.level!r}, target={self.target.source!r})"

    def levels(self) -> List[int]:
        """
        Return the levels this hook fires on.

        When the target declares its own levels, only those not more verbose
        than the hook level are kept.
        """
        declared = self.target.levels()
        if declared is None:
            return compute_levels(self.level, self.target.supports_print)
        return [level for level in declared if level <= self.level]

    def fire(self, entry: LogEntry) -> None:
        """
        Fire the entry on the target.

        Raises:
            HookError: Wrapping any failure of the target.
        """
        try:
            self.target.fire(entry)
        except HookError:
            raise
        except Exception as e:
            raise HookError(self.target.source, e) from e

    def clone(self) -> "Hook":
        return Hook(self.name, self.level, self.target.clone())

    # -------------------------------------------------------------------------
    # FORMATTER & STREAM HELPERS
    # -------------------------------------------------------------------------

    @property
    def formatter(self) -> Any:
        """
        Return the formatter of the target.

        Raises:
            TypeError: If the target does not hold a formatter.
        """
        return self._generic().formatter

    def set_formatter(self, formatter: Any) -> "Hook":
        self._generic().set_formatter(formatter)
        return self

    def set_format(self, *formats: Any) -> "Hook":
        self.formatter.set_log_format(*formats)
        return self

    def set_color(self, color: bool) -> "Hook":
        formatter = self.formatter
        if formatter is not None:
            formatter.set_color(color)
        return self

    def set_out(self, stream: IO[str]) -> "Hook":
        """Redirect the formatted log stream of a console target."""
        self._console().set_out(stream)
        return self

    def set_stdout(self, stream: IO[str]) -> "Hook":
        """Redirect the raw PRINT output of a console target."""
        self._console().set_stdout(stream)
        return self

    def _generic(self) -> GenericHook:
        if not isinstance(self.target, GenericHook):
            raise TypeError(f"Hook {self.name} does not support formatters")
        return self.target

    def _console(self) -> Any:
        if not hasattr(self.target, "set_stdout"):
            raise TypeError(f"Hook {self.name} is not a console hook")
        return self.target
