from __future__ import annotations

"""
Console Destination.

Formatted entries go to the log stream (stderr by default) while raw PRINT
level text goes to the output stream (stdout by default). Streams left
unset are resolved at write time so that redirections of ``sys.stdout`` and
``sys.stderr`` are honoured.
"""

import sys
from typing import IO, Any, Optional

import colorama

from multilogger.domain.entry import LogEntry
from multilogger.domain.levels import Level
from multilogger.infra.hooks.base import GenericHook

# Enable ANSI sequences on legacy Windows consoles, no-op elsewhere
colorama.just_fix_windows_console()


class ConsoleHook(GenericHook):
    """Write formatted entries to a log stream and raw output to stdout."""

    def __init__(
            self,
            formatter: Any = None,
            out: Optional[IO[str]] = None,
            log: Optional[IO[str]] = None,
    ) -> None:
        super().__init__(formatter)
        self._out = out
        self._log = log

    @property
    def out(self) -> IO[str]:
        return self._out if self._out is not None else sys.stdout

    @property
    def log(self) -> IO[str]:
        return self._log if self._log is not None else sys.stderr

    def set_out(self, stream: Optional[IO[str]]) -> None:
        """Set the stream receiving formatted entries."""
        self._log = stream

    def set_stdout(self, stream: Optional[IO[str]]) -> None:
        """Set the stream receiving raw PRINT level text."""
        self._out = stream

    def fire(self, entry: LogEntry) -> None:
        if entry.level == Level.PRINT:
            self.write(self.out, entry.message)
            return
        self.write(self.log, self.format_entry(entry))


def stream_supports_color(stream: Optional[IO[str]]) -> bool:
    """Check whether a stream is an interactive terminal."""
    stream = stream if stream is not None else sys.stderr
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:
        # Closed stream
        return False
