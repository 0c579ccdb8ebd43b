from __future__ import annotations

"""
Stream Catcher.

Lets a Logger act as a writable text stream. Written text is scanned for
level markers and each marked segment is logged at that level:

- ``[LEVEL] message`` up to the end of the line
- ``prefix [LEVEL] message``, logged as ``prefix level message``
- ``[LEVEL] { message }``, possibly spanning several lines

Level names are case-insensitive and ``warn`` is accepted. Unmarked text
goes through ``print_lines`` at the logger print level. Incomplete lines
are kept until more text arrives or the stream is flushed or closed.
"""

import re
from typing import Final, List, Optional

from multilogger.domain.levels import Level, accepted_levels, level_name, parse_level

_CHOICES: Final[str] = r"\[(?P<level>warn|{})\]".format("|".join(accepted_levels()[1:]))

# Evaluated in order, the first expression matching wins
_MARKERS: Final[List[re.Pattern]] = [
    re.compile(
        r"(?P<before>.*?)(?P<toRemove>" + _CHOICES + r"[ \t]*\{\s*(?P<message>.*?)\s*\})",
        re.IGNORECASE | re.DOTALL,
    ),
    re.compile(
        r"(?P<before>.*?)(?P<toRemove>[ \t]*(?P<prefix>[^\n]*?)[ \t]*" + _CHOICES
        + r"[ \t]*(?P<message>.*?)[ \t]*\n)",
        re.IGNORECASE | re.DOTALL,
    ),
]


def find_marker(text: str) -> Optional[re.Match]:
    """Return the match of the first marker expression found in text."""
    for expression in _MARKERS:
        match = expression.search(text)
        if match is not None:
            return match
    return None


class StreamCatcher:
    """
    Writable stream behaviour of the Logger.

    Relies on the host class for ``catcher``, ``print_level``, ``log``,
    ``print``, ``println`` and ``clear_error``.
    """

    _remaining: str = ""
    catcher: bool
    print_level: int

    def write(self, text: str) -> int:
        """
        Log the text, routing level markers to the matching level.

        Returns:
            int: Number of characters accepted (always ``len(text)``).

        Raises:
            MultiLoggerError: If a hook failed while logging the text.
        """
        self._process(text)
        return len(text)

    def flush(self) -> None:
        """Process the buffered incomplete line, if any."""
        if self._remaining:
            self._process(None)

    def close(self) -> None:
        self.flush()

    def writable(self) -> bool:
        return True

    def print_lines(self, text: str) -> None:
        """
        Print unmarked text.

        At the PRINT level, every complete line is printed with its newline;
        at other levels each line is logged separately.

        Raises:
            MultiLoggerError: If a hook failed.
        """
        lines = text.split("\n")
        last = len(lines) - 1
        for index, line in enumerate(lines):
            if self.print_level == Level.PRINT and index != last:
                self.println(line)
            elif index != last or line:
                self.print(line)
            self._raise_error()

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _process(self, text: Optional[str]) -> None:
        if not self.catcher:
            self.print_lines(text or "")
            return

        buffer = self._remaining + (text or "")
        self._remaining = ""
        if text is not None:
            # Keep the incomplete trailing line for the next call
            cut = buffer.rfind("\n") + 1
            self._remaining = buffer[cut:]
            buffer = buffer[:cut]

        while True:
            # On flush, the buffered text is considered terminated
            match = find_marker(buffer + "\n" if text is None else buffer)
            if match is None:
                break

            before = match.group("before")
            if before:
                self.print_lines(before)

            level = parse_level(match.group("level"))
            message = match.group("message")
            prefix = match.groupdict().get("prefix")
            if prefix:
                message = f"{prefix} {level_name(level)} {message}"
            self.log(level, message)
            self._raise_error()
            buffer = buffer[min(match.end(), len(buffer)):]

        self.print_lines(buffer)

    def _raise_error(self) -> None:
        error = self.clear_error()
        if error is not None:
            raise error
