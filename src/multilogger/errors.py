from __future__ import annotations

"""
Exception Taxonomy and Error Accumulation.

Defines the error hierarchy raised by the template compiler, the level
parser and the hooks, together with the aggregate error used by the Logger
to collect dispatch failures without interrupting the log call.
"""

import threading
from typing import Any, Iterable, List, Optional


class MultiLoggerError(Exception):
    """Base class for every error raised by the multilogger package."""


class LevelParseError(MultiLoggerError, ValueError):
    """Raised when a value cannot be resolved into a logging level."""

    def __init__(self, value: Any, reason: str = "") -> None:
        self.value = value
        message = f"Unable to parse logging level: {value!r}"
        if reason:
            message += f". {reason}"
        super().__init__(message)


class AttributeNameError(MultiLoggerError, ValueError):
    """Raised when one or more color attribute names are unknown."""

    def __init__(self, names: Iterable[str]) -> None:
        self.names = list(names)
        super().__init__("\n".join(f"Attribute not found {name}" for name in self.names))


class TemplateError(MultiLoggerError, ValueError):
    """
    Raised when a format string cannot be compiled.

    Attributes:
        template: The offending format string.
        problems: Every individual problem found during the compile pass.
    """

    def __init__(self, template: str, problems: Iterable[str]) -> None:
        self.template = template
        self.problems = list(problems)
        super().__init__("\n".join(self.problems))


class DurationFormatError(MultiLoggerError, ValueError):
    """Raised for unknown duration styles or unparsable duration strings."""


class HookError(MultiLoggerError):
    """
    Wraps a failure that occurred while a hook was firing.

    The message is prefixed with the hook identity (e.g. ``ConsoleHook`` or
    ``FileHook /var/log/app.log``).
    """

    def __init__(self, source: str, cause: Any) -> None:
        self.source = source
        self.cause = cause
        super().__init__(f"{source}: {cause}")


class ShortWriteError(MultiLoggerError, OSError):
    """Raised when a stream accepted fewer characters than requested."""

    def __init__(self, written: int, text: str) -> None:
        self.written = written
        self.text = text
        super().__init__(f"Wrong number of bytes written ({written}) for {text!r}")


class LoggerPanic(MultiLoggerError):
    """Raised by ``Logger.panic`` once the entry has been dispatched."""


class HookErrors(MultiLoggerError):
    """Aggregate of the errors collected during one or more dispatch rounds."""

    def __init__(self, errors: Iterable[BaseException]) -> None:
        self.errors = list(errors)
        super().__init__("\n".join(str(e) for e in self.errors))


# -----------------------------------------------------------------------------
# ERROR ACCUMULATOR
# -----------------------------------------------------------------------------

class ErrorAccumulator:
    """
    Thread-safe list of errors with query-and-reset semantics.

    ``as_error`` returns None when empty, the error itself when there is a
    single one, and a ``HookErrors`` aggregate otherwise.
    """

    def __init__(self, errors: Optional[Iterable[BaseException]] = None) -> None:
        self._lock = threading.Lock()
        self._errors: List[BaseException] = list(errors or [])

    def add(self, error: Optional[BaseException]) -> None:
        if error is None:
            return
        with self._lock:
            self._errors.append(error)

    def as_error(self) -> Optional[BaseException]:
        with self._lock:
            return self._combine(self._errors)

    def clear(self) -> Optional[BaseException]:
        with self._lock:
            current = self._combine(self._errors)
            self._errors = []
        return current

    def copy(self) -> "ErrorAccumulator":
        with self._lock:
            return ErrorAccumulator(self._errors)

    def __len__(self) -> int:
        with self._lock:
            return len(self._errors)

    @staticmethod
    def _combine(errors: List[BaseException]) -> Optional[BaseException]:
        if not errors:
            return None
        if len(errors) == 1:
            return errors[0]
        return HookErrors(errors)
