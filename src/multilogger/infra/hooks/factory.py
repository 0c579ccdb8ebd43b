from __future__ import annotations

"""
Hook Factories.

Builds ready to register hooks for the built-in destinations. The format
arguments accept either a single formatter object or format strings, the
first non empty string being used. Without format arguments, the process
wide formats (MULTILOGGER_FORMAT / MULTILOGGER_FILE_FORMAT) apply, then the
package defaults.
"""

from typing import IO, Any, Optional

from multilogger.core.formatter.formatter import Formatter
from multilogger.domain.constants import (
    CONSOLE_HOOK_NAME,
    DEFAULT_CONSOLE_FORMAT,
    DEFAULT_FILE_FORMAT,
)
from multilogger.infra.hooks.base import Hook, HookTarget
from multilogger.infra.hooks.console import ConsoleHook, stream_supports_color
from multilogger.infra.hooks.file import FileHook
from multilogger.infra.settings import get_global_file_format, get_global_format


def default_console_formatter(color: bool = True) -> Formatter:
    return Formatter(get_global_format(), DEFAULT_CONSOLE_FORMAT, color=color)


def default_file_formatter(color: bool = False) -> Formatter:
    return Formatter(get_global_file_format(), get_global_format(), DEFAULT_FILE_FORMAT, color=color)


def resolve_formatter(color: bool, *formats: Any) -> Any:
    """
    Turn factory format arguments into a formatter.

    A single argument exposing ``format`` is used as is; otherwise a
    ``Formatter`` is built from the format strings.
    """
    if len(formats) == 1 and not isinstance(formats[0], str) and hasattr(formats[0], "format"):
        return formats[0]
    return Formatter(*formats, color=color)


def new_hook(name: str, level: Any, target: HookTarget) -> Hook:
    """
    Wrap a destination into a named hook.

    Raises:
        LevelParseError: If the level is invalid.
    """
    return Hook(name, level, target)


def new_console_hook(
        name: str = "",
        level: Any = "warning",
        *formats: Any,
        color: Optional[bool] = None,
        out: Optional[IO[str]] = None,
        log: Optional[IO[str]] = None,
) -> Hook:
    """
    Create a console hook.

    Args:
        name: Hook name, the default console hook name when empty.
        level: Minimum level.
        *formats: A formatter or format strings.
        color: Force color on or off, auto-detected from the log stream
            when None.
        out: Stream receiving raw PRINT text (stdout when None).
        log: Stream receiving formatted entries (stderr when None).
    """
    if color is None:
        color = stream_supports_color(log)
    if formats:
        formatter = resolve_formatter(color, *formats)
    else:
        formatter = default_console_formatter(color)
    return Hook(name or CONSOLE_HOOK_NAME, level, ConsoleHook(formatter, out=out, log=log))


def new_file_hook(
        filename: str,
        level: Any = "info",
        *formats: Any,
        is_dir: bool = False,
        add_header: bool = True,
) -> Hook:
    """
    Create a file hook named after its file (or base directory).

    Args:
        filename: Target file, or base directory when ``is_dir`` is set.
        level: Minimum level.
        *formats: A formatter or format strings.
        is_dir: One file per module under ``filename``.
        add_header: Write a timestamp banner when a file is opened.
    """
    formatter = resolve_formatter(False, *formats) if formats else default_file_formatter()
    return Hook(filename, level, FileHook(filename, formatter, is_dir=is_dir, add_header=add_header))
