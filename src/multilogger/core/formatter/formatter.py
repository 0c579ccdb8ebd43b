from __future__ import annotations

"""
Formatter Objects.

``Formatter`` owns a format string, compiles it lazily on first use (exactly
once, even when several threads format concurrently) and renders entries
with it. ``JsonFormatter`` is an opt-in alternative producing one JSON
document per line.
"""

import json
import logging
import threading
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from multilogger.core.colors import convert_attributes
from multilogger.core.duration import DurationLike
from multilogger.core.formatter.compiler import CompiledTemplate, try_compile_template
from multilogger.core.formatter.renderer import ColorCache, format_timestamp, render
from multilogger.domain.constants import DEFAULT_LOG_FORMAT, DEFAULT_TIMESTAMP_FORMAT
from multilogger.domain.entry import CallerFrame, LogEntry
from multilogger.domain.levels import Level, level_name
from multilogger.errors import TemplateError
from multilogger.infra.settings import format_global_duration

logger = logging.getLogger(__name__)

DEFAULT_COLOR_MAP: Dict[int, Tuple[str, ...]] = {
    Level.PANIC: ("Magenta", "Bold"),
    Level.FATAL: ("Red", "Bold"),
    Level.ERROR: ("Red",),
    Level.WARNING: ("Yellow",),
    Level.INFO: ("Blue", "Bold"),
    Level.DEBUG: ("Green",),
    Level.TRACE: ("Green", "Faint"),
}


def default_format_caller(frame: Optional[CallerFrame]) -> str:
    """Render a caller frame as ``function file:line``."""
    if frame is None:
        return ""
    result = frame.function
    if frame.file:
        if result:
            result += " "
        result += f"{frame.file}:{frame.line}"
    return result


class Formatter:
    """
    Template based formatter.

    Attributes:
        timestamp_format: strftime pattern of the time token (``%L`` is
            the millisecond count).
        format_duration: Function rendering delta, delay and globaldelay.
        format_caller: Function rendering the caller token.
        level_names: Per level display names overriding the standard ones.
        round_duration: Precision (ns) of the duration tokens, 0 means the
            process-wide precision.
        base_time: Origin of the delay token.
        last: Time of the previously formatted entry (delta token).
    """

    def __init__(
            self,
            *formats: Any,
            color: bool = False,
            timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
            format_duration: Optional[Callable[[DurationLike], str]] = None,
            format_caller: Optional[Callable[[Optional[CallerFrame]], str]] = None,
            color_map: Optional[Dict[int, Iterable[Any]]] = None,
            level_names: Optional[Dict[int, str]] = None,
            round_duration: int = 0,
    ) -> None:
        self._color = color
        self.timestamp_format = timestamp_format or DEFAULT_TIMESTAMP_FORMAT
        self.format_duration = format_duration or format_global_duration
        self.format_caller = format_caller or default_format_caller
        self.level_names: Dict[int, str] = dict(level_names or {})
        self.round_duration = round_duration
        self.color_cache = ColorCache()
        self.color_map: Dict[int, List[int]] = {}
        self.set_color_map(DEFAULT_COLOR_MAP if color_map is None else color_map)

        self.base_time = datetime.now().astimezone()
        self.last = self.base_time

        self._compile_lock = threading.Lock()
        self._compiled: Optional[Tuple[CompiledTemplate, Optional[TemplateError]]] = None
        self._format = DEFAULT_LOG_FORMAT
        self.set_log_format(*formats)

    # -------------------------------------------------------------------------
    # CONFIGURATION
    # -------------------------------------------------------------------------

    @property
    def log_format(self) -> str:
        return self._format

    @property
    def color(self) -> bool:
        return self._color

    def set_log_format(self, *formats: Any) -> "Formatter":
        """
        Use the first non empty format of the list, or the default format.

        The previously compiled template is discarded.
        """
        selected = next((str(f) for f in formats if f is not None and f != ""), DEFAULT_LOG_FORMAT)
        with self._compile_lock:
            self._format = selected
            self._compiled = None
        self.color_cache.clear()
        return self

    def set_color(self, color: bool) -> "Formatter":
        self._color = color
        self.color_cache.clear()
        return self

    def set_color_map(self, color_map: Dict[int, Iterable[Any]]) -> "Formatter":
        """
        Replace the level palette.

        Raises:
            AttributeNameError: If a color name is unknown.
        """
        self.color_map = {int(level): convert_attributes(list(attributes)) for level, attributes in color_map.items()}
        self.color_cache.clear()
        return self

    # -------------------------------------------------------------------------
    # COMPILATION & RENDERING
    # -------------------------------------------------------------------------

    def try_compile(self) -> Tuple[CompiledTemplate, Optional[TemplateError]]:
        """Compile the format string once and return the cached outcome."""
        compiled = self._compiled
        if compiled is not None:
            return compiled

        with self._compile_lock:
            if self._compiled is None:
                self._compiled = try_compile_template(self._format)
                if self._compiled[1] is not None:
                    logger.debug(f"Invalid log format {self._format!r}: {self._compiled[1]}")
            return self._compiled

    def format(self, entry: LogEntry) -> str:
        """
        Render an entry.

        Raises:
            TemplateError: If the format string cannot be compiled.
        """
        compiled, error = self.try_compile()
        if error is not None:
            raise error
        output = render(compiled, entry, self)
        self.last = entry.time
        return output


class JsonFormatter:
    """Render entries as single line JSON documents."""

    def __init__(self, timestamp_format: str = "") -> None:
        self.timestamp_format = timestamp_format
        self.color = False

    def set_color(self, color: bool) -> "JsonFormatter":
        return self

    def format(self, entry: LogEntry) -> str:
        document: Dict[str, Any] = {
            "time": format_timestamp(entry.time, self.timestamp_format)
            if self.timestamp_format else entry.time.isoformat(),
            "level": level_name(entry.level),
            "message": entry.message,
        }
        if entry.module:
            document["module"] = entry.module
        if entry.caller is not None:
            document["caller"] = default_format_caller(entry.caller)
        document.update({key: value for key, value in entry.fields.items() if key not in document})
        return json.dumps(document, default=str, ensure_ascii=False) + "\n"
