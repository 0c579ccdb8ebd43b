from __future__ import annotations

from .core.colors import colorize, convert_attributes, strip_ansi, try_convert_attributes
from .core.duration import DurationStyle, format_duration, get_duration_func, parse_duration
from .core.formatter import Formatter, JsonFormatter, compile_template, try_compile_template
from .domain.entry import CallerFrame, LogEntry
from .domain.levels import (
    Level,
    accepted_levels,
    accepted_levels_string,
    compute_levels,
    parse_level,
    try_parse_level,
)
from .errors import (
    AttributeNameError,
    DurationFormatError,
    HookError,
    HookErrors,
    LevelParseError,
    LoggerPanic,
    MultiLoggerError,
    ShortWriteError,
    TemplateError,
)
from .infra.hooks import (
    ConsoleHook,
    FileHook,
    GenericHook,
    Hook,
    HookTarget,
    new_console_hook,
    new_file_hook,
    new_hook,
)
from .infra.logging import LoggingConfig, capture_stdlib_logging, configure_logging, get_logger
from .infra.settings import (
    format_global_duration,
    get_duration_format,
    get_duration_precision,
    get_global_time,
    parse_bool,
    set_duration_format,
    set_duration_precision,
    set_global_file_format,
    set_global_format,
    set_global_time,
    set_global_timezone,
)
from .logger import Logger

__version__ = "1.0.0"

__all__ = [
    "Logger",
    "Level",
    "LogEntry",
    "CallerFrame",
    "Hook",
    "HookTarget",
    "GenericHook",
    "ConsoleHook",
    "FileHook",
    "Formatter",
    "JsonFormatter",
    "DurationStyle",
    "LoggingConfig",
    "new_hook",
    "new_console_hook",
    "new_file_hook",
    "parse_level",
    "try_parse_level",
    "compute_levels",
    "accepted_levels",
    "accepted_levels_string",
    "compile_template",
    "try_compile_template",
    "format_duration",
    "get_duration_func",
    "parse_duration",
    "colorize",
    "convert_attributes",
    "try_convert_attributes",
    "strip_ansi",
    "configure_logging",
    "get_logger",
    "capture_stdlib_logging",
    "format_global_duration",
    "get_duration_format",
    "get_duration_precision",
    "set_duration_format",
    "set_duration_precision",
    "get_global_time",
    "set_global_time",
    "set_global_timezone",
    "set_global_format",
    "set_global_file_format",
    "parse_bool",
    "MultiLoggerError",
    "LevelParseError",
    "AttributeNameError",
    "TemplateError",
    "DurationFormatError",
    "HookError",
    "HookErrors",
    "ShortWriteError",
    "LoggerPanic",
]
