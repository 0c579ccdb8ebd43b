from __future__ import annotations

"""
Logging Configuration Models.

Defines the immutable configuration used to build the process default
Logger, and its construction from the MULTILOGGER_* environment variables.
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, Optional

from multilogger.domain.constants import CALLER_ENV_VAR, FORMAT_ENV_VAR, FORMAT_FILE_ENV_VAR
from multilogger.infra.settings import parse_bool

# Mapping of string identifiers to native logging constants
_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


@dataclass(frozen=True)
class LoggingConfig:
    """
    Immutable specification of the default Logger.

    Attributes:
        module: Module name of the default Logger.
        console_level: Minimum level of the console hook ("disabled" to mute).
        console_format: Console template, the package default when empty.
        color: Force console colors on or off, auto-detected when None.
        log_file: Optional file (or directory) receiving the entries.
        file_level: Minimum level of the file hook.
        file_format: File template, the package default when empty.
        is_dir: Write one file per module under ``log_file``.
        report_caller: Capture caller information on every entry.
        capture_stdlib: Forward standard ``logging`` records to the Logger.
        stdlib_level: Minimum level of the forwarded records.
    """
    module: str = ""
    console_level: str = "warning"
    console_format: str = ""
    color: Optional[bool] = None

    log_file: Optional[str] = None
    file_level: str = "info"
    file_format: str = ""
    is_dir: bool = False

    report_caller: bool = False
    capture_stdlib: bool = False
    stdlib_level: str = "WARNING"

    @classmethod
    def from_env(cls, **overrides) -> "LoggingConfig":
        """
        Build a configuration from the environment.

        Reads MULTILOGGER_FORMAT, MULTILOGGER_FILE_FORMAT and
        MULTILOGGER_CALLER; keyword arguments take precedence.
        """
        values = {
            "console_format": os.environ.get(FORMAT_ENV_VAR, ""),
            "file_format": os.environ.get(FORMAT_FILE_ENV_VAR, ""),
            "report_caller": parse_bool(os.environ.get(CALLER_ENV_VAR)),
        }
        values.update(overrides)
        return cls(**values)

    @property
    def stdlib_level_int(self) -> int:
        """Numeric standard logging level of the forwarded records."""
        if not self.stdlib_level:
            return logging.WARNING
        return _LEVEL_MAP.get(str(self.stdlib_level).strip().upper(), logging.WARNING)
