from __future__ import annotations

"""
Domain Constants.

Centralizes the default templates, timestamp pattern and the names of the
environment variables consumed by the configuration layer.
"""

from typing import Final

# -----------------------------------------------------------------------------
# DEFAULT TEMPLATES
# -----------------------------------------------------------------------------

# Renders as: [INFO]: 2006/01/02 15:04:05.000 - Log message
DEFAULT_LOG_FORMAT: Final[str] = "[%.4level:color,upper%]: %time% - %message%"

DEFAULT_CONSOLE_FORMAT: Final[str] = (
    "%module:Italic,Green,SquareBrackets,IgnoreEmpty,Space%"
    "%time% %-8level:upper,color% %message:color%"
)

DEFAULT_FILE_FORMAT: Final[str] = (
    "%module:SquareBrackets,IgnoreEmpty,Space%%time% %-8level:upper% %message%"
)

# strftime pattern, %L expands to zero padded milliseconds
DEFAULT_TIMESTAMP_FORMAT: Final[str] = "%Y/%m/%d %H:%M:%S.%L"

CONSOLE_HOOK_NAME: Final[str] = "console-hook"

# -----------------------------------------------------------------------------
# ENVIRONMENT VARIABLES
# -----------------------------------------------------------------------------

CALLER_ENV_VAR: Final[str] = "MULTILOGGER_CALLER"
FORMAT_ENV_VAR: Final[str] = "MULTILOGGER_FORMAT"
FORMAT_FILE_ENV_VAR: Final[str] = "MULTILOGGER_FILE_FORMAT"
DURATION_PRECISION_ENV_VAR: Final[str] = "MULTILOGGER_DURATION_PRECISION"
DURATION_FORMAT_ENV_VAR: Final[str] = "MULTILOGGER_DURATION_FORMAT"
BASE_TIME_ENV_VAR: Final[str] = "MULTILOGGER_BASETIME"
TIMEZONE_ENV_VAR: Final[str] = "MULTILOGGER_TIMEZONE"
