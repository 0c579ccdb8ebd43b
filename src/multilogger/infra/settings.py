from __future__ import annotations

"""
Process-Wide Settings.

Holds the display policy shared by every formatter of the process: the
duration rounding precision, the duration style, the reference time used by
the ``globaldelay`` token, the display timezone and the default templates.

Contract: values are initialised from the environment on first access.
Every ``set_*`` function follows a first-write-wins rule: the value is only
replaced when it has not been set yet (neither by the environment nor by a
previous call) or when ``override=True`` is passed. Applied values are
exported back to the environment so child processes share the same policy.
"""

import logging
import os
import threading
from datetime import datetime, timezone, tzinfo
from typing import Optional, Tuple, Union

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from multilogger.core.duration import (
    MILLISECOND,
    DurationLike,
    DurationStyle,
    format_duration,
    parse_duration,
    to_nanoseconds,
)
from multilogger.domain.constants import (
    BASE_TIME_ENV_VAR,
    DURATION_FORMAT_ENV_VAR,
    DURATION_PRECISION_ENV_VAR,
    FORMAT_ENV_VAR,
    FORMAT_FILE_ENV_VAR,
    TIMEZONE_ENV_VAR,
)
from multilogger.errors import DurationFormatError

logger = logging.getLogger(__name__)

DEFAULT_DURATION_PRECISION: int = MILLISECOND
DEFAULT_DURATION_FORMAT: Tuple[DurationStyle, bool, bool] = (DurationStyle.PRECISE, True, False)

_FALSE_VALUES = {"", "0", "f", "false", "n", "no", "off"}


class _ProcessSettings:
    """Mutable singleton guarded by a single lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self.precision = _read_precision()
            self.duration_format = _read_duration_format()
            self.reference_time: Optional[datetime] = None
            self.timezone = _read_timezone()


# -----------------------------------------------------------------------------
# DURATION POLICY
# -----------------------------------------------------------------------------

def get_duration_precision() -> int:
    """Return the global duration precision in nanoseconds."""
    return _SETTINGS.precision


def set_duration_precision(precision: DurationLike, override: bool = False) -> Tuple[int, bool]:
    """
    Set the precision durations are rounded to before display.

    Args:
        precision: Nanoseconds or timedelta.
        override: Replace a value already set by the environment or a
            previous call.

    Returns:
        Tuple[int, bool]: The effective precision and whether it was applied.
    """
    value = to_nanoseconds(precision)
    with _SETTINGS._lock:
        if override or DURATION_PRECISION_ENV_VAR not in os.environ:
            os.environ[DURATION_PRECISION_ENV_VAR] = f"{value}ns"
            _SETTINGS.precision = value
            return value, True
        return _SETTINGS.precision, False


def get_duration_format() -> Tuple[DurationStyle, bool, bool]:
    """Return the global duration format as (style, rounded, long_unit)."""
    return _SETTINGS.duration_format


def set_duration_format(
        style: Union[DurationStyle, str],
        rounded: bool = True,
        long_unit: bool = False,
        override: bool = False,
) -> bool:
    """
    Set the global duration rendering preferences.

    Returns:
        bool: True if the new format was applied.

    Raises:
        DurationFormatError: If the style is unknown.
    """
    resolved = _resolve_style(style)
    with _SETTINGS._lock:
        if override or DURATION_FORMAT_ENV_VAR not in os.environ:
            os.environ[DURATION_FORMAT_ENV_VAR] = _encode_duration_format(resolved, rounded, long_unit)
            _SETTINGS.duration_format = (resolved, rounded, long_unit)
            return True
        return False


def format_global_duration(duration: DurationLike) -> str:
    """Format a duration with the current global style."""
    style, rounded, long_unit = _SETTINGS.duration_format
    return format_duration(duration, style, rounded, long_unit)


# -----------------------------------------------------------------------------
# REFERENCE TIME & TIMEZONE
# -----------------------------------------------------------------------------

def get_global_time() -> datetime:
    """
    Return the process reference time used by the globaldelay token.

    Initialised once from MULTILOGGER_BASETIME (RFC 3339) when present,
    otherwise from the current time, which is then exported so that child
    processes report delays from the same origin.
    """
    current = _SETTINGS.reference_time
    if current is not None:
        return current

    with _SETTINGS._lock:
        if _SETTINGS.reference_time is None:
            parsed = _parse_rfc3339(os.environ.get(BASE_TIME_ENV_VAR, ""))
            if parsed is None:
                parsed = datetime.now(timezone.utc)
                os.environ[BASE_TIME_ENV_VAR] = parsed.isoformat()
            _SETTINGS.reference_time = parsed
        return _SETTINGS.reference_time


def set_global_time(value: datetime, override: bool = False) -> bool:
    """
    Set the process reference time.

    Returns:
        bool: True if the value was applied.
    """
    with _SETTINGS._lock:
        if override or _SETTINGS.reference_time is None:
            _SETTINGS.reference_time = _ensure_aware(value)
            os.environ[BASE_TIME_ENV_VAR] = _SETTINGS.reference_time.isoformat()
            return True
        return False


def get_global_timezone() -> Optional[tzinfo]:
    """Return the display timezone, None meaning "keep the entry timezone"."""
    return _SETTINGS.timezone


def set_global_timezone(zone: Union[tzinfo, str, None]) -> Optional[tzinfo]:
    """
    Set the timezone used to display the time token.

    Args:
        zone: A tzinfo, an IANA name ("Europe/Paris", "UTC") or None.

    Raises:
        ValueError: If the zone name is unknown.
    """
    if isinstance(zone, str):
        try:
            zone = ZoneInfo(zone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone {zone!r}") from e
    with _SETTINGS._lock:
        _SETTINGS.timezone = zone
    return zone


# -----------------------------------------------------------------------------
# DEFAULT TEMPLATES
# -----------------------------------------------------------------------------

def set_global_format(template: str, override: bool = False) -> Tuple[str, bool]:
    """Set the default console template, first-write-wins unless overridden."""
    return _set_env_format(FORMAT_ENV_VAR, template, override)


def set_global_file_format(template: str, override: bool = False) -> Tuple[str, bool]:
    """Set the default file template, first-write-wins unless overridden."""
    return _set_env_format(FORMAT_FILE_ENV_VAR, template, override)


def get_global_format() -> str:
    """Return the globally configured console template (may be empty)."""
    return os.environ.get(FORMAT_ENV_VAR, "")


def get_global_file_format() -> str:
    """Return the globally configured file template (may be empty)."""
    return os.environ.get(FORMAT_FILE_ENV_VAR, "")


# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def parse_bool(value: Optional[str]) -> bool:
    """
    Interpret a textual flag, never failing.

    False values are: 0, f, false, n, no, off and the empty string; any
    other value set is considered true.
    """
    text = (value or "").strip().lower()
    if text in _FALSE_VALUES:
        return False
    return True


def reset_settings() -> None:
    """Re-read every process-wide setting from the environment."""
    _SETTINGS.reset()


def _set_env_format(env_var: str, template: str, override: bool) -> Tuple[str, bool]:
    current = os.environ.get(env_var)
    if current is None or override:
        os.environ[env_var] = template
        return template, True
    return current, False


def _resolve_style(style: Union[DurationStyle, str]) -> DurationStyle:
    if isinstance(style, DurationStyle):
        return style
    try:
        return DurationStyle(str(style).strip().lower())
    except ValueError as e:
        raise DurationFormatError(f"unknown format {style}") from e


def _encode_duration_format(style: DurationStyle, rounded: bool, long_unit: bool) -> str:
    return ":".join([style.value, "rounded" if rounded else "exact", "long" if long_unit else "short"])


def _read_precision() -> int:
    raw = os.environ.get(DURATION_PRECISION_ENV_VAR)
    if raw is None:
        return DEFAULT_DURATION_PRECISION
    try:
        return parse_duration(raw)
    except DurationFormatError:
        logger.warning(f"Ignoring invalid {DURATION_PRECISION_ENV_VAR} value: {raw!r}")
        return DEFAULT_DURATION_PRECISION


def _read_duration_format() -> Tuple[DurationStyle, bool, bool]:
    raw = os.environ.get(DURATION_FORMAT_ENV_VAR)
    if not raw:
        return DEFAULT_DURATION_FORMAT

    style, rounded, long_unit = DEFAULT_DURATION_FORMAT
    for token in raw.lower().replace(",", ":").split(":"):
        token = token.strip()
        if token in ("rounded", "round"):
            rounded = True
        elif token in ("exact", "raw"):
            rounded = False
        elif token == "long":
            long_unit = True
        elif token == "short":
            long_unit = False
        elif token:
            try:
                style = DurationStyle(token)
            except ValueError:
                logger.warning(f"Ignoring invalid {DURATION_FORMAT_ENV_VAR} token: {token!r}")
    return style, rounded, long_unit


def _read_timezone() -> Optional[tzinfo]:
    raw = os.environ.get(TIMEZONE_ENV_VAR)
    if not raw:
        return None
    try:
        return ZoneInfo(raw)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Ignoring unknown {TIMEZONE_ENV_VAR} value: {raw!r}")
        return None


def _parse_rfc3339(text: str) -> Optional[datetime]:
    if not text:
        return None
    try:
        return _ensure_aware(datetime.fromisoformat(text.strip().replace("Z", "+00:00")))
    except ValueError:
        logger.warning(f"Ignoring invalid {BASE_TIME_ENV_VAR} value: {text!r}")
        return None


def _ensure_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# Built last, the environment readers above must exist
_SETTINGS = _ProcessSettings()
