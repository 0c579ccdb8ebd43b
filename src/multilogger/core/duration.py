from __future__ import annotations

"""
Human Readable Duration Formatting.

Renders signed time spans (integer nanoseconds) in one of three styles:

- NATIVE: "5h5m5.005s", hours at most, float seconds below one minute.
- PRECISE: every non-zero unit as an integer, "1y2mo3d4h5m6s7ms8µs9ns".
- CLASSIC: integer cascade above one minute, float value below.

Each style may be preceded by a magnitude-based rounding step and may use
long unit names ("2 hours 1 minute") instead of short codes.
"""

import re
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Callable, Final, List, Optional, Tuple, Union

from multilogger.errors import DurationFormatError

DurationLike = Union[int, timedelta]
DurationFunc = Callable[[DurationLike], str]

# -----------------------------------------------------------------------------
# UNIT CONSTANTS (nanoseconds)
# -----------------------------------------------------------------------------

NANOSECOND: Final[int] = 1
MICROSECOND: Final[int] = 1000 * NANOSECOND
MILLISECOND: Final[int] = 1000 * MICROSECOND
SECOND: Final[int] = 1000 * MILLISECOND
MINUTE: Final[int] = 60 * SECOND
HOUR: Final[int] = 60 * MINUTE
DAY: Final[int] = 24 * HOUR
WEEK: Final[int] = 7 * DAY
MONTH: Final[int] = 30 * DAY
YEAR: Final[int] = 365 * DAY


@dataclass(frozen=True)
class _Unit:
    threshold: int
    divider: int
    short: str
    long: str


# A unit is emitted once the remaining duration reaches its threshold
_UNITS: Final[List[_Unit]] = [
    _Unit(YEAR, YEAR, "y", "year"),
    _Unit(45 * DAY, MONTH, "mo", "month"),
    _Unit(10 * DAY, WEEK, "w", "week"),
    _Unit(DAY, DAY, "d", "day"),
    _Unit(HOUR, HOUR, "h", "hour"),
    _Unit(MINUTE, MINUTE, "m", "minute"),
    _Unit(SECOND, SECOND, "s", "second"),
    _Unit(MILLISECOND, MILLISECOND, "ms", "millisecond"),
    _Unit(MICROSECOND, MICROSECOND, "µs", "microsecond"),
    _Unit(NANOSECOND, NANOSECOND, "ns", "nanosecond"),
]

# (magnitude, rounding step) evaluated top-down
_ROUNDING_TABLE: Final[List[Tuple[int, int]]] = [
    (MONTH, DAY),
    (HOUR, MINUTE),
    (5 * MINUTE, SECOND),
    (MINUTE, 5 * SECOND),
    (10 * SECOND, 100 * MILLISECOND),
    (SECOND, 10 * MILLISECOND),
    (MILLISECOND, 10 * MICROSECOND),
    (MICROSECOND, 10 * NANOSECOND),
]

_PARSE_UNITS: Final[dict] = {
    "ns": NANOSECOND,
    "us": MICROSECOND,
    "µs": MICROSECOND,
    "μs": MICROSECOND,
    "ms": MILLISECOND,
    "s": SECOND,
    "m": MINUTE,
    "h": HOUR,
    "d": DAY,
    "w": WEEK,
}

_PARSE_PART: Final[re.Pattern] = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h|d|w)")


class DurationStyle(Enum):
    """Available duration rendering styles."""

    NATIVE = "native"
    PRECISE = "precise"
    CLASSIC = "classic"


# (min_unit, max_unit): integer division applies above min_unit, units at or
# above max_unit are never emitted (0 means no bound)
_STYLE_WINDOWS: Final[dict] = {
    DurationStyle.PRECISE: (0, 0),
    DurationStyle.CLASSIC: (MINUTE, 0),
    DurationStyle.NATIVE: (MINUTE, DAY),
}


# -----------------------------------------------------------------------------
# CONVERSION & ROUNDING
# -----------------------------------------------------------------------------

def to_nanoseconds(value: DurationLike) -> int:
    """
    Convert an integer nanosecond count or a timedelta into nanoseconds.

    Raises:
        TypeError: For any other input type.
    """
    if isinstance(value, timedelta):
        return ((value.days * 86400 + value.seconds) * 1_000_000 + value.microseconds) * MICROSECOND
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    raise TypeError(f"Duration must be an int (nanoseconds) or a timedelta, got {type(value).__name__}")


def round_to(duration: int, precision: int) -> int:
    """
    Round a duration to the nearest multiple of precision.

    Halfway values are rounded away from zero. A non-positive precision
    leaves the duration unchanged.
    """
    if precision <= 0:
        return duration
    if duration < 0:
        return -round_to(-duration, precision)
    remainder = duration % precision
    if remainder + remainder < precision:
        return duration - remainder
    return duration + precision - remainder


def rounded_duration(duration: DurationLike) -> int:
    """
    Apply the magnitude-based rounding policy.

    Months and more round to whole days, hours to minutes, five minutes to
    seconds, one minute to five-second buckets, ten seconds to 100ms, one
    second to 10ms, one millisecond to 10µs and one microsecond to 10ns.
    Shorter durations are returned unchanged.
    """
    nanoseconds = to_nanoseconds(duration)
    magnitude = abs(nanoseconds)
    for threshold, step in _ROUNDING_TABLE:
        if magnitude >= threshold:
            return round_to(nanoseconds, step)
    return nanoseconds


# -----------------------------------------------------------------------------
# FORMATTING API
# -----------------------------------------------------------------------------

def format_duration(
        duration: DurationLike,
        style: DurationStyle = DurationStyle.PRECISE,
        rounded: bool = False,
        long_unit: bool = False,
) -> str:
    """
    Render a duration as text.

    Args:
        duration: Nanoseconds or timedelta, may be negative.
        style: Rendering style.
        rounded: Apply the rounding policy before formatting.
        long_unit: Use unit names ("3 hours") instead of codes ("3h").

    Returns:
        str: The formatted duration.
    """
    nanoseconds = to_nanoseconds(duration)
    if rounded:
        nanoseconds = rounded_duration(nanoseconds)
    min_unit, max_unit = _STYLE_WINDOWS[DurationStyle(style)]
    if nanoseconds < 0:
        return "-" + _format(-nanoseconds, min_unit, max_unit, long_unit)
    return _format(nanoseconds, min_unit, max_unit, long_unit)


def try_get_duration_func(
        style: Union[DurationStyle, str],
        rounded: bool = False,
        long_unit: bool = False,
) -> Tuple[DurationFunc, Optional[DurationFormatError]]:
    """
    Build a reusable duration formatting function.

    Unknown styles return a fallback function (plain nanosecond count) and
    the error describing the problem.
    """
    try:
        resolved = style if isinstance(style, DurationStyle) else DurationStyle(str(style).lower())
    except ValueError:
        return (lambda d: f"{to_nanoseconds(d)}ns"), DurationFormatError(f"unknown format {style}")

    def _format_func(duration: DurationLike) -> str:
        return format_duration(duration, resolved, rounded, long_unit)

    return _format_func, None


def get_duration_func(
        style: Union[DurationStyle, str],
        rounded: bool = False,
        long_unit: bool = False,
) -> DurationFunc:
    """
    Build a duration formatting function, raising on unknown styles.

    Raises:
        DurationFormatError: If the style is unknown.
    """
    func, error = try_get_duration_func(style, rounded, long_unit)
    if error is not None:
        raise error
    return func


def parse_duration(text: str) -> int:
    """
    Parse a compact duration string such as "1h30m", "5ms" or "-1.5s".

    A bare integer is interpreted as nanoseconds.

    Raises:
        DurationFormatError: If the string is not a valid duration.
    """
    value = (text or "").strip()
    if not value:
        raise DurationFormatError(f"invalid duration {text!r}")

    sign = 1
    if value[0] in "+-":
        sign = -1 if value[0] == "-" else 1
        value = value[1:]

    if value.isdigit():
        return sign * int(value)

    total = 0.0
    position = 0
    for match in _PARSE_PART.finditer(value):
        if match.start() != position:
            break
        total += float(match.group(1)) * _PARSE_UNITS[match.group(2)]
        position = match.end()
    if position == 0 or position != len(value):
        raise DurationFormatError(f"invalid duration {text!r}")
    return sign * int(round(total))


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _format(duration: int, min_unit: int, max_unit: int, long_unit: bool) -> str:
    parts: List[str] = []
    for unit in _UNITS:
        if max_unit and unit.threshold >= max_unit:
            continue
        if duration < unit.threshold:
            continue

        if duration > min_unit:
            quotient, duration = divmod(duration, unit.divider)
            value: float = quotient
            text = str(quotient)
        else:
            value = duration / unit.divider
            text = _format_number(value)
            duration = 0

        if long_unit:
            parts.append(f"{text} {unit.long}{'s' if value >= 2 else ''}")
        else:
            parts.append(f"{text}{unit.short}")

    if not parts:
        return "0 second" if long_unit else "0s"
    return (" " if long_unit else "").join(parts)


def _format_number(value: float) -> str:
    """Shortest representation of a float, without a trailing '.0'."""
    if value.is_integer():
        return str(int(value))
    return repr(value)
