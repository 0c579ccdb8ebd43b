from __future__ import annotations

"""
Unit tests for the Duration Formatter.

Verifies:
1. Rendering in the precise, native and classic styles.
2. Long unit names and signed durations.
3. The magnitude-based rounding policy.
4. Parsing of compact duration strings and style errors.
"""

from datetime import timedelta

import pytest

from multilogger.core.duration import (
    DAY,
    HOUR,
    MICROSECOND,
    MILLISECOND,
    MINUTE,
    NANOSECOND,
    SECOND,
    DurationStyle,
    format_duration,
    get_duration_func,
    parse_duration,
    round_to,
    rounded_duration,
    try_get_duration_func,
)
from multilogger.errors import DurationFormatError

_ALL_UNITS = HOUR + MINUTE + SECOND + MILLISECOND + MICROSECOND + NANOSECOND


# -----------------------------------------------------------------------------
# 1. Styles
# -----------------------------------------------------------------------------

def test_precise_lists_every_unit() -> None:
    """Precise style emits every non-zero unit as an integer."""
    assert format_duration(_ALL_UNITS, DurationStyle.PRECISE) == "1h1m1s1ms1µs1ns"


def test_native_keeps_fractional_seconds() -> None:
    """Native style stops at hours and renders seconds as a float."""
    duration = 5 * HOUR + 5 * MINUTE + 5 * SECOND + 5 * MILLISECOND
    assert format_duration(duration, DurationStyle.NATIVE) == "5h5m5.005s"
    assert format_duration(3 * DAY, DurationStyle.NATIVE) == "72h"


def test_classic_uses_float_below_one_minute() -> None:
    assert format_duration(1500 * MILLISECOND, DurationStyle.CLASSIC) == "1.5s"
    assert format_duration(2 * DAY + 3 * HOUR, DurationStyle.CLASSIC) == "2d3h"


@pytest.mark.parametrize("days, expected", [
    (8, "8d"),
    (14, "2w"),
    (60, "2mo"),
    (400, "1y5w"),
])
def test_precise_calendar_units(days: int, expected: str) -> None:
    """Weeks appear from ten days, months from 45 days."""
    assert format_duration(days * DAY) == expected


def test_zero_duration() -> None:
    assert format_duration(0) == "0s"
    assert format_duration(0, long_unit=True) == "0 second"


def test_negative_duration_is_signed() -> None:
    assert format_duration(-1500 * MILLISECOND) == "-1s500ms"


def test_long_unit_names() -> None:
    """Long names are pluralised from two units."""
    assert format_duration(2 * HOUR + MINUTE, long_unit=True) == "2 hours 1 minute"


def test_timedelta_input() -> None:
    assert format_duration(timedelta(seconds=90)) == "1m30s"


# -----------------------------------------------------------------------------
# 2. Rounding
# -----------------------------------------------------------------------------

@pytest.mark.parametrize("duration, precision, expected", [
    (14, 10, 10),
    (15, 10, 20),
    (-15, 10, -20),
    (123, 0, 123),
])
def test_round_to(duration: int, precision: int, expected: int) -> None:
    """Halfway values round away from zero, no precision means no rounding."""
    assert round_to(duration, precision) == expected


def test_rounded_duration_policy() -> None:
    """Rounding step depends on the magnitude of the duration."""
    assert rounded_duration(HOUR + 2 * MINUTE + 35 * SECOND) == HOUR + 3 * MINUTE
    assert rounded_duration(2 * MINUTE + 12 * SECOND) == 2 * MINUTE + 10 * SECOND
    assert rounded_duration(1234 * MILLISECOND + 5 * MICROSECOND) == 1230 * MILLISECOND
    assert rounded_duration(999) == 999


@pytest.mark.parametrize("duration, expected", [
    pytest.param(999, 999, id="below-1us"),
    pytest.param(1005, 1010, id="above-1us"),
    pytest.param(999_995, MILLISECOND, id="up-to-1ms"),
    pytest.param(SECOND - 5 * NANOSECOND, SECOND, id="up-to-1s"),
    pytest.param(9995 * MILLISECOND, 10 * SECOND, id="up-to-10s"),
    pytest.param(59_960 * MILLISECOND, MINUTE, id="up-to-1m"),
    pytest.param(4 * MINUTE + 57_600 * MILLISECOND, 5 * MINUTE, id="up-to-5m"),
    pytest.param(59 * MINUTE + 59_500 * MILLISECOND, HOUR, id="up-to-1h"),
    pytest.param(29 * DAY + 23 * HOUR + 59 * MINUTE + 40 * SECOND, 30 * DAY, id="up-to-30d"),
    pytest.param(30 * DAY + 11 * HOUR + 59 * MINUTE, 30 * DAY, id="down-above-30d"),
    pytest.param(-(999_995), -MILLISECOND, id="negative"),
])
def test_rounding_is_stable_across_thresholds(duration: int, expected: int) -> None:
    """Rounding up to a threshold lands on a value the next step keeps as is."""
    once = rounded_duration(duration)

    assert once == expected
    assert rounded_duration(once) == once
    assert format_duration(once, rounded=True) == format_duration(duration, rounded=True)


def test_format_duration_rounded() -> None:
    duration = 3 * HOUR + 12 * MINUTE + 31 * SECOND
    assert format_duration(duration, rounded=True) == "3h13m"
    assert format_duration(duration, rounded=False) == "3h12m31s"


# -----------------------------------------------------------------------------
# 3. Duration functions
# -----------------------------------------------------------------------------

def test_get_duration_func_accepts_style_names() -> None:
    func = get_duration_func("Native")
    assert func(90 * SECOND) == "1m30s"


def test_get_duration_func_unknown_style() -> None:
    with pytest.raises(DurationFormatError):
        get_duration_func("roman")


def test_try_get_duration_func_falls_back_to_nanoseconds() -> None:
    func, error = try_get_duration_func("roman")
    assert isinstance(error, DurationFormatError)
    assert func(42) == "42ns"


# -----------------------------------------------------------------------------
# 4. Parsing
# -----------------------------------------------------------------------------

@pytest.mark.parametrize("text, expected", [
    ("1h30m", HOUR + 30 * MINUTE),
    ("5ms", 5 * MILLISECOND),
    ("-1.5s", -1500 * MILLISECOND),
    ("10us", 10 * MICROSECOND),
    ("2µs", 2 * MICROSECOND),
    ("250", 250),
    ("1d", DAY),
])
def test_parse_duration(text: str, expected: int) -> None:
    assert parse_duration(text) == expected


@pytest.mark.parametrize("text", ["", "abc", "1x", "5ms!", "ms"])
def test_parse_duration_rejects_garbage(text: str) -> None:
    with pytest.raises(DurationFormatError):
        parse_duration(text)


@pytest.mark.parametrize("duration", [
    0,
    NANOSECOND,
    MICROSECOND + NANOSECOND,
    HOUR + MINUTE + SECOND + MILLISECOND + MICROSECOND + NANOSECOND,
    12 * DAY + 3 * HOUR,
    45 * DAY - NANOSECOND,
    -(90 * SECOND),
])
def test_precise_output_parses_back(duration: int) -> None:
    """Precise rendering loses nothing below the month unit."""
    text = format_duration(duration, DurationStyle.PRECISE)
    assert parse_duration(text) == duration
