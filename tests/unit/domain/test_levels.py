from __future__ import annotations

"""
Unit tests for the Severity Level Model.

Verifies:
1. Parsing of names, aliases, ordinals and sentinel values.
2. Rejection of invalid input with a descriptive error.
3. Computation of the level sets accepted by a hook.
"""

import pytest

from multilogger.domain.levels import (
    Level,
    accepted_levels,
    accepted_levels_string,
    compute_levels,
    level_name,
    parse_level,
    try_parse_level,
)
from multilogger.errors import LevelParseError


# -----------------------------------------------------------------------------
# 1. Parsing
# -----------------------------------------------------------------------------

@pytest.mark.parametrize("value, expected", [
    ("info", Level.INFO),
    ("INFO", Level.INFO),
    (" Trace ", Level.TRACE),
    ("warn", Level.WARNING),
    ("Warning", Level.WARNING),
    ("panic", Level.PANIC),
    ("disabled", Level.DISABLED),
    ("DISABLED", Level.DISABLED),
    (None, Level.DISABLED),
    ("", Level.DISABLED),
    (0, Level.PANIC),
    (5, Level.DEBUG),
    ("4", Level.INFO),
    (Level.ERROR, Level.ERROR),
])
def test_parse_level_accepted_values(value, expected) -> None:
    """Names are case-insensitive, ordinals and Level members pass through."""
    assert parse_level(value) == expected


def test_parse_level_above_trace_is_kept() -> None:
    """Integers above TRACE mean 'more verbose than trace'."""
    assert parse_level(8) == 8
    assert parse_level("9") == 9


@pytest.mark.parametrize("value", ["verbose", "-1", -3, 1.5, True, ["info"]])
def test_parse_level_rejects_invalid_values(value) -> None:
    """Unknown names and unsupported types raise a LevelParseError."""
    with pytest.raises(LevelParseError) as excinfo:
        parse_level(value)
    assert repr(value) in str(excinfo.value)


def test_negative_level_text_is_reported_as_given() -> None:
    """The error echoes the caller's text, not the converted integer."""
    _, error = try_parse_level(" -2 ")

    assert error is not None
    assert error.value == " -2 "
    assert str(error) == "Unable to parse logging level: ' -2 '. Level ordinals cannot be negative"


def test_try_parse_level_returns_error_instead_of_raising() -> None:
    """The try_ variant never raises and falls back to DISABLED."""
    level, error = try_parse_level("unknown")
    assert level == Level.DISABLED
    assert isinstance(error, LevelParseError)
    assert "Accepted values are" in str(error)

    level, error = try_parse_level("debug")
    assert level == Level.DEBUG
    assert error is None


def test_accepted_levels_lists_disabled_first() -> None:
    """The list of names starts with disabled and follows the severity order."""
    assert accepted_levels() == ["disabled", "panic", "fatal", "error", "warning", "info", "debug", "trace"]
    assert accepted_levels_string().startswith("disabled, panic, fatal")


def test_level_name() -> None:
    """Standard levels use their lowercase name, others are numbered."""
    assert level_name(Level.WARNING) == "warning"
    assert level_name(Level.PRINT) == "print"
    assert level_name(7) == "level(7)"


# -----------------------------------------------------------------------------
# 2. Hook level sets
# -----------------------------------------------------------------------------

def test_compute_levels_with_print_support() -> None:
    """PRINT is listed first, then every level down to the threshold."""
    assert compute_levels(Level.WARNING, True) == [
        Level.PRINT, Level.PANIC, Level.FATAL, Level.ERROR, Level.WARNING,
    ]


def test_compute_levels_without_print_support() -> None:
    assert compute_levels(Level.ERROR) == [Level.PANIC, Level.FATAL, Level.ERROR]


def test_compute_levels_disabled() -> None:
    """A disabled hook still receives raw printed text when it supports it."""
    assert compute_levels(Level.DISABLED, True) == [Level.PRINT]
    assert compute_levels(Level.DISABLED, False) == []


def test_compute_levels_beyond_trace() -> None:
    """Thresholds above TRACE add the extra verbose levels."""
    levels = compute_levels(8)
    assert levels[:7] == list(range(7))
    assert levels[7:] == [7, 8]
