from __future__ import annotations

"""
Severity Level Model.

Defines the ordered severity scale used across the package, the two
sentinel levels (DISABLED and PRINT) and the parsing rules that resolve
user input (names, ordinals, Level members) into a level value.

Ordering follows the convention "lower is more severe": PANIC (0) is the
most severe, TRACE (6) the most verbose. Integers above TRACE are accepted
and mean "more verbose than trace".
"""

from enum import IntEnum
from typing import Any, Dict, Final, List, Optional, Tuple

from multilogger.errors import LevelParseError


class Level(IntEnum):
    """Standard severity levels plus the DISABLED and PRINT sentinels."""

    PANIC = 0
    FATAL = 1
    ERROR = 2
    WARNING = 3
    INFO = 4
    DEBUG = 5
    TRACE = 6

    # Sentinels sorted above every real level
    PRINT = 2 ** 32 - 2
    DISABLED = 2 ** 32 - 1


# -----------------------------------------------------------------------------
# LEVEL CONSTANTS
# -----------------------------------------------------------------------------

ALL_LEVELS: Final[List[Level]] = [
    Level.PANIC,
    Level.FATAL,
    Level.ERROR,
    Level.WARNING,
    Level.INFO,
    Level.DEBUG,
    Level.TRACE,
]

DISABLED_LEVEL_NAME: Final[str] = "disabled"

_LEVEL_NAMES: Final[Dict[int, str]] = {level: level.name.lower() for level in ALL_LEVELS}
_LEVEL_NAMES[Level.PRINT] = "print"
_LEVEL_NAMES[Level.DISABLED] = DISABLED_LEVEL_NAME

# Mapping of accepted textual identifiers to levels
_NAME_MAP: Final[Dict[str, Level]] = {level.name.lower(): level for level in ALL_LEVELS}
_NAME_MAP["warn"] = Level.WARNING


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def accepted_levels() -> List[str]:
    """
    List every level name accepted as input, starting with ``disabled``.

    Returns:
        List[str]: Level names in severity order.
    """
    return [DISABLED_LEVEL_NAME] + [_LEVEL_NAMES[level] for level in ALL_LEVELS]


def accepted_levels_string() -> str:
    """Return the accepted level names as a comma-separated string."""
    return ", ".join(accepted_levels())


def level_name(level: int) -> str:
    """
    Return the standard lowercase name of a level.

    Levels above TRACE have no standard name and render as ``level(N)``.
    """
    return _LEVEL_NAMES.get(int(level), f"level({int(level)})")


def try_parse_level(value: Any) -> Tuple[int, Optional[LevelParseError]]:
    """
    Convert a string, integer or Level into a logging level.

    None and the empty string resolve to DISABLED. Failures resolve to
    DISABLED together with a descriptive error.

    Args:
        value: Level name (case-insensitive), ordinal, numeric string,
            the literal "disabled" or a Level member.

    Returns:
        Tuple[int, Optional[LevelParseError]]: The level and the error, if any.
    """
    if value is None or value == "":
        return Level.DISABLED, None
    if isinstance(value, Level):
        return value, None
    if isinstance(value, bool):
        return Level.DISABLED, LevelParseError(value, "It has to be a string or an integer")
    if isinstance(value, int):
        return _level_from_int(value)
    if not isinstance(value, str):
        return Level.DISABLED, LevelParseError(value, "It has to be a string or an integer")

    text = value.strip()
    try:
        return _level_from_int(int(text), value)
    except ValueError:
        pass

    lowered = text.lower()
    if lowered == DISABLED_LEVEL_NAME:
        return Level.DISABLED, None
    if lowered in _NAME_MAP:
        return _NAME_MAP[lowered], None
    return Level.DISABLED, LevelParseError(value, f"Accepted values are: {accepted_levels_string()}")


def parse_level(value: Any) -> int:
    """
    Convert a value into a logging level, raising on failure.

    Raises:
        LevelParseError: If the value is not a recognised level.
    """
    level, error = try_parse_level(value)
    if error is not None:
        raise error
    return level


def compute_levels(minimum: int, supports_print: bool = False) -> List[int]:
    """
    Compute the ordered list of levels admitted by a hook threshold.

    Levels are listed from the most severe down to ``minimum`` inclusive.
    Hooks able to emit raw output also receive the PRINT sentinel first, so
    unformatted text is never blocked by severity filtering.

    Args:
        minimum: The hook threshold.
        supports_print: Whether the hook handles PRINT level entries.

    Returns:
        List[int]: Accepted levels (empty for a disabled non-print hook).
    """
    result: List[int] = [Level.PRINT] if supports_print else []
    if minimum == Level.DISABLED:
        return result
    if minimum <= Level.TRACE:
        return result + list(ALL_LEVELS[: minimum + 1])
    result.extend(ALL_LEVELS)
    if minimum < Level.PRINT:
        result.extend(range(Level.TRACE + 1, minimum + 1))
    return result


def _level_from_int(number: int, source: Any = None) -> Tuple[int, Optional[LevelParseError]]:
    if number < 0:
        shown = number if source is None else source
        return Level.DISABLED, LevelParseError(shown, "Level ordinals cannot be negative")
    try:
        return Level(number), None
    except ValueError:
        return number, None
