from __future__ import annotations

"""
Terminal Color Attributes.

Maps human readable attribute names (``red``, ``bgHiBlue``, ``bold``,
``italic``...) to SGR codes, wraps text with the resulting escape sequences
and strips escape sequences from text rendered without color.

Foreground and background codes are taken from colorama's ANSI tables;
text styles colorama does not name (italic, underline, blink...) are added
from the SGR standard.
"""

import re
from typing import Any, Dict, Final, Iterable, List, Optional, Sequence, Tuple

from colorama.ansi import AnsiBack, AnsiFore, AnsiStyle

from multilogger.errors import AttributeNameError

ESCAPE: Final[str] = "\x1b["
RESET_SEQUENCE: Final[str] = f"{ESCAPE}0m"

_BASE_COLORS: Final[List[str]] = [
    "black", "red", "green", "yellow", "blue", "magenta", "cyan", "white",
]

_ANSI_PATTERN: Final[re.Pattern] = re.compile(
    r"[\u001B\u009B][\[\]()#;?]*"
    r"(?:(?:(?:[a-zA-Z\d]*(?:;[a-zA-Z\d]*)*)?\u0007)"
    r"|(?:(?:\d{1,4}(?:;\d{0,4})*)?[\dA-PRZcf-ntqry=><~]))"
)

_NAME_SPLIT: Final[re.Pattern] = re.compile(r"[^0-9A-Za-z]+")


def _build_color_names() -> Dict[str, int]:
    names: Dict[str, int] = {
        "reset": AnsiStyle.RESET_ALL,
        "bold": AnsiStyle.BRIGHT,
        "faint": AnsiStyle.DIM,
        "italic": 3,
        "underline": 4,
        "blinkslow": 5,
        "blinkrapid": 6,
        "reversevideo": 7,
        "concealed": 8,
        "crossedout": 9,
    }
    for color in _BASE_COLORS:
        upper = color.upper()
        light = f"LIGHT{upper}_EX"
        names[f"fg{color}"] = names[color] = getattr(AnsiFore, upper)
        names[f"fghi{color}"] = names[f"hi{color}"] = getattr(AnsiFore, light)
        names[f"bg{color}"] = getattr(AnsiBack, upper)
        names[f"bghi{color}"] = getattr(AnsiBack, light)

    # Aliases
    names["reverse"] = names["reversevideo"]
    names["blink"] = names["blinkslow"]
    names["secret"] = names["concealed"]
    names["strikethrough"] = names["strike"] = names["crossedout"]
    return names


COLOR_NAMES: Final[Dict[str, int]] = _build_color_names()


# -----------------------------------------------------------------------------
# ATTRIBUTE RESOLUTION
# -----------------------------------------------------------------------------

def is_color_name(name: str) -> bool:
    """Check whether a single attribute name is a known color or style."""
    return name.lower() in COLOR_NAMES


def try_convert_attributes(*attributes: Any) -> Tuple[List[int], Optional[AttributeNameError]]:
    """
    Resolve attribute names or SGR codes into a list of SGR codes.

    Strings may hold several names separated by any non alphanumeric
    character ("red, bold" or "red+bold"). Integers are taken as raw codes
    and nested sequences are flattened.

    Returns:
        Tuple[List[int], Optional[AttributeNameError]]: The resolved codes and
        an error listing every unknown name, if any.
    """
    codes: List[int] = []
    unknown: List[str] = []
    _collect(attributes, codes, unknown)
    if unknown:
        return codes, AttributeNameError(unknown)
    return codes, None


def convert_attributes(*attributes: Any) -> List[int]:
    """
    Resolve attributes into SGR codes.

    Raises:
        AttributeNameError: If some names are unknown.
    """
    codes, error = try_convert_attributes(*attributes)
    if error is not None:
        raise error
    return codes


def _collect(attributes: Iterable[Any], codes: List[int], unknown: List[str]) -> None:
    for attribute in attributes:
        if isinstance(attribute, int) and not isinstance(attribute, bool):
            codes.append(attribute)
        elif isinstance(attribute, (list, tuple)):
            _collect(attribute, codes, unknown)
        else:
            for name in _NAME_SPLIT.split(str(attribute)):
                if not name:
                    continue
                code = COLOR_NAMES.get(name.lower())
                if code is None:
                    unknown.append(name)
                else:
                    codes.append(code)


# -----------------------------------------------------------------------------
# RENDERING
# -----------------------------------------------------------------------------

def sgr_sequence(codes: Sequence[int]) -> str:
    """Return the escape sequence that activates the given codes."""
    return f"{ESCAPE}{';'.join(str(code) for code in codes)}m"


def colorize(text: str, codes: Sequence[int]) -> str:
    """Wrap text with the given SGR codes followed by a reset sequence."""
    if not codes:
        return text
    return f"{sgr_sequence(codes)}{text}{RESET_SEQUENCE}"


def strip_ansi(text: str) -> str:
    """Remove every ANSI escape sequence from text."""
    return _ANSI_PATTERN.sub("", text)
