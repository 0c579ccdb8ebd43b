from __future__ import annotations

"""
Unit tests for Terminal Color Attributes.

Verifies:
1. Resolution of names, aliases and raw codes into SGR codes.
2. Collection of every unknown name in a single error.
3. Wrapping and stripping of escape sequences.
"""

import pytest

from multilogger.core.colors import (
    RESET_SEQUENCE,
    colorize,
    convert_attributes,
    is_color_name,
    strip_ansi,
    try_convert_attributes,
)
from multilogger.errors import AttributeNameError


@pytest.mark.parametrize("name, code", [
    ("red", 31),
    ("Red", 31),
    ("fgRed", 31),
    ("hiRed", 91),
    ("bgBlue", 44),
    ("bgHiBlue", 104),
    ("bold", 1),
    ("faint", 2),
    ("italic", 3),
    ("underline", 4),
    ("reverse", 7),
    ("blink", 5),
    ("secret", 8),
    ("strike", 9),
    ("reset", 0),
])
def test_convert_single_attribute(name: str, code: int) -> None:
    """Names are case-insensitive and aliases resolve to the same code."""
    assert convert_attributes(name) == [code]
    assert is_color_name(name)


def test_convert_mixed_attributes() -> None:
    """Separators, raw integers and nested sequences are accepted."""
    assert convert_attributes("red, bold") == [31, 1]
    assert convert_attributes("green+italic") == [32, 3]
    assert convert_attributes(4, ["blue", 1]) == [4, 34, 1]


def test_unknown_attributes_are_collected() -> None:
    """Every unknown name is reported, known names are still resolved."""
    codes, error = try_convert_attributes("red, rouge", "vert")
    assert codes == [31]
    assert isinstance(error, AttributeNameError)
    assert error.names == ["rouge", "vert"]
    assert "Attribute not found rouge" in str(error)


def test_convert_attributes_raises() -> None:
    with pytest.raises(AttributeNameError):
        convert_attributes("rouge")


def test_colorize_wraps_with_reset() -> None:
    assert colorize("text", [31, 1]) == f"\x1b[31;1mtext{RESET_SEQUENCE}"
    assert colorize("text", []) == "text"


def test_strip_ansi() -> None:
    colored = colorize("Hello", [34]) + " " + colorize("World", [1, 31])
    assert strip_ansi(colored) == "Hello World"
    assert strip_ansi("plain [text]") == "plain [text]"
