from __future__ import annotations

"""
Template Compiler.

Turns a format string such as ``"[%.4level:color,upper%] %time% %message%"``
into a ``CompiledTemplate``: the literal skeleton with every placeholder
removed, plus one ``FieldSpec`` per placeholder holding its offset into that
skeleton and everything the renderer needs to produce its text.

Placeholder grammar::

    %[width][.limit](token|fieldName)[:attr[,attr]*]%

Two directives, ``%key:...%`` and ``%field:...%``, emit nothing. They
replace the wrapper applied to keys (resp. values) for every placeholder
that follows them in the template.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Final, List, Optional, Tuple

from multilogger.core.colors import try_convert_attributes
from multilogger.errors import TemplateError

_PLACEHOLDER: Final[re.Pattern] = re.compile(
    r"%(?:(?P<width>-?\d+)?(?:\.(?P<limit>\d+))?(?P<name>\w+))?"
    r"(?::(?P<attributes>[\s,+\-]*\w[\w\s,+\-]*))?%"
)

_ATTRIBUTE_SPLIT: Final[re.Pattern] = re.compile(r"[\s,+\-]+")


# -----------------------------------------------------------------------------
# ENUMERATIONS
# -----------------------------------------------------------------------------

class TokenKind(Enum):
    """
    Kind of value a placeholder produces.

    The value is the key printed in front of the field when the ``key``
    attribute is set.
    """

    MESSAGE = "Message"
    LEVEL = "Level"
    TIME = "Time"
    DELTA = "Delta"
    DELAY = "Delay"
    GLOBAL_DELAY = "GlobalDelay"
    MODULE = "Module"
    FUNC = "Func"
    FILE = "File"
    LINE = "Line"
    CALLER = "Caller"
    FIELDS = "Fields"
    FIELD = "Field"
    # Attribute only placeholder such as %:red%
    STYLE = "Style"
    KEY_WRAPPER = "Key"
    VALUE_WRAPPER = "Value"


class Transform(Enum):
    NONE = "none"
    UPPER = "upper"
    LOWER = "lower"
    TITLE = "title"


class Bracket(Enum):
    NONE = ("", "")
    SQUARE = ("[", "]")
    CURLY = ("{", "}")
    ROUND = ("(", ")")
    ANGLE = ("<", ">")


class AttributeKind(Enum):
    """Non color attributes recognised in a placeholder."""

    COLOR = "color"
    UPPER = "upper"
    LOWER = "lower"
    TITLE = "title"
    KEY = "key"
    SQUARE = "square"
    CURLY = "curly"
    ROUND = "round"
    ANGLE = "angle"
    SPACE = "space"
    NONE = "none"
    IGNORE_EMPTY = "ignoreempty"


_TOKENS: Final[Dict[str, TokenKind]] = {
    "message": TokenKind.MESSAGE,
    "msg": TokenKind.MESSAGE,
    "level": TokenKind.LEVEL,
    "lvl": TokenKind.LEVEL,
    "time": TokenKind.TIME,
    "delta": TokenKind.DELTA,
    "delay": TokenKind.DELAY,
    "globaldelay": TokenKind.GLOBAL_DELAY,
    "global": TokenKind.GLOBAL_DELAY,
    "module": TokenKind.MODULE,
    "func": TokenKind.FUNC,
    "file": TokenKind.FILE,
    "line": TokenKind.LINE,
    "caller": TokenKind.CALLER,
    "fields": TokenKind.FIELDS,
    "key": TokenKind.KEY_WRAPPER,
    "field": TokenKind.VALUE_WRAPPER,
}


def _build_attribute_table() -> Dict[str, AttributeKind]:
    table = {kind.value: kind for kind in AttributeKind}
    for bracket in (AttributeKind.SQUARE, AttributeKind.CURLY, AttributeKind.ROUND, AttributeKind.ANGLE):
        table[f"{bracket.value}brackets"] = bracket
    table["parens"] = table["parenthesis"] = AttributeKind.ROUND
    table["ignore"] = AttributeKind.IGNORE_EMPTY
    return table


_ATTRIBUTES: Final[Dict[str, AttributeKind]] = _build_attribute_table()

_BRACKETS: Final[Dict[AttributeKind, Bracket]] = {
    AttributeKind.SQUARE: Bracket.SQUARE,
    AttributeKind.CURLY: Bracket.CURLY,
    AttributeKind.ROUND: Bracket.ROUND,
    AttributeKind.ANGLE: Bracket.ANGLE,
}

_TRANSFORMS: Final[Dict[AttributeKind, Transform]] = {
    AttributeKind.UPPER: Transform.UPPER,
    AttributeKind.LOWER: Transform.LOWER,
    AttributeKind.TITLE: Transform.TITLE,
}


# -----------------------------------------------------------------------------
# COMPILED MODEL
# -----------------------------------------------------------------------------

@dataclass
class FieldSpec:
    """
    Compiled description of one placeholder.

    Attributes:
        kind: What the placeholder renders.
        name: Field name for FIELD placeholders, empty otherwise.
        offset: Insertion point in the compiled skeleton.
        key_wrapper: Spec applied to "key=" when the key is printed.
        value_wrapper: Spec applied to values rendered through the default
            key/value decoration.
    """

    kind: TokenKind
    name: str = ""
    transform: Transform = Transform.NONE
    bracket: Bracket = Bracket.NONE
    width: Optional[int] = None
    limit: Optional[int] = None
    add_space: bool = False
    ignore_empty: bool = False
    print_key: bool = False
    no_key_format: bool = False
    color: bool = False
    attributes: Tuple[int, ...] = ()
    offset: int = 0
    key_wrapper: Optional["FieldSpec"] = field(default=None, repr=False)
    value_wrapper: Optional["FieldSpec"] = field(default=None, repr=False)

    @property
    def key(self) -> str:
        """Key printed in front of the value when ``print_key`` is set."""
        return self.name if self.kind is TokenKind.FIELD else self.kind.value

    @property
    def is_wrapper(self) -> bool:
        return self.kind in (TokenKind.KEY_WRAPPER, TokenKind.VALUE_WRAPPER)

    @property
    def deferred(self) -> bool:
        return self.kind is TokenKind.FIELDS


@dataclass(frozen=True)
class CompiledTemplate:
    """Literal skeleton plus the ordered placeholder specs."""

    template: str
    skeleton: str
    fields: Tuple[FieldSpec, ...]


def default_key_wrapper() -> FieldSpec:
    """Keys follow the level color unless a %key% directive says otherwise."""
    return FieldSpec(kind=TokenKind.KEY_WRAPPER, color=True)


def default_value_wrapper() -> FieldSpec:
    return FieldSpec(kind=TokenKind.VALUE_WRAPPER)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def try_compile_template(template: str) -> Tuple[CompiledTemplate, Optional[TemplateError]]:
    """
    Compile a format string.

    The template is scanned once from left to right. Unknown attribute names
    do not stop the scan: they are collected and reported together.

    Args:
        template: The format string.

    Returns:
        Tuple[CompiledTemplate, Optional[TemplateError]]: The compiled
        template and, when some attributes are unknown, the error listing
        all of them.
    """
    problems: List[str] = []
    specs: List[FieldSpec] = []
    pieces: List[str] = []
    length = 0
    position = 0
    key_wrapper = default_key_wrapper()
    value_wrapper = default_value_wrapper()

    for match in _PLACEHOLDER.finditer(template):
        literal = template[position:match.start()]
        pieces.append(literal)
        length += len(literal)
        position = match.end()

        spec = _build_spec(match, problems)
        if spec is None:
            continue
        if spec.kind is TokenKind.KEY_WRAPPER:
            key_wrapper = spec
            continue
        if spec.kind is TokenKind.VALUE_WRAPPER:
            value_wrapper = spec
            continue

        spec.offset = length
        spec.key_wrapper = key_wrapper
        spec.value_wrapper = value_wrapper
        specs.append(spec)

    pieces.append(template[position:])
    compiled = CompiledTemplate(template=template, skeleton="".join(pieces), fields=tuple(specs))
    if problems:
        return compiled, TemplateError(template, problems)
    return compiled, None


def compile_template(template: str) -> CompiledTemplate:
    """
    Compile a format string, raising on failure.

    Raises:
        TemplateError: If some attribute names are unknown.
    """
    compiled, error = try_compile_template(template)
    if error is not None:
        raise error
    return compiled


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _build_spec(match: re.Match, problems: List[str]) -> Optional[FieldSpec]:
    """Build the spec of one placeholder, None when it renders nothing."""
    name = match.group("name") or ""
    kind = _TOKENS.get(name.lower(), TokenKind.FIELD) if name else TokenKind.STYLE
    spec = FieldSpec(kind=kind, name=name if kind is TokenKind.FIELD else "")
    spec.width = _parse_int(match.group("width"))
    spec.limit = _parse_int(match.group("limit"))

    colors: List[str] = []
    for attribute in _ATTRIBUTE_SPLIT.split(match.group("attributes") or ""):
        lowered = attribute.lower()
        if not lowered:
            continue
        attribute_kind = _ATTRIBUTES.get(lowered)
        if attribute_kind is None:
            colors.append(attribute)
        else:
            _apply_attribute(spec, attribute_kind)

    if colors:
        codes, error = try_convert_attributes(colors)
        if error is not None:
            problems.extend(str(error).splitlines())
        spec.attributes = tuple(codes)

    if kind is TokenKind.STYLE and not spec.attributes:
        return None
    return spec


def _apply_attribute(spec: FieldSpec, kind: AttributeKind) -> None:
    if kind is AttributeKind.COLOR:
        spec.color = True
    elif kind in _TRANSFORMS:
        spec.transform = _TRANSFORMS[kind]
    elif kind in _BRACKETS:
        spec.bracket = _BRACKETS[kind]
    elif kind is AttributeKind.KEY:
        spec.print_key = True
    elif kind is AttributeKind.SPACE:
        spec.add_space = True
    elif kind is AttributeKind.NONE:
        spec.no_key_format = True
    elif kind is AttributeKind.IGNORE_EMPTY:
        spec.ignore_empty = True


def _parse_int(text: Optional[str]) -> Optional[int]:
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return None
