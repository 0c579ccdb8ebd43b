from __future__ import annotations

"""
Template Renderer.

Applies a ``CompiledTemplate`` to one ``LogEntry``. Every placeholder goes
through the same pipeline:

1. ignore-empty short-circuit
2. ANSI stripping when color is off
3. text transform (upper, lower, title)
4. limit, then width (negative width aligns left)
5. brackets, then trailing space
6. color (field attributes and/or the level palette)
7. key=value composition through the key/value wrappers

Placeholders of kind ``fields`` are rendered last, once every named field
lookup of the template has been done, and list the remaining fields.
"""

import re
import threading
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Protocol, Set, Tuple

from multilogger.core.colors import colorize, sgr_sequence, strip_ansi
from multilogger.core.duration import DurationLike, round_to, to_nanoseconds
from multilogger.core.formatter.compiler import Bracket, CompiledTemplate, FieldSpec, TokenKind, Transform
from multilogger.domain.entry import CallerFrame, LogEntry
from multilogger.domain.levels import level_name
from multilogger.infra.settings import get_duration_precision, get_global_time, get_global_timezone

_WORD_START = re.compile(r"\b\w")


class RenderContext(Protocol):
    """Formatter state read while rendering."""

    color: bool
    timestamp_format: str
    format_duration: Callable[[DurationLike], str]
    format_caller: Callable[[Optional[CallerFrame]], str]
    color_map: Dict[int, List[int]]
    level_names: Dict[int, str]
    round_duration: int
    base_time: datetime
    last: datetime
    color_cache: "ColorCache"


class ColorCache:
    """
    SGR codes of each field, computed once per level.

    Reads are lock-free; a miss computes the codes and inserts them under
    the lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._codes: Dict[Tuple[int, int], Tuple[int, ...]] = {}

    def codes_for(self, spec: FieldSpec, level: int, color_map: Dict[int, List[int]]) -> Tuple[int, ...]:
        cache_key = (id(spec), level)
        codes = self._codes.get(cache_key)
        if codes is None:
            computed = list(spec.attributes)
            if spec.color:
                computed.extend(color_map.get(level, []))
            codes = tuple(computed)
            with self._lock:
                self._codes[cache_key] = codes
        return codes

    def clear(self) -> None:
        with self._lock:
            self._codes = {}


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render(template: CompiledTemplate, entry: LogEntry, context: RenderContext) -> str:
    """
    Render an entry with a compiled template.

    Args:
        template: The compiled template.
        entry: The log entry.
        context: The formatter settings (color mode, timestamp pattern...).

    Returns:
        str: The rendered text, terminated by a newline.
    """
    used: Set[str] = set()
    rendered: List[Optional[str]] = []
    deferred: List[int] = []

    for index, spec in enumerate(template.fields):
        if spec.deferred:
            deferred.append(index)
            rendered.append(None)
        else:
            rendered.append(_render_field(spec, entry, context, used))

    for index in deferred:
        rendered[index] = _render_remaining_fields(template.fields[index], entry, context, used)

    pieces: List[str] = []
    position = 0
    skeleton = template.skeleton
    for spec, text in zip(template.fields, rendered):
        pieces.append(skeleton[position:spec.offset])
        pieces.append(text or "")
        position = spec.offset
    pieces.append(skeleton[position:])
    pieces.append("\n")
    return "".join(pieces)


def format_timestamp(moment: datetime, pattern: str) -> str:
    """
    Format a datetime with a strftime pattern where ``%L`` means milliseconds.

    The moment is converted to the process timezone when one is set.
    """
    zone = get_global_timezone()
    if zone is not None:
        moment = moment.astimezone(zone)
    pattern = pattern.replace("%L", f"{moment.microsecond // 1000:03d}")
    return moment.strftime(pattern)


def format_value(
        spec: FieldSpec,
        key: str,
        value: str,
        print_key: bool,
        level: int,
        context: RenderContext,
) -> str:
    """Run one value through the field pipeline of spec."""
    if spec.ignore_empty and not value.strip():
        return ""

    if not context.color:
        value = strip_ansi(value)

    if spec.transform is Transform.UPPER:
        value = value.upper()
    elif spec.transform is Transform.LOWER:
        value = value.lower()
    elif spec.transform is Transform.TITLE:
        value = _WORD_START.sub(lambda m: m.group(0).upper(), value)

    if spec.limit is not None:
        value = value[:spec.limit]
    if spec.width is not None:
        value = value.rjust(spec.width) if spec.width >= 0 else value.ljust(-spec.width)

    if spec.bracket is not Bracket.NONE:
        opening, closing = spec.bracket.value
        value = f"{opening}{value}{closing}"
    if spec.add_space:
        value += " "

    if context.color and (spec.color or spec.attributes):
        value = colorize(value, context.color_cache.codes_for(spec, level, context.color_map))

    if spec.is_wrapper:
        return value

    if print_key:
        if spec.no_key_format:
            return f"{key}={value}"
        return _wrap(spec.key_wrapper, key + "=", level, context) + _wrap(spec.value_wrapper, value, level, context)
    if not spec.no_key_format:
        return _wrap(spec.value_wrapper, value, level, context)
    return value


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _wrap(wrapper: Optional[FieldSpec], value: Any, level: int, context: RenderContext) -> str:
    if wrapper is None:
        return str(value)
    return format_value(wrapper, "", str(value), False, level, context)


def _render_field(spec: FieldSpec, entry: LogEntry, context: RenderContext, used: Set[str]) -> str:
    kind = spec.kind
    print_key = spec.print_key
    caller = entry.caller
    value = ""

    if kind is TokenKind.STYLE:
        return sgr_sequence(spec.attributes) if context.color else ""
    if kind is TokenKind.FIELD:
        used.add(spec.name)
        raw = entry.fields.get(spec.name)
        if raw is None or raw == "":
            print_key = False
        else:
            value = str(raw)
    elif kind is TokenKind.MESSAGE:
        value = entry.message
    elif kind is TokenKind.LEVEL:
        value = context.level_names.get(entry.level) or level_name(entry.level)
    elif kind is TokenKind.TIME:
        value = format_timestamp(entry.time, context.timestamp_format)
    elif kind is TokenKind.DELTA:
        value = _elapsed(entry.time, context.last, context)
    elif kind is TokenKind.DELAY:
        value = _elapsed(entry.time, context.base_time, context)
    elif kind is TokenKind.GLOBAL_DELAY:
        value = _elapsed(entry.time, get_global_time(), context)
    elif kind is TokenKind.MODULE:
        value = entry.module
    elif kind is TokenKind.FUNC:
        value = caller.function if caller else ""
    elif kind is TokenKind.FILE:
        value = caller.file if caller else ""
    elif kind is TokenKind.LINE:
        value = str(caller.line) if caller else ""
    elif kind is TokenKind.CALLER:
        value = context.format_caller(caller) if caller else ""

    return format_value(spec, spec.key, value, print_key, entry.level, context)


def _render_remaining_fields(spec: FieldSpec, entry: LogEntry, context: RenderContext, used: Set[str]) -> str:
    keys = sorted(
        key for key, value in entry.fields.items()
        if key not in used and not (value is None and spec.ignore_empty)
    )

    parts: List[str] = []
    for key in keys:
        value = entry.fields[key]
        if spec.no_key_format:
            parts.append(f"{key}={value}")
        else:
            parts.append(
                _wrap(spec.key_wrapper, key + "=", entry.level, context)
                + _wrap(spec.value_wrapper, value, entry.level, context)
            )

    text = " ".join(parts)
    print_key = spec.print_key and (not spec.ignore_empty or text != "")
    return format_value(spec, spec.key, text, print_key, entry.level, context)


def _elapsed(moment: datetime, begin: datetime, context: RenderContext) -> str:
    precision = context.round_duration or get_duration_precision()
    # Naive datetimes are taken as local time
    delay = round_to(to_nanoseconds(moment.astimezone() - begin.astimezone()), precision)
    if delay == 0:
        return "<" + context.format_duration(precision)
    return context.format_duration(delay)
