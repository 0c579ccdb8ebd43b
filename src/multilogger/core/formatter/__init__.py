from __future__ import annotations

from .compiler import (
    CompiledTemplate,
    FieldSpec,
    TokenKind,
    compile_template,
    try_compile_template,
)
from .formatter import DEFAULT_COLOR_MAP, Formatter, JsonFormatter, default_format_caller
from .renderer import format_timestamp, render

__all__ = [
    "CompiledTemplate",
    "FieldSpec",
    "TokenKind",
    "compile_template",
    "try_compile_template",
    "Formatter",
    "JsonFormatter",
    "DEFAULT_COLOR_MAP",
    "default_format_caller",
    "format_timestamp",
    "render",
]
