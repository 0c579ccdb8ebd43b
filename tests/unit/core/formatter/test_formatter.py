from __future__ import annotations

"""
Unit tests for the Formatter Objects.

Verifies:
1. Format selection and lazy, compile-once behaviour.
2. Compile errors surfacing on every format call.
3. Color mode and palette changes invalidating cached colors.
4. Deterministic output under concurrent use.
5. The JSON formatter.
"""

import json
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from multilogger.core.colors import colorize
from multilogger.core.formatter import Formatter, JsonFormatter, default_format_caller
from multilogger.core.formatter.compiler import try_compile_template
from multilogger.domain.constants import DEFAULT_CONSOLE_FORMAT, DEFAULT_LOG_FORMAT
from multilogger.domain.entry import CallerFrame, LogEntry
from multilogger.domain.levels import Level
from multilogger.errors import AttributeNameError, TemplateError

BASE_TIME = datetime(2018, 6, 24, 12, 34, 56, 789000, tzinfo=timezone.utc)


def _entry(message: str = "hi", level: int = Level.WARNING) -> LogEntry:
    return LogEntry(time=BASE_TIME, level=level, message=message)


# -----------------------------------------------------------------------------
# 1. Format selection & compilation
# -----------------------------------------------------------------------------

def test_first_non_empty_format_is_used() -> None:
    assert Formatter("", None, "%message%", "%level%").log_format == "%message%"


def test_default_format_when_none_given() -> None:
    formatter = Formatter()
    assert formatter.log_format == DEFAULT_LOG_FORMAT
    assert formatter.format(_entry()) == "[WARN]: 2018/06/24 12:34:56.789 - hi\n"


def test_template_is_compiled_once() -> None:
    formatter = Formatter("%message%")
    with patch("multilogger.core.formatter.formatter.try_compile_template", wraps=try_compile_template) as compiler:
        for _ in range(5):
            formatter.format(_entry())
    assert compiler.call_count == 1


def test_set_log_format_recompiles() -> None:
    formatter = Formatter("%message%")
    assert formatter.format(_entry()) == "hi\n"

    formatter.set_log_format("%level% %message%")
    assert formatter.format(_entry()) == "warning hi\n"


# -----------------------------------------------------------------------------
# 2. Compile errors
# -----------------------------------------------------------------------------

def test_compile_error_is_raised_on_every_call() -> None:
    formatter = Formatter("%message:rouge%")

    for _ in range(2):
        with pytest.raises(TemplateError, match="Attribute not found rouge"):
            formatter.format(_entry())


def test_try_compile_reports_error_without_raising() -> None:
    compiled, error = Formatter("%time% %level:rouge%").try_compile()
    assert isinstance(error, TemplateError)
    assert compiled.template == "%time% %level:rouge%"


def test_unknown_palette_color() -> None:
    with pytest.raises(AttributeNameError):
        Formatter("%level%", color_map={Level.INFO: ["rouge"]})


# -----------------------------------------------------------------------------
# 3. Color changes
# -----------------------------------------------------------------------------

def test_color_mode_and_palette_changes() -> None:
    formatter = Formatter("%level:color%")
    assert formatter.format(_entry()) == "warning\n"

    formatter.set_color(True)
    assert formatter.color is True
    assert formatter.format(_entry()) == "\x1b[33mwarning\x1b[0m\n"

    formatter.set_color_map({Level.WARNING: ["red", "bold"]})
    assert formatter.format(_entry()) == "\x1b[31;1mwarning\x1b[0m\n"


# -----------------------------------------------------------------------------
# 4. Concurrency
# -----------------------------------------------------------------------------

def test_concurrent_formatting_is_deterministic() -> None:
    """Many threads sharing a fresh formatter all get the same output."""
    formatter = Formatter(DEFAULT_CONSOLE_FORMAT)
    entry = LogEntry(
        time=datetime(2019, 12, 1, 10, 10, 11, tzinfo=timezone.utc),
        level=Level.INFO,
        message=colorize("test", [34]),
        module="my_module",
    )

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(lambda _: formatter.format(entry), range(500)))

    assert set(results) == {"[my_module] 2019/12/01 10:10:11.000 INFO     test\n"}


# -----------------------------------------------------------------------------
# 5. JSON formatter
# -----------------------------------------------------------------------------

def test_json_formatter() -> None:
    entry = LogEntry(
        time=BASE_TIME,
        level=Level.INFO,
        message="hi",
        fields={"pi": 3.5, "message": "ignored"},
        module="json",
        caller=CallerFrame("main", "/app/main.py", 3),
    )
    output = JsonFormatter().format(entry)

    assert output.endswith("\n")
    assert json.loads(output) == {
        "time": "2018-06-24T12:34:56.789000+00:00",
        "level": "info",
        "message": "hi",
        "module": "json",
        "caller": "main /app/main.py:3",
        "pi": 3.5,
    }


def test_json_formatter_timestamp_format() -> None:
    output = JsonFormatter(timestamp_format="%Y/%m/%d %H:%M:%S.%L").format(_entry())
    assert json.loads(output)["time"] == "2018/06/24 12:34:56.789"


def test_default_format_caller() -> None:
    assert default_format_caller(None) == ""
    assert default_format_caller(CallerFrame("run", "", 0)) == "run"
    assert default_format_caller(CallerFrame("", "/a.py", 7)) == "/a.py:7"
