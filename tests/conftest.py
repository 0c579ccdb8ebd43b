from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Isolation of the process-wide settings (MULTILOGGER_* variables).
3. Shared factories building loggers with fixed time and captured streams.
"""

import io
import os
import sys
from datetime import datetime, timezone
from typing import Any, Callable, Generator, Tuple

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from multilogger.infra.hooks import new_console_hook  # noqa: E402
from multilogger.infra.logging import reset_logging  # noqa: E402
from multilogger.infra.settings import reset_settings, set_global_time  # noqa: E402
from multilogger.logger import Logger  # noqa: E402

# Reference moment of every fixed-time logger of the suite
BASE_TIME = datetime(2018, 6, 24, 12, 34, 56, 789000, tzinfo=timezone.utc)

_ENV_VARS = (
    "MULTILOGGER_FORMAT",
    "MULTILOGGER_FILE_FORMAT",
    "MULTILOGGER_CALLER",
    "MULTILOGGER_DURATION_PRECISION",
    "MULTILOGGER_DURATION_FORMAT",
    "MULTILOGGER_BASETIME",
    "MULTILOGGER_TIMEZONE",
)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """
    Run every test with a pristine process-wide configuration.

    The MULTILOGGER_* variables are removed before the settings singleton
    is re-read, and the default logger is forgotten after the test.
    """
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_logging()
    for name in _ENV_VARS:
        os.environ.pop(name, None)
    reset_settings()


@pytest.fixture
def base_time() -> datetime:
    """Return the reference moment used by fixed-time loggers."""
    return BASE_TIME


@pytest.fixture
def make_logger() -> Callable[..., Tuple[Logger, io.StringIO, io.StringIO]]:
    """
    Provide a factory of loggers with deterministic output.

    The returned logger has a single colorless console hook, a fixed time
    (BASE_TIME) and the process reference time set to BASE_TIME.

    Returns:
        Callable: factory(module, level="warning") returning the logger, the
        stream of formatted entries and the stream of raw printed text.
    """
    def _factory(module: str, level: Any = "warning") -> Tuple[Logger, io.StringIO, io.StringIO]:
        logs, output = io.StringIO(), io.StringIO()
        set_global_time(BASE_TIME, override=True)
        hook = new_console_hook("", level, color=False, out=output, log=logs)
        return Logger(module, hook).with_time(BASE_TIME), logs, output

    return _factory
