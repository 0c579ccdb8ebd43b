from __future__ import annotations

"""
Integration tests for the File Destination.

Verifies:
1. Single file mode with its timestamp header.
2. Appending to existing files.
3. Directory mode with one file per module.
4. Concurrent loggers sharing a file.
5. Failures reported through the logger error.
"""

import os
import threading
from pathlib import Path

import pytest

from multilogger.domain.levels import Level
from multilogger.errors import LevelParseError

HEADER = "# 2018/06/24 12:34:56.789\n"
STAMP = "2018/06/24 12:34:56.789"


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8")


# -----------------------------------------------------------------------------
# 1. Single file
# -----------------------------------------------------------------------------

def test_single_file(make_logger, tmp_path: Path) -> None:
    path = tmp_path / "single.log"
    log, _, _ = make_logger("file")
    log.add_file(str(path), "trace")

    log.info("Info message")
    log.warning("Warning message")
    log.close()

    assert log.get_error() is None
    assert _read(path) == (
        HEADER
        + f"[file] {STAMP} INFO     Info message\n"
        + f"[file] {STAMP} WARNING  Warning message\n"
    )


def test_file_level_is_independent(make_logger, tmp_path: Path) -> None:
    path = tmp_path / "level.log"
    log, logs, _ = make_logger("file", "error")
    log.add_file(str(path), "info")

    log.debug("dropped")
    log.info("kept")
    log.close()

    assert logs.getvalue() == ""
    assert _read(path) == HEADER + f"[file] {STAMP} INFO     kept\n"
    assert log.get_level() == Level.INFO


def test_print_is_written_raw(make_logger, tmp_path: Path) -> None:
    path = tmp_path / "print.log"
    log, _, output = make_logger("file")
    log.add_file(str(path), "info")

    log.println("raw text")
    log.close()

    assert output.getvalue() == "raw text\n"
    assert _read(path) == HEADER + "raw text\n"


def test_custom_file_format(make_logger, tmp_path: Path) -> None:
    path = tmp_path / "custom.log"
    log, _, _ = make_logger("file")
    log.add_file(str(path), "info", "%level:upper% %message% %fields%")

    user_log = log.with_field("user", "bob")
    user_log.info("login")
    user_log.close()

    assert _read(path) == HEADER + "INFO login user=bob\n"


# -----------------------------------------------------------------------------
# 2. Existing files
# -----------------------------------------------------------------------------

def test_header_separated_from_existing_content(make_logger, tmp_path: Path) -> None:
    path = tmp_path / "existing.log"
    path.write_text("previous\n", encoding="utf-8")
    log, _, _ = make_logger("file")
    log.add_file(str(path), "info")

    log.info("next")
    log.close()

    assert _read(path) == "previous\n\n" + HEADER + f"[file] {STAMP} INFO     next\n"


def test_reopening_does_not_repeat_header(make_logger, tmp_path: Path) -> None:
    """Closing releases the file, the next entry reopens it silently."""
    path = tmp_path / "reopen.log"
    log, _, _ = make_logger("file")
    log.add_file(str(path), "info")

    log.info("first")
    log.close()
    log.info("second")
    log.close()

    assert _read(path) == (
        HEADER
        + f"[file] {STAMP} INFO     first\n"
        + f"[file] {STAMP} INFO     second\n"
    )


def test_header_can_be_disabled(tmp_path: Path) -> None:
    from multilogger.infra.hooks import new_file_hook
    from multilogger.logger import Logger

    path = tmp_path / "bare.log"
    hook = new_file_hook(str(path), "info", "%message%", add_header=False)
    log = Logger("bare", hook)

    log.info("only line")
    log.close()

    assert _read(path) == "only line\n"


# -----------------------------------------------------------------------------
# 3. Directory mode
# -----------------------------------------------------------------------------

def test_directory_mode(make_logger, tmp_path: Path) -> None:
    """Child modules get their own file, named after the module path."""
    log, _, _ = make_logger("file")
    log.add_file(str(tmp_path), "info", is_dir=True)

    child = log.child("folder/module")
    log.info("from parent")
    child.info("from child")
    log.close()
    child.close()

    assert _read(tmp_path / "file.log") == HEADER + f"[file] {STAMP} INFO     from parent\n"
    assert _read(tmp_path / "file.folder" / "module.log") == (
        HEADER + f"[file:folder/module] {STAMP} INFO     from child\n"
    )


def test_directory_mode_cleans_module_name(make_logger, tmp_path: Path) -> None:
    log, _, _ = make_logger("/abc:def!/g$%?&*().,;`^<>/")
    log.add_file(str(tmp_path), "info", is_dir=True)

    log.info("cleaned")
    log.close()

    assert (tmp_path / "abc.def" / "g.log").is_file()


def test_directory_mode_is_keyword_only(make_logger, tmp_path: Path) -> None:
    """A positional flag lands on the level and is rejected."""
    log, _, _ = make_logger("file")

    with pytest.raises(LevelParseError):
        log.add_file(str(tmp_path), True, "info")
    assert log.list_hooks() == ["console-hook"]


def test_directory_mode_follows_module_change(make_logger, tmp_path: Path) -> None:
    log, _, _ = make_logger("first")
    log.add_file(str(tmp_path), "info", "%message%", is_dir=True)

    log.info("one")
    log.set_module("second")
    log.info("two")
    log.close()

    assert _read(tmp_path / "first.log") == HEADER + "one\n"
    assert _read(tmp_path / "second.log") == HEADER + "two\n"


# -----------------------------------------------------------------------------
# 4. Concurrency
# -----------------------------------------------------------------------------

def test_concurrent_copies_share_one_file(make_logger, tmp_path: Path) -> None:
    """Lines of concurrent loggers are never interleaved and the header is unique."""
    path = tmp_path / "shared.log"
    log, _, _ = make_logger("file")
    log.add_file(str(path), "info", "%module% %message%")

    loggers = [log.copy(f"worker{index}") for index in range(8)]

    def _work(worker) -> None:
        for count in range(50):
            worker.info(f"line {count}")

    threads = [threading.Thread(target=_work, args=(worker,)) for worker in loggers]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    for worker in loggers:
        worker.close()

    lines = _read(path).splitlines()
    assert lines[0] == HEADER.strip()
    assert len(lines) == 1 + 8 * 50
    assert all(line.startswith("worker") and " line " in line for line in lines[1:])


# -----------------------------------------------------------------------------
# 5. Failures
# -----------------------------------------------------------------------------

def test_open_failure_is_accumulated(make_logger, tmp_path: Path) -> None:
    """A directory cannot be opened as a log file."""
    target = tmp_path / "folder"
    os.mkdir(target)
    log, _, _ = make_logger("file")
    log.add_file(str(target), "info")

    log.info("lost")

    error = log.get_error()
    assert error is not None
    assert str(error).startswith(f"FileHook {target}: ")
    assert log.clear_error() is error
    assert log.get_error() is None
