from __future__ import annotations

"""
File Destination.

Appends entries to a single file or, in directory mode, to one file per
module under a base directory (``<base>/<module>.log``, where the ``:``
separator of child modules becomes ``.``).

Files are opened lazily on the first entry. When a file is opened, a
``# <timestamp>`` header is written, preceded by a blank line if the file
already has content. Every write of every FileHook of the process goes
through a single lock so concurrent loggers never interleave partial lines.
"""

import logging
import os
import re
import threading
from typing import IO, Any, Optional, Set

from multilogger.core.formatter.renderer import format_timestamp
from multilogger.domain.constants import DEFAULT_TIMESTAMP_FORMAT
from multilogger.domain.entry import LogEntry
from multilogger.domain.levels import Level
from multilogger.infra.fs import ensure_parent_dir, has_content
from multilogger.infra.hooks.base import GenericHook

logger = logging.getLogger(__name__)

# Serialises every file write of the process
_FILE_LOCK = threading.Lock()

_MODULE_UNWANTED = re.compile(r"[^\w/:]|_")


def cleanup_module_name(module: str) -> str:
    """Keep letters, digits, '/' and ':' then strip surrounding slashes."""
    return _MODULE_UNWANTED.sub("", module).strip("/")


class FileHook(GenericHook):
    """
    Append entries to a file or to per-module files of a directory.

    Args:
        filename: Target file, or base directory when ``is_dir`` is set.
        formatter: Formatter of the entries.
        is_dir: Enable directory mode.
        add_header: Write a timestamp banner when a file is opened.
    """

    def __init__(
            self,
            filename: str,
            formatter: Any = None,
            is_dir: bool = False,
            add_header: bool = True,
    ) -> None:
        super().__init__(formatter)
        self.filename = filename
        self.is_dir = is_dir
        self.add_header = add_header
        self._file: Optional[IO[str]] = None
        self._path: Optional[str] = None
        # Files already bannered by this hook or its clones
        self._bannered: Set[str] = set()

    @property
    def source(self) -> str:
        return f"FileHook {self.filename}"

    @property
    def path(self) -> Optional[str]:
        """Path of the currently open file, if any."""
        return self._path

    def clone(self) -> "FileHook":
        duplicate = FileHook(self.filename, self.formatter, self.is_dir, self.add_header)
        duplicate.logger = self.logger
        duplicate._bannered = self._bannered
        return duplicate

    def target_path(self) -> str:
        """Resolve the file the next entry is written to."""
        if not self.is_dir:
            return os.path.abspath(self.filename)
        module = cleanup_module_name(self.logger.get_module() if self.logger is not None else "")
        return os.path.abspath(os.path.join(self.filename, module.replace(":", ".") + ".log"))

    def fire(self, entry: LogEntry) -> None:
        output = entry.message if entry.level == Level.PRINT else self.format_entry(entry)

        with _FILE_LOCK:
            target = self.target_path()
            if self._file is not None and self._path != target:
                self._close_file()
            if self._file is None:
                self._open(target, entry)
            self.write(self._file, output)
            self._file.flush()

    def close(self) -> None:
        with _FILE_LOCK:
            self._close_file()

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _open(self, target: str, entry: LogEntry) -> None:
        ensure_parent_dir(target)
        existing = has_content(target)

        self._file = open(target, "a", encoding="utf-8")
        self._path = target
        logger.debug(f"Opened log file {target}")

        if self.add_header and target not in self._bannered:
            if existing:
                self.write(self._file, "\n")
            self.write(self._file, f"# {format_timestamp(entry.time, DEFAULT_TIMESTAMP_FORMAT)}\n")
            self._bannered.add(target)

    def _close_file(self) -> None:
        if self._file is not None:
            self._file.close()
        self._file = None
        self._path = None
