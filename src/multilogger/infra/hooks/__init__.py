from __future__ import annotations

from .base import GenericHook, Hook, HookTarget
from .console import ConsoleHook
from .factory import (
    default_console_formatter,
    default_file_formatter,
    new_console_hook,
    new_file_hook,
    new_hook,
)
from .file import FileHook, cleanup_module_name

__all__ = [
    "Hook",
    "HookTarget",
    "GenericHook",
    "ConsoleHook",
    "FileHook",
    "cleanup_module_name",
    "new_hook",
    "new_console_hook",
    "new_file_hook",
    "default_console_formatter",
    "default_file_formatter",
]
