from __future__ import annotations

"""
Logger Facade.

A ``Logger`` owns a registry of named hooks, each one with its own minimum
level, and fans every entry out to the hooks accepting its level. Failures
of individual hooks never interrupt a logging call: they are collected and
can be polled with ``get_error`` / ``clear_error``.

Loggers carry a module name. ``copy`` and ``child`` derive new loggers
sharing the configuration but owning independent hook instances (e.g. a
distinct file handle), ``child`` appending its name to the parent module
(``parent:child``).
"""

import inspect
import logging
import os
import sys
import threading
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple

from multilogger.catcher import StreamCatcher
from multilogger.core.duration import DurationLike, MICROSECOND, to_nanoseconds
from multilogger.domain.constants import CALLER_ENV_VAR, CONSOLE_HOOK_NAME
from multilogger.domain.entry import CallerFrame, LogEntry
from multilogger.domain.levels import Level, parse_level, try_parse_level
from multilogger.errors import ErrorAccumulator, HookError, LevelParseError, LoggerPanic
from multilogger.infra.hooks.base import Hook, HookTarget
from multilogger.infra.hooks.factory import new_console_hook, new_file_hook
from multilogger.infra.settings import parse_bool

logger = logging.getLogger(__name__)

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__)) + os.sep


class Logger(StreamCatcher):
    """
    Multi destination logger.

    Args:
        module: Module name attached to every entry.
        *hooks: Initial hooks; a console hook at warning level is installed
            when none is given.
        report_caller: Capture the calling function, file and line. Defaults
            to the MULTILOGGER_CALLER environment variable.

    Attributes:
        print_level: Level used by ``print`` calls (PRINT bypasses
            formatting).
        catcher: Route ``[LEVEL]`` markers of written text to their level.
        report_caller: Capture caller information on every entry.
        exit_func: Called with 1 by ``fatal``.
    """

    def __init__(self, module: str = "", *hooks: Hook, report_caller: Optional[bool] = None) -> None:
        if report_caller is None:
            report_caller = parse_bool(os.environ.get(CALLER_ENV_VAR))
        self._init_state(module, report_caller)
        self.add_hooks(*(hooks or (new_console_hook("", Level.WARNING),)))

    def _init_state(self, module: str, report_caller: bool) -> None:
        self._lock = threading.RLock()
        self._hooks: Dict[str, Hook] = {}
        self._dispatch: Dict[int, Tuple[Hook, ...]] = {}
        self._level: int = Level.DISABLED
        self._module = module
        self._fields: Dict[str, Any] = {}
        self._time: Optional[datetime] = None
        self._errors = ErrorAccumulator()
        self._remaining = ""
        self.print_level: int = Level.PRINT
        self.catcher = True
        self.report_caller = report_caller
        self.exit_func: Callable[[int], Any] = sys.exit

    def __repr__(self) -> str:
        return f"Logger(module={self._module!r}, hooks={self.list_hooks()!r})"

    # -------------------------------------------------------------------------
    # DERIVED LOGGERS
    # -------------------------------------------------------------------------

    def copy(self, *modules: str) -> "Logger":
        """
        Return a logger with cloned hooks and a different module name.

        Args:
            *modules: New module name parts joined with "-"; the current
                module is kept when none is given.
        """
        module = "-".join(modules) if modules else self._module
        duplicate = object.__new__(type(self))
        duplicate._init_state(module, self.report_caller)
        with self._lock:
            hooks = [hook.clone() for hook in self._hooks.values()]
            duplicate._fields = dict(self._fields)
            duplicate._time = self._time
            duplicate._remaining = self._remaining
            duplicate._errors = self._errors.copy()
        duplicate.print_level = self.print_level
        duplicate.catcher = self.catcher
        duplicate.exit_func = self.exit_func
        return duplicate.add_hooks(*hooks)

    def child(self, name: str) -> "Logger":
        """Return a copy whose module is ``<module>:<name>``."""
        if self._module:
            return self.copy(f"{self._module}:{name}")
        return self.copy(name)

    def with_time(self, moment: datetime) -> "Logger":
        """Return a copy logging every entry at a fixed time (useful in tests)."""
        duplicate = self.copy()
        duplicate._time = moment if moment.tzinfo is not None else moment.astimezone()
        return duplicate

    def add_time(self, duration: DurationLike) -> "Logger":
        """Move the fixed time forward, no-op when the time is not fixed."""
        if self._time is not None:
            self._time += timedelta(microseconds=to_nanoseconds(duration) / MICROSECOND)
        return self

    def with_field(self, key: str, value: Any) -> "Logger":
        return self.with_fields({key: value})

    def with_fields(self, fields: Dict[str, Any]) -> "Logger":
        """Return a copy adding fields to every entry."""
        duplicate = self.copy()
        duplicate._fields.update(fields)
        return duplicate

    @property
    def fields(self) -> Dict[str, Any]:
        return dict(self._fields)

    def get_module(self) -> str:
        return self._module

    def set_module(self, module: str) -> "Logger":
        self._module = module
        return self

    # -------------------------------------------------------------------------
    # LOGGING API
    # -------------------------------------------------------------------------

    def log(self, level: Any, *args: Any) -> None:
        """
        Log a message built from args at the given level.

        Never raises because of a hook: failures are accumulated.

        Raises:
            LevelParseError: If the level is invalid.
        """
        self.dispatch(parse_level(level), _sprint(args))

    def logf(self, level: Any, message: str, *args: Any) -> None:
        """Log a %-style formatted message."""
        self.dispatch(parse_level(level), message % args if args else message)

    def print(self, *args: Any) -> None:
        """Emit raw text at the print level (unformatted by default)."""
        self.dispatch(self.print_level, _sprint(args))

    def println(self, *args: Any) -> None:
        self.dispatch(self.print_level, _sprint(args) + "\n")

    def printf(self, message: str, *args: Any) -> None:
        self.dispatch(self.print_level, message % args if args else message)

    def trace(self, *args: Any) -> None:
        self.log(Level.TRACE, *args)

    def debug(self, *args: Any) -> None:
        self.log(Level.DEBUG, *args)

    def info(self, *args: Any) -> None:
        self.log(Level.INFO, *args)

    def warning(self, *args: Any) -> None:
        self.log(Level.WARNING, *args)

    warn = warning

    def error(self, *args: Any) -> None:
        self.log(Level.ERROR, *args)

    def fatal(self, *args: Any) -> None:
        """Log at fatal level then call ``exit_func(1)``."""
        self.log(Level.FATAL, *args)
        self.exit_func(1)

    def panic(self, *args: Any) -> None:
        """
        Log at panic level then raise.

        Raises:
            LoggerPanic: Always, carrying the message.
        """
        message = _sprint(args)
        self.dispatch(Level.PANIC, message)
        raise LoggerPanic(message)

    def dispatch(
            self,
            level: int,
            message: str,
            caller: Optional[CallerFrame] = None,
            moment: Optional[datetime] = None,
            fields: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Fire an entry on every hook accepting its level, in hook name order.

        Args:
            level: Entry level.
            message: Entry message.
            caller: Caller frame; captured automatically when caller
                reporting is on and none is given.
            moment: Entry time; the fixed time or the current time otherwise.
            fields: Extra fields merged over the logger fields.
        """
        hooks = self._dispatch.get(level)
        if not hooks:
            return

        if caller is None and self.report_caller:
            caller = _find_caller()
        entry_fields = dict(self._fields)
        if fields:
            entry_fields.update(fields)
        entry = LogEntry(
            time=moment or self._time or datetime.now().astimezone(),
            level=level,
            message=message,
            fields=entry_fields,
            module=self._module,
            caller=caller,
        )

        for hook in hooks:
            try:
                hook.fire(entry)
            except HookError as e:
                self._errors.add(e)
            except Exception as e:
                self._errors.add(HookError(hook.target.source, e))

    # -------------------------------------------------------------------------
    # LEVELS & CONFIGURATION
    # -------------------------------------------------------------------------

    def get_level(self) -> int:
        """Most verbose level of the enabled hooks, DISABLED without any."""
        return self._level

    def is_level_enabled(self, level: Any) -> bool:
        effective = self._level
        return effective != Level.DISABLED and parse_level(level) <= effective

    def set_report_caller(self, report_caller: bool) -> "Logger":
        self.report_caller = report_caller
        return self

    def set_exit_func(self, exit_func: Callable[[int], Any]) -> "Logger":
        self.exit_func = exit_func
        return self

    # -------------------------------------------------------------------------
    # HOOK REGISTRY
    # -------------------------------------------------------------------------

    def add_hook(self, name: str, level: Any, target: HookTarget) -> "Logger":
        """
        Register (or replace) a named hook.

        Raises:
            LevelParseError: If the level is invalid.
        """
        return self.add_hooks(Hook(name, level, target))

    def try_add_hook(self, name: str, level: Any, target: HookTarget) -> Tuple["Logger", Optional[LevelParseError]]:
        """Register a hook, returning the level error instead of raising it."""
        parsed, error = try_parse_level(level)
        if error is not None:
            return self, error
        return self.add_hook(name, parsed, target), None

    def add_hooks(self, *hooks: Hook) -> "Logger":
        with self._lock:
            for hook in hooks:
                self._hooks[hook.name] = hook
                hook.target.set_logger(self)
            self._refresh()
        return self

    def add_console(self, name: str = "", level: Any = Level.WARNING, *formats: Any, **options: Any) -> "Logger":
        """Register a console hook (see ``new_console_hook``)."""
        return self.add_hooks(new_console_hook(name, level, *formats, **options))

    def add_file(self, filename: str, level: Any = Level.INFO, *formats: Any, is_dir: bool = False) -> "Logger":
        """Register a file hook, one file per module when ``is_dir`` is set."""
        return self.add_hooks(new_file_hook(filename, level, *formats, is_dir=is_dir))

    def remove_hook(self, name: str) -> "Logger":
        with self._lock:
            hook = self._hooks.pop(name, None)
            self._refresh()
        if hook is not None:
            hook.target.close()
        return self

    def hook(self, name: str = "") -> Optional[Hook]:
        """Return the named hook, the default console hook when name is empty."""
        return self._hooks.get(name or CONSOLE_HOOK_NAME)

    def get_hook_level(self, name: str = "") -> int:
        hook = self.hook(name)
        return hook.level if hook is not None else Level.DISABLED

    def set_hook_level(self, name: str, level: Any) -> "Logger":
        """
        Change the level of a registered hook.

        Raises:
            KeyError: If the hook is not registered.
            LevelParseError: If the level is invalid.
        """
        hook = self.hook(name)
        if hook is None:
            raise KeyError(f"Hook not found {name}")
        return self.add_hook(hook.name, level, hook.target)

    def list_hooks(self) -> List[str]:
        return sorted(self._hooks)

    def close(self) -> None:
        """Flush buffered text then release the resources of every hook."""
        try:
            self.flush()
        finally:
            for hook in list(self._hooks.values()):
                hook.target.close()

    # -------------------------------------------------------------------------
    # ERROR ACCUMULATOR
    # -------------------------------------------------------------------------

    def add_error(self, error: Optional[BaseException]) -> None:
        self._errors.add(error)

    def get_error(self) -> Optional[BaseException]:
        """Return the accumulated dispatch error, None when all went well."""
        return self._errors.as_error()

    def clear_error(self) -> Optional[BaseException]:
        """Return the accumulated dispatch error and reset the accumulator."""
        return self._errors.clear()

    # -------------------------------------------------------------------------
    # DEFAULT CONSOLE HOOK HELPERS
    # -------------------------------------------------------------------------

    def default_console_hook(self) -> Optional[Hook]:
        return self._hooks.get(CONSOLE_HOOK_NAME)

    def get_default_console_hook_level(self) -> int:
        return self.get_hook_level(CONSOLE_HOOK_NAME)

    def set_default_console_hook_level(self, level: Any) -> "Logger":
        return self.set_hook_level(CONSOLE_HOOK_NAME, level)

    @property
    def formatter(self) -> Any:
        """Formatter of the default console hook, None without it."""
        hook = self.default_console_hook()
        return hook.formatter if hook is not None else None

    def set_formatter(self, formatter: Any) -> "Logger":
        return self._on_default_hook(lambda hook: hook.set_formatter(formatter))

    def set_format(self, *formats: Any) -> "Logger":
        return self._on_default_hook(lambda hook: hook.set_format(*formats))

    def set_color(self, color: bool) -> "Logger":
        return self._on_default_hook(lambda hook: hook.set_color(color))

    def set_out(self, stream: Any) -> "Logger":
        return self._on_default_hook(lambda hook: hook.set_out(stream))

    def set_stdout(self, stream: Any) -> "Logger":
        return self._on_default_hook(lambda hook: hook.set_stdout(stream))

    def set_all_outputs(self, stream: Any) -> "Logger":
        return self._on_default_hook(lambda hook: hook.set_out(stream).set_stdout(stream))

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _on_default_hook(self, action: Callable[[Hook], Any]) -> "Logger":
        hook = self.default_console_hook()
        if hook is not None:
            action(hook)
        return self

    def _refresh(self) -> None:
        """Rebuild the level -> hooks table and the effective level."""
        table: Dict[int, List[Hook]] = {}
        level: int = -1
        for name in sorted(self._hooks):
            hook = self._hooks[name]
            for accepted in hook.levels():
                table.setdefault(accepted, []).append(hook)
            if hook.level != Level.DISABLED and hook.level > level:
                level = hook.level
        self._dispatch = {accepted: tuple(hooks) for accepted, hooks in table.items()}
        self._level = Level.DISABLED if level < 0 else level
        logger.debug(f"Hooks refreshed for module {self._module!r}: level={self._level}")


def _sprint(args: Tuple[Any, ...]) -> str:
    return " ".join(str(arg) for arg in args)


def _find_caller() -> Optional[CallerFrame]:
    """First frame of the call stack outside of this package."""
    frame = inspect.currentframe()
    while frame is not None and os.path.abspath(frame.f_code.co_filename).startswith(_PACKAGE_DIR):
        frame = frame.f_back
    if frame is None:
        return None
    code = frame.f_code
    return CallerFrame(
        function=getattr(code, "co_qualname", code.co_name),
        file=code.co_filename,
        line=frame.f_lineno,
    )
