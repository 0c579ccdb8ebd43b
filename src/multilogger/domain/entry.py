from __future__ import annotations

"""
Log Entry Data Models.

Defines the immutable record handed to hooks and formatters for every
logging call, together with the caller metadata captured when caller
reporting is enabled.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class CallerFrame:
    """
    Location of the code that emitted a log entry.

    Attributes:
        function: Qualified name of the calling function.
        file: Absolute path of the source file.
        line: Line number within the file.
    """
    function: str = ""
    file: str = ""
    line: int = 0


@dataclass(frozen=True)
class LogEntry:
    """
    One leveled log record.

    Attributes:
        time: Timestamp of the entry (timezone aware).
        level: Severity level of the entry.
        message: Rendered message text.
        fields: Contextual key/value pairs attached to the entry.
        module: Hierarchical module name of the emitting logger.
        caller: Caller metadata, only set when caller reporting is enabled.
    """
    time: datetime
    level: int
    message: str
    fields: Dict[str, Any] = field(default_factory=dict)
    module: str = ""
    caller: Optional[CallerFrame] = None
