"""Logging setup and in-process capture of recent log records.

``configure_logging`` installs the console handler used by the launcher.
``LoggingService`` keeps the most recent records in a ring buffer so startup
diagnostics (warnings from the session check, migration notices) can be shown
or exported after the bootstrap finished.
"""

from __future__ import annotations

import json
import logging
import sys
from collections import deque
from dataclasses import asdict, dataclass
from threading import RLock
from typing import Deque, List, Optional

__all__ = [
    "LOG_FORMAT",
    "LogEntry",
    "LoggingService",
    "configure_logging",
]

LOG_FORMAT = "{asctime} | {levelname:<8} | {name}:{funcName}:{lineno} - {message}"


def configure_logging(verbose: bool = False) -> logging.Handler:
    root = logging.getLogger()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S", style="{"))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    return handler


@dataclass(frozen=True)
class LogEntry:
    level: str
    name: str
    message: str
    created: float


class _RingBufferHandler(logging.Handler):
    def __init__(self, svc: "LoggingService") -> None:
        super().__init__()
        self._svc = svc

    def emit(self, record: logging.LogRecord) -> None:  # noqa: D401
        self._svc._ingest_record(record)


class LoggingService:
    def __init__(self, capacity: int = 500) -> None:
        self._lock = RLock()
        self._entries: Deque[LogEntry] = deque(maxlen=capacity)
        self._handler = _RingBufferHandler(self)
        self._handler.setLevel(logging.DEBUG)
        self._attached = False

    def attach_root(self) -> None:
        if self._attached:
            return
        logging.getLogger().addHandler(self._handler)
        self._attached = True

    def detach_root(self) -> None:
        if not self._attached:
            return
        logging.getLogger().removeHandler(self._handler)
        self._attached = False

    def _ingest_record(self, record: logging.LogRecord) -> None:
        entry = LogEntry(
            level=record.levelname,
            name=record.name,
            message=record.getMessage(),
            created=record.created,
        )
        with self._lock:
            self._entries.append(entry)

    def recent(self, limit: Optional[int] = None) -> List[LogEntry]:
        with self._lock:
            data = list(self._entries)
        return data[-limit:] if limit is not None else data

    def at_least(self, level: int) -> List[LogEntry]:
        return [e for e in self.recent() if logging.getLevelName(e.level) >= level]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def export_jsonl(self, path: str, *, level: int = logging.DEBUG) -> int:
        """Write entries at or above ``level`` as JSON Lines; returns the count."""
        entries = self.at_least(level)
        with open(path, "w", encoding="utf-8") as f:
            for e in entries:
                f.write(json.dumps(asdict(e), sort_keys=True) + "\n")
        return len(entries)
