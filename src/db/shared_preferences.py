"""Local key-value preference store.

A single JSON document on disk holding plain values (str, bool, int, float).
Every mutation rewrites the file atomically (temp file then replace) so a
crash mid-write never leaves a truncated store behind.

Design Goals
------------
- Pure-Python (no Qt import) to allow headless unit tests.
- Typed getters returning ``None`` for a missing key or a value of another type.
- Graceful fallback: a corrupt file is treated as an empty store.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from threading import RLock
from typing import Any, Dict, Iterable, Optional

from config import settings

__all__ = ["SharedPreferences"]

_log = logging.getLogger(__name__)

Value = str | bool | int | float


class SharedPreferences:
    """JSON file backed key-value store."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = RLock()
        self._values: Dict[str, Value] = self._load()

    @classmethod
    def open(cls, data_dir: str | Path) -> "SharedPreferences":
        return cls(Path(data_dir) / settings.SHARED_PREFS_FILE_NAME)

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def _load(self) -> Dict[str, Value]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            _log.warning("Ignoring unreadable preferences file %s: %s", self._path, exc)
            return {}
        if not isinstance(data, dict):
            _log.warning("Ignoring preferences file %s: not a JSON object", self._path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, (str, bool, int, float))}

    def _flush(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(self._values, indent=2, ensure_ascii=False), encoding="utf-8")
        tmp.replace(self._path)

    def reload(self) -> None:
        with self._lock:
            self._values = self._load()

    # ------------------------------------------------------------------
    # Getters
    # ------------------------------------------------------------------
    def _get(self, key: str, kind: type | tuple[type, ...]) -> Optional[Any]:
        with self._lock:
            value = self._values.get(key)
        if value is None:
            return None
        # bool is an int subclass; keep the two apart.
        if isinstance(value, bool) and kind is not bool:
            return None
        return value if isinstance(value, kind) else None

    def get_string(self, key: str) -> Optional[str]:
        return self._get(key, str)

    def get_bool(self, key: str) -> Optional[bool]:
        return self._get(key, bool)

    def get_int(self, key: str) -> Optional[int]:
        return self._get(key, int)

    def get_double(self, key: str) -> Optional[float]:
        value = self._get(key, (int, float))
        return float(value) if value is not None else None

    def contains_key(self, key: str) -> bool:
        with self._lock:
            return key in self._values

    def keys(self) -> Iterable[str]:
        with self._lock:
            return list(self._values.keys())

    # ------------------------------------------------------------------
    # Setters
    # ------------------------------------------------------------------
    def _set(self, key: str, value: Value) -> None:
        with self._lock:
            self._values[key] = value
            self._flush()

    def set_string(self, key: str, value: str) -> None:
        self._set(key, str(value))

    def set_bool(self, key: str, value: bool) -> None:
        self._set(key, bool(value))

    def set_int(self, key: str, value: int) -> None:
        self._set(key, int(value))

    def set_double(self, key: str, value: float) -> None:
        self._set(key, float(value))

    def remove(self, key: str) -> None:
        with self._lock:
            if self._values.pop(key, None) is not None:
                self._flush()

    def clear(self) -> None:
        with self._lock:
            self._values.clear()
            self._flush()

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"SharedPreferences(path={str(self._path)!r}, keys={len(self._values)})"
