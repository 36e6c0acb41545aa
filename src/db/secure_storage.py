"""Encrypted key-value storage for sensitive values (session token, SRI).

Entries live in one Fernet-encrypted JSON document. The key comes from the
``CHESS_CLIENT_STORAGE_KEY`` environment variable or a key file next to the
store (generated on first use). Deleting the application data does not always
remove the key file, which is why the bootstrap wipes the store on first run.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from threading import RLock
from typing import Dict, Optional

from cryptography.fernet import Fernet, InvalidToken

from config import settings

__all__ = ["SecureStorage"]

_log = logging.getLogger(__name__)


def _safe_chmod(path: Path) -> None:
    try:
        os.chmod(path, 0o600)
    except OSError:  # pragma: no cover - platform dependent
        pass


class SecureStorage:
    def __init__(self, root: str | Path, *, key: Optional[bytes] = None) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        self._path = self.root / settings.SECURE_STORAGE_FILE_NAME
        self._lock = RLock()
        self._fernet = Fernet(self._load_key(key))

    def _load_key(self, key: Optional[bytes]) -> bytes:
        if key is not None:
            return key
        env_key = os.getenv(settings.SECURE_STORAGE_KEY_ENV)
        if env_key:
            return env_key.encode("utf-8")
        key_path = self.root / settings.SECURE_STORAGE_KEY_FILE_NAME
        if key_path.exists():
            return key_path.read_bytes().strip()
        generated = Fernet.generate_key()
        key_path.write_bytes(generated)
        _safe_chmod(key_path)
        return generated

    def _read_all(self) -> Dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            decrypted = self._fernet.decrypt(self._path.read_bytes())
        except (OSError, InvalidToken) as exc:
            _log.warning("Failed decrypting secure storage %s: %s", self._path, exc)
            return {}
        try:
            payload = json.loads(decrypted.decode("utf-8"))
        except ValueError as exc:
            _log.warning("Failed parsing secure storage %s: %s", self._path, exc)
            return {}
        if not isinstance(payload, dict):
            return {}
        return {str(k): str(v) for k, v in payload.items()}

    def _write_all(self, entries: Dict[str, str]) -> None:
        payload = json.dumps(entries, ensure_ascii=True).encode("utf-8")
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_bytes(self._fernet.encrypt(payload))
        _safe_chmod(tmp)
        tmp.replace(self._path)

    def read(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read_all().get(key)

    def write(self, key: str, value: str) -> None:
        with self._lock:
            entries = self._read_all()
            entries[key] = value
            self._write_all(entries)

    def delete(self, key: str) -> None:
        with self._lock:
            entries = self._read_all()
            if entries.pop(key, None) is not None:
                self._write_all(entries)

    def delete_all(self) -> None:
        with self._lock:
            if self._path.exists():
                self._path.unlink()

    def contains_key(self, key: str) -> bool:
        return self.read(key) is not None
