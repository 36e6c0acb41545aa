"""Persisted authentication session, kept in secure storage."""

from __future__ import annotations

import json
import logging
from typing import Optional

from config import settings
from domain.auth import AuthSessionState

from .secure_storage import SecureStorage

__all__ = ["SessionStorage"]

_log = logging.getLogger(__name__)


class SessionStorage:
    def __init__(self, secure_storage: SecureStorage) -> None:
        self._storage = secure_storage

    def read(self) -> Optional[AuthSessionState]:
        raw = self._storage.read(settings.SESSION_STORAGE_KEY)
        if raw is None:
            return None
        try:
            return AuthSessionState.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as exc:
            _log.warning("Discarding malformed stored session: %s", exc)
            return None

    def write(self, session: AuthSessionState) -> None:
        self._storage.write(settings.SESSION_STORAGE_KEY, json.dumps(session.to_dict()))

    def delete(self) -> None:
        self._storage.delete(settings.SESSION_STORAGE_KEY)
