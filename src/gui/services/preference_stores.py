"""Observable preference stores (sound/general, board, game).

Each store owns one snapshot category backed by a JSON document in the shared
preferences store. ``read()`` returns the current immutable snapshot and
``subscribe()`` registers a listener called with every new snapshot. Commands
build a replacement snapshot, persist it, then notify.

Dispatch follows a copy-first strategy: listeners are snapshotted under the
lock and invoked without it, so a listener may subscribe or cancel while being
notified. A failing listener is logged and does not stop the others.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from threading import RLock
from typing import Callable, Generic, List, Type, TypeVar

from db.shared_preferences import SharedPreferences
from domain.preferences import BoardPrefs, BoardTheme, GamePrefs, GeneralPrefs
from domain.sound import SoundTheme

__all__ = [
    "Subscription",
    "PreferenceStore",
    "GeneralPreferencesStore",
    "BoardPreferencesStore",
    "GamePreferencesStore",
]

_log = logging.getLogger(__name__)

T = TypeVar("T")
Listener = Callable[[T], None]


@dataclass
class Subscription:
    listener: Callable
    active: bool = True

    def cancel(self) -> None:
        self.active = False


class PreferenceStore(Generic[T]):
    snapshot_type: Type

    def __init__(self, prefs: SharedPreferences) -> None:
        self._prefs = prefs
        self._lock = RLock()
        self._subs: List[Subscription] = []
        self._state: T = self.fetch_from_storage(prefs)

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------
    @classmethod
    def fetch_from_storage(cls, prefs: SharedPreferences) -> T:
        raw = prefs.get_string(cls.snapshot_type.PREF_KEY)
        if raw is None:
            return cls.snapshot_type()
        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError("not a JSON object")
            return cls.snapshot_type.from_dict(data)
        except ValueError as exc:
            _log.warning("Resetting corrupt %s: %s", cls.snapshot_type.PREF_KEY, exc)
            return cls.snapshot_type()

    @classmethod
    def write_to_storage(cls, prefs: SharedPreferences, snapshot: T) -> None:
        prefs.set_string(cls.snapshot_type.PREF_KEY, json.dumps(snapshot.to_dict()))

    # ------------------------------------------------------------------
    # Observable surface
    # ------------------------------------------------------------------
    def read(self) -> T:
        with self._lock:
            return self._state

    def subscribe(self, listener: Listener) -> Subscription:
        sub = Subscription(listener=listener)
        with self._lock:
            self._subs.append(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            self._subs = [s for s in self._subs if s is not sub]
        sub.active = False

    def subscriber_count(self) -> int:
        with self._lock:
            return sum(1 for s in self._subs if s.active)

    def _save(self, snapshot: T) -> T:
        with self._lock:
            self.write_to_storage(self._prefs, snapshot)
            self._state = snapshot
            # Drop subscriptions cancelled without unsubscribe().
            self._subs = [s for s in self._subs if s.active]
            subs = list(self._subs)
        for sub in subs:
            if not sub.active:
                continue
            try:
                sub.listener(snapshot)
            except Exception:  # noqa: BLE001 - one bad listener must not block the rest
                _log.exception("Preference listener failed for %s", self.snapshot_type.PREF_KEY)
        return snapshot

    def reset(self) -> T:
        return self._save(self.snapshot_type())


class GeneralPreferencesStore(PreferenceStore[GeneralPrefs]):
    snapshot_type = GeneralPrefs

    def toggle_sound_enabled(self) -> GeneralPrefs:
        return self._save(self.read().toggled_sound())

    def set_sound_theme(self, theme: SoundTheme) -> GeneralPrefs:
        return self._save(replace(self.read(), sound_theme=theme))


class BoardPreferencesStore(PreferenceStore[BoardPrefs]):
    snapshot_type = BoardPrefs

    def toggle_haptic_feedback(self) -> BoardPrefs:
        return self._save(self.read().toggled_haptic_feedback())

    def toggle_piece_animation(self) -> BoardPrefs:
        return self._save(self.read().toggled_piece_animation())

    def set_board_theme(self, theme: BoardTheme) -> BoardPrefs:
        return self._save(replace(self.read(), board_theme=theme))


class GamePreferencesStore(PreferenceStore[GamePrefs]):
    snapshot_type = GamePrefs

    def toggle_chat(self) -> GamePrefs:
        return self._save(self.read().toggled_chat())
