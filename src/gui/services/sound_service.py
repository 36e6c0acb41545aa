"""Sound pool keyed to the selected sound theme.

Sound files live under ``<sounds_dir>/<theme>/<sound>.mp3``. A theme that
lacks a file falls back to the standard theme's file; sounds missing from both
are left out of the mapping and simply never play.
"""

from __future__ import annotations

import logging
from pathlib import Path
from threading import RLock
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from domain.sound import Sound, SoundTheme

__all__ = ["SoundPool", "load_sound_pool", "sound_file"]

_log = logging.getLogger(__name__)

SOUND_EXTENSION = ".mp3"


class SoundPool:
    """Holds decoded-ready sound payloads addressed by integer resource ids."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._next_id = 1
        self._resources: Dict[int, bytes] = {}
        self._released = False

    def load(self, path: str | Path) -> int:
        data = Path(path).read_bytes()
        with self._lock:
            if self._released:
                raise RuntimeError("SoundPool already released")
            resource_id = self._next_id
            self._next_id += 1
            self._resources[resource_id] = data
        return resource_id

    def resource(self, resource_id: int) -> Optional[bytes]:
        with self._lock:
            return self._resources.get(resource_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._resources)

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        with self._lock:
            self._resources.clear()
            self._released = True


def sound_file(sounds_dir: str | Path, theme: SoundTheme, sound: Sound) -> Path:
    return Path(sounds_dir) / theme.value / f"{sound.value}{SOUND_EXTENSION}"


def load_sound_pool(
    theme: SoundTheme, sounds_dir: str | Path
) -> Tuple[SoundPool, Mapping[Sound, int]]:
    pool = SoundPool()
    ids: Dict[Sound, int] = {}
    for sound in Sound:
        path = sound_file(sounds_dir, theme, sound)
        if not path.is_file() and theme is not SoundTheme.STANDARD:
            path = sound_file(sounds_dir, SoundTheme.STANDARD, sound)
        if not path.is_file():
            _log.debug("No sound file for %s (theme %s)", sound.value, theme.value)
            continue
        ids[sound] = pool.load(path)
    _log.info("Loaded %d sounds for theme '%s'", len(ids), theme.value)
    return pool, MappingProxyType(ids)
