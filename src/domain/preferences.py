"""Preference snapshots for the sound/general, board and game categories.

Each snapshot is an immutable value stored as one JSON document under its
``PREF_KEY`` in the shared preferences store. Changes produce a new snapshot
through ``dataclasses.replace``; nothing mutates a snapshot in place.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional

from .sound import SoundTheme

__all__ = [
    "ThemeMode",
    "BoardTheme",
    "GeneralPrefs",
    "BoardPrefs",
    "GamePrefs",
]


class ThemeMode(str, Enum):
    SYSTEM = "system"
    LIGHT = "light"
    DARK = "dark"


class BoardTheme(str, Enum):
    SYSTEM = "system"
    BROWN = "brown"
    BLUE = "blue"
    GREEN = "green"
    WOOD = "wood"
    MARBLE = "marble"


def _enum(kind, value: Any, default):
    try:
        return kind(value)
    except ValueError:
        return default


def _bool(value: Any, default: Optional[bool]) -> Optional[bool]:
    # Only real JSON booleans count; "false" or 0 must not read as a flag.
    return value if isinstance(value, bool) else default


@dataclass(frozen=True)
class GeneralPrefs:
    """Application wide settings; the in-game panel only exposes sound."""

    PREF_KEY = "preferences.general"

    is_sound_enabled: bool = True
    sound_theme: SoundTheme = SoundTheme.STANDARD
    theme_mode: ThemeMode = ThemeMode.SYSTEM

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["sound_theme"] = self.sound_theme.value
        data["theme_mode"] = self.theme_mode.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeneralPrefs":
        return cls(
            is_sound_enabled=_bool(data.get("is_sound_enabled"), True),
            sound_theme=SoundTheme.parse(data.get("sound_theme")),
            theme_mode=_enum(ThemeMode, data.get("theme_mode"), ThemeMode.SYSTEM),
        )

    def toggled_sound(self) -> "GeneralPrefs":
        return replace(self, is_sound_enabled=not self.is_sound_enabled)


@dataclass(frozen=True)
class BoardPrefs:
    PREF_KEY = "preferences.board"

    haptic_feedback: bool = True
    piece_animation: bool = True
    board_theme: BoardTheme = BoardTheme.BROWN

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["board_theme"] = self.board_theme.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BoardPrefs":
        return cls(
            haptic_feedback=_bool(data.get("haptic_feedback"), True),
            piece_animation=_bool(data.get("piece_animation"), True),
            board_theme=_enum(BoardTheme, data.get("board_theme"), BoardTheme.BROWN),
        )

    def toggled_haptic_feedback(self) -> "BoardPrefs":
        return replace(self, haptic_feedback=not self.haptic_feedback)

    def toggled_piece_animation(self) -> "BoardPrefs":
        return replace(self, piece_animation=not self.piece_animation)


@dataclass(frozen=True)
class GamePrefs:
    """In-game preferences. ``enable_chat`` stays ``None`` until first toggled."""

    PREF_KEY = "preferences.game"

    enable_chat: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GamePrefs":
        return cls(enable_chat=_bool(data.get("enable_chat"), None))

    def toggled_chat(self) -> "GamePrefs":
        return replace(self, enable_chat=not (self.enable_chat or False))
