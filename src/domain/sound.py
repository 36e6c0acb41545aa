"""Sound identifiers and sound themes."""

from __future__ import annotations

from enum import Enum


class Sound(str, Enum):
    MOVE = "move"
    CAPTURE = "capture"
    LOW_TIME = "low_time"
    DONG = "dong"
    ERROR = "error"
    CONFIRMATION = "confirmation"
    PUZZLE_STORM_END = "puzzle_storm_end"
    CLOCK = "clock"


class SoundTheme(str, Enum):
    STANDARD = "standard"
    PIANO = "piano"
    NES = "nes"
    SFX = "sfx"
    FUTURISTIC = "futuristic"
    LISP = "lisp"

    @classmethod
    def parse(cls, value: object, default: "SoundTheme | None" = None) -> "SoundTheme":
        try:
            return cls(value)
        except ValueError:
            return default if default is not None else cls.STANDARD


__all__ = ["Sound", "SoundTheme"]
