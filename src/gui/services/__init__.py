"""Service layer exports.

Responsibilities:
 - Observable preference stores (sound/general, board, game)
 - Sound pool loading
 - Remote account preferences for the in-game settings panel
 - Log capture for startup diagnostics
"""

from .preference_stores import (  # noqa: F401
    BoardPreferencesStore,
    GamePreferencesStore,
    GeneralPreferencesStore,
    PreferenceStore,
    Subscription,
)
from .sound_service import SoundPool, load_sound_pool  # noqa: F401
from .logging_service import LoggingService, configure_logging  # noqa: F401

__all__ = [
    "BoardPreferencesStore",
    "GamePreferencesStore",
    "GeneralPreferencesStore",
    "PreferenceStore",
    "Subscription",
    "SoundPool",
    "load_sound_pool",
    "LoggingService",
    "configure_logging",
]
