"""GUI view layer (Qt widgets).

Exports:
 - GameSettingsView
"""

from .game_settings_view import GameSettingsView  # noqa: F401
