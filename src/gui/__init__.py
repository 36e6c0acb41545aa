"""Chess client GUI layer public API.

Curated, intentionally small surface for callers (launcher, tests) that
should not depend on deep module paths.

Design Principles:
- Avoid side-effect heavy imports (no implicit QApplication creation).
- Re-export only the startup bundle and the settings view model.
"""

from __future__ import annotations

from .app.bootstrap import (  # noqa: F401
    AppDependencies,
    AppDependenciesProvider,
    BootstrapError,
    app_dependencies,
)
from .viewmodels.game_settings_viewmodel import GameSettingsViewModel, SettingRow  # noqa: F401

__all__ = [
    "AppDependencies",
    "AppDependenciesProvider",
    "BootstrapError",
    "app_dependencies",
    "GameSettingsViewModel",
    "SettingRow",
]
