"""In-game settings panel: one check box per GameSettingsViewModel row."""
from __future__ import annotations

try:
    from PyQt6.QtWidgets import QCheckBox, QLabel, QVBoxLayout, QWidget
except Exception:  # pragma: no cover
    QWidget = object  # type: ignore

from gui.viewmodels.game_settings_viewmodel import GameSettingsViewModel


class GameSettingsView(QWidget):  # type: ignore[misc]
    """Rebuilds its check boxes whenever the view model reports a change."""

    def __init__(self, viewmodel: GameSettingsViewModel, parent=None):
        super().__init__(parent)
        self.setObjectName("GameSettingsView")
        self._vm = viewmodel
        self._checkboxes: dict[str, QCheckBox] = {}
        self._layout = QVBoxLayout(self)
        title = QLabel("Settings")
        title.setObjectName("GameSettingsTitle")
        self._layout.addWidget(title)
        self._unsubscribe = viewmodel.subscribe(self.refresh)
        self.refresh()

    def checkbox(self, key: str) -> QCheckBox | None:
        return self._checkboxes.get(key)

    def keys(self) -> list[str]:
        return list(self._checkboxes.keys())

    def refresh(self) -> None:
        for box in self._checkboxes.values():
            self._layout.removeWidget(box)
            box.deleteLater()
        self._checkboxes.clear()
        for row in self._vm.rows():
            box = QCheckBox(row.title)
            box.setObjectName(f"setting_{row.key}")
            box.setChecked(row.value)
            # clicked only fires on user interaction, not on setChecked above
            box.clicked.connect(lambda checked, r=row: r.on_changed(checked))  # type: ignore
            self._layout.addWidget(box)
            self._checkboxes[row.key] = box

    def closeEvent(self, event):  # noqa: N802 - Qt override
        self._unsubscribe()
        super().closeEvent(event)


__all__ = ["GameSettingsView"]
