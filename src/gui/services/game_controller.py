"""Interface of the live game controller notified by the settings panel."""

from __future__ import annotations

from typing import Protocol

__all__ = ["GameController"]


class GameController(Protocol):
    def on_toggle_chat(self, enabled: bool) -> None: ...  # pragma: no cover - structural

    def toggle_move_confirmation(self) -> None: ...  # pragma: no cover - structural

    def toggle_zen_mode(self) -> None: ...  # pragma: no cover - structural
