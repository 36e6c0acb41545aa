"""GameSettingsViewModel: toggle rows for the in-game settings panel.

Rows are a pure projection of the preference stores and of the per-game
account preference fetch. The view model keeps no copy of any toggle value;
``rows()`` reads the stores each time it is called.

The move confirmation and zen mode rows depend on server policy and are only
present once the fetch succeeded and the policy allows them. While the fetch
is pending, or after it failed, they are omitted without any error display.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Awaitable, Callable, List, Tuple

from domain.account_preferences import UserGamePrefs, Zen
from domain.async_result import AsyncResult, Failed, Pending, Ready
from gui.services.game_controller import GameController
from gui.services.preference_stores import (
    BoardPreferencesStore,
    GamePreferencesStore,
    GeneralPreferencesStore,
    PreferenceStore,
    Subscription,
)

__all__ = ["SettingRow", "GameSettingsViewModel"]

_log = logging.getLogger(__name__)

UserPrefsLoader = Callable[[], Awaitable[UserGamePrefs]]


@dataclass(frozen=True)
class SettingRow:
    key: str
    title: str
    value: bool
    on_changed: Callable[[bool], None]

    def toggle(self) -> None:
        self.on_changed(not self.value)


class GameSettingsViewModel:
    def __init__(
        self,
        game_id: str,
        *,
        general: GeneralPreferencesStore,
        board: BoardPreferencesStore,
        game: GamePreferencesStore,
        controller: GameController,
    ) -> None:
        self.game_id = game_id
        self._general = general
        self._board = board
        self._game = game
        self._controller = controller
        self._user_prefs: AsyncResult[UserGamePrefs] = Pending()
        self._listeners: List[Callable[[], None]] = []
        self._store_subs: List[Tuple[PreferenceStore, Subscription]] = [
            (store, store.subscribe(lambda _snapshot: self._notify()))
            for store in (general, board, game)
        ]

    # ------------------------------------------------------------------
    # Async policy fetch
    # ------------------------------------------------------------------
    @property
    def user_prefs(self) -> AsyncResult[UserGamePrefs]:
        return self._user_prefs

    def set_user_prefs(self, result: AsyncResult[UserGamePrefs]) -> None:
        self._user_prefs = result
        self._notify()

    async def mount(self, loader: UserPrefsLoader) -> AsyncResult[UserGamePrefs]:
        """Fetch the account policy for this game; failures are kept, not retried."""
        self.set_user_prefs(Pending())
        try:
            data = await loader()
        except Exception as exc:  # noqa: BLE001 - policy rows are simply hidden on failure
            _log.warning("Could not load game preferences for %s: %s", self.game_id, exc)
            self.set_user_prefs(Failed(exc))
        else:
            self.set_user_prefs(Ready(data))
        return self._user_prefs

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------
    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def cancel() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return cancel

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    def dispose(self) -> None:
        for store, sub in self._store_subs:
            store.unsubscribe(sub)
        self._store_subs.clear()
        self._listeners.clear()

    # ------------------------------------------------------------------
    # Projection
    # ------------------------------------------------------------------
    def rows(self) -> List[SettingRow]:
        general = self._general.read()
        board = self._board.read()
        game = self._game.read()
        rows = [
            SettingRow(
                key="sound",
                title="Sound",
                value=general.is_sound_enabled,
                on_changed=lambda _value: self._general.toggle_sound_enabled(),
            ),
            SettingRow(
                key="haptic_feedback",
                title="Haptic feedback",
                value=board.haptic_feedback,
                on_changed=lambda _value: self._board.toggle_haptic_feedback(),
            ),
            SettingRow(
                key="piece_animation",
                title="Piece animation",
                value=board.piece_animation,
                on_changed=lambda _value: self._board.toggle_piece_animation(),
            ),
            SettingRow(
                key="chat",
                title="Toggle the chat",
                value=game.enable_chat or False,
                on_changed=self._on_chat_changed,
            ),
        ]
        rows.extend(self._policy_rows())
        return rows

    def row(self, key: str) -> SettingRow:
        for candidate in self.rows():
            if candidate.key == key:
                return candidate
        raise KeyError(key)

    def _on_chat_changed(self, value: bool) -> None:
        self._game.toggle_chat()
        self._controller.on_toggle_chat(value)

    # The controller owns these two toggles; the fetched result mirrors its state.
    def _on_move_confirmation_changed(self, _value: bool) -> None:
        self._controller.toggle_move_confirmation()
        if isinstance(self._user_prefs, Ready):
            data = self._user_prefs.data
            self.set_user_prefs(
                Ready(replace(data, should_confirm_move=not data.should_confirm_move))
            )

    def _on_zen_mode_changed(self, _value: bool) -> None:
        self._controller.toggle_zen_mode()
        if isinstance(self._user_prefs, Ready):
            data = self._user_prefs.data
            self.set_user_prefs(
                Ready(replace(data, is_zen_mode_enabled=not data.is_zen_mode_enabled))
            )

    def _policy_rows(self) -> List[SettingRow]:
        match self._user_prefs:
            case Ready(data=data):
                policy = data.prefs
                rows: List[SettingRow] = []
                if policy is not None and policy.submit_move:
                    rows.append(
                        SettingRow(
                            key="move_confirmation",
                            title="Move confirmation",
                            value=data.should_confirm_move,
                            on_changed=self._on_move_confirmation_changed,
                        )
                    )
                if policy is not None and policy.zen_mode is Zen.GAME_AUTO:
                    rows.append(
                        SettingRow(
                            key="zen_mode",
                            title="Zen mode",
                            value=data.is_zen_mode_enabled,
                            on_changed=self._on_zen_mode_changed,
                        )
                    )
                return rows
            case Pending():
                return []
            case Failed():
                return []
        return []
