import pytest

from domain.account_preferences import AccountGamePrefs, UserGamePrefs, Zen
from domain.async_result import Ready
from gui.services.preference_stores import (
    BoardPreferencesStore,
    GamePreferencesStore,
    GeneralPreferencesStore,
)
from gui.viewmodels.game_settings_viewmodel import GameSettingsViewModel


@pytest.fixture
def view(qapp, prefs, controller):
    from gui.views.game_settings_view import GameSettingsView

    vm = GameSettingsViewModel(
        "g1",
        general=GeneralPreferencesStore(prefs),
        board=BoardPreferencesStore(prefs),
        game=GamePreferencesStore(prefs),
        controller=controller,
    )
    w = GameSettingsView(vm)
    yield w, vm
    w.close()
    vm.dispose()


def test_one_checkbox_per_row(view):
    w, _vm = view
    assert w.keys() == ["sound", "haptic_feedback", "piece_animation", "chat"]
    assert w.checkbox("sound").isChecked()
    assert not w.checkbox("chat").isChecked()
    assert w.checkbox("sound").objectName() == "setting_sound"


def test_click_toggles_store_and_refreshes(view, prefs):
    w, _vm = view
    w.checkbox("sound").click()
    assert GeneralPreferencesStore.fetch_from_storage(prefs).is_sound_enabled is False
    assert not w.checkbox("sound").isChecked()


def test_policy_rows_appear_after_fetch(view, controller):
    w, vm = view
    vm.set_user_prefs(
        Ready(UserGamePrefs(prefs=AccountGamePrefs(submit_move=True, zen_mode=Zen.GAME_AUTO)))
    )
    assert w.keys()[-2:] == ["move_confirmation", "zen_mode"]
    w.checkbox("zen_mode").click()
    assert controller.calls == [("toggle_zen_mode",)]
    assert w.checkbox("zen_mode").isChecked()
