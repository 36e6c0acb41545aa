"""Remote account preferences for the in-game settings panel."""

from __future__ import annotations

import logging

import httpx

from config import settings
from core.async_http import AsyncHttpError, auth_headers, fetch_json
from domain.account_preferences import AccountGamePrefs, UserGamePrefs
from domain.auth import AuthSessionState

__all__ = ["fetch_user_game_prefs"]

_log = logging.getLogger(__name__)


async def fetch_user_game_prefs(
    client: httpx.AsyncClient,
    session: AuthSessionState | None,
    *,
    user_agent: str,
    should_confirm_move: bool = False,
    is_zen_mode_enabled: bool = False,
) -> UserGamePrefs:
    """Combine the account's game policy with the game's local toggles.

    Anonymous players have no account policy: ``prefs`` is None and the
    policy-gated settings stay hidden.
    """
    if session is None:
        return UserGamePrefs(
            prefs=None,
            should_confirm_move=should_confirm_move,
            is_zen_mode_enabled=is_zen_mode_enabled,
        )
    payload = await fetch_json(
        client,
        settings.ACCOUNT_PREFERENCES_PATH,
        headers=auth_headers(session, user_agent),
    )
    if not isinstance(payload, dict):
        raise AsyncHttpError("account preferences response is not an object")
    try:
        prefs = AccountGamePrefs.from_server_json(payload)
    except ValueError as exc:
        raise AsyncHttpError(f"malformed account preferences: {exc}") from exc
    _log.debug("Account game prefs for %s: %s", session.user.id, prefs)
    return UserGamePrefs(
        prefs=prefs,
        should_confirm_move=should_confirm_move,
        is_zen_mode_enabled=is_zen_mode_enabled,
    )
