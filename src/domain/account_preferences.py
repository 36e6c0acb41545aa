"""Server side account preferences relevant to a running game."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

__all__ = ["Zen", "AccountGamePrefs", "UserGamePrefs"]


class Zen(Enum):
    NO = 0
    YES = 1
    GAME_AUTO = 2

    @classmethod
    def from_code(cls, code: Any) -> "Zen":
        try:
            return cls(int(code))
        except (TypeError, ValueError):
            return cls.NO


@dataclass(frozen=True)
class AccountGamePrefs:
    """Policy flags from the account preferences endpoint.

    submit_move: the account asks for move confirmation in some games.
    zen_mode: zen policy; only ``Zen.GAME_AUTO`` lets the player switch it per game.
    """

    submit_move: bool = False
    zen_mode: Zen = Zen.NO

    @classmethod
    def from_server_json(cls, data: Dict[str, Any]) -> "AccountGamePrefs":
        prefs = data.get("prefs", data)
        if not isinstance(prefs, dict):
            raise ValueError("account preferences payload is not an object")
        # submitMove is a bitmask of game speeds; any bit means the feature is on.
        return cls(
            submit_move=bool(prefs.get("submitMove") or False),
            zen_mode=Zen.from_code(prefs.get("zen", 0)),
        )


@dataclass(frozen=True)
class UserGamePrefs:
    prefs: Optional[AccountGamePrefs]
    should_confirm_move: bool = False
    is_zen_mode_enabled: bool = False
