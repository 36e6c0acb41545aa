"""Authenticated session models and bearer token signing."""

from __future__ import annotations

import base64
import hashlib
import hmac
from dataclasses import dataclass
from typing import Any, Dict, Optional

from config import settings

__all__ = ["LightUser", "AuthSessionState", "sign_bearer_token"]


@dataclass(frozen=True, slots=True)
class LightUser:
    id: str
    name: str
    title: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "title": self.title}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LightUser":
        return cls(id=str(data["id"]), name=str(data["name"]), title=data.get("title"))


@dataclass(frozen=True, slots=True)
class AuthSessionState:
    user: LightUser
    token: str

    def to_dict(self) -> Dict[str, Any]:
        return {"user": self.user.to_dict(), "token": self.token}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AuthSessionState":
        return cls(user=LightUser.from_dict(data["user"]), token=str(data["token"]))


def sign_bearer_token(token: str, *, secret: str | None = None) -> str:
    """Append an HMAC-SHA256 signature so the server can tell the token came from this client."""
    key = (secret if secret is not None else settings.CLIENT_SECRET).encode("utf-8")
    digest = hmac.new(key, token.encode("utf-8"), hashlib.sha256).digest()
    signature = base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")
    return f"{token}:{signature}"
