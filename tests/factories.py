from __future__ import annotations

import asyncio
import sqlite3
from pathlib import Path

import httpx

from core.async_http import create_client
from core.platform_info import DeviceInfo, PackageInfo, PlatformProbe
from db.migration_manager import apply_pending_migrations
from db.schema import apply_schema
from db.secure_storage import SecureStorage
from db.session_storage import SessionStorage
from domain.auth import AuthSessionState, LightUser


def make_conn() -> sqlite3.Connection:
    conn = sqlite3.connect(":memory:")
    conn.execute("PRAGMA foreign_keys=ON")
    apply_schema(conn)
    apply_pending_migrations(conn)
    return conn


def make_session(user_id: str = "bobby", token: str = "lip_abc123") -> AuthSessionState:
    return AuthSessionState(user=LightUser(id=user_id, name=user_id.title()), token=token)


def store_session(data_dir: Path, session: AuthSessionState) -> None:
    SessionStorage(SecureStorage(data_dir)).write(session)


def read_session(data_dir: Path) -> AuthSessionState | None:
    return SessionStorage(SecureStorage(data_dir)).read()


class FakeProbe(PlatformProbe):
    def __init__(self, version="0.8.2", memory=8192.0, palette=None, fail=False):
        super().__init__("chess-client")
        self.version = version
        self.memory = memory
        self.palette = palette
        self.fail = fail

    def package_info(self):
        if self.fail:
            raise OSError("platform channel unavailable")
        return PackageInfo(app_name="ChessClient", package_name="chess-client", version=self.version)

    def device_info(self):
        return DeviceInfo(
            system="Linux",
            release="6.1",
            machine="x86_64",
            model="test-device",
            python_version="3.12.0",
        )

    def physical_memory_mb(self):
        return self.memory

    def core_palette(self):
        return self.palette


class MockAccountServer:
    """Records requests to the account endpoints and answers with a fixed response."""

    def __init__(self, status=200, json_body=None, exc=None, delay=None):
        self.status = status
        self.json_body = json_body if json_body is not None else {"id": "bobby"}
        self.exc = exc
        self.delay = delay
        self.requests: list[httpx.Request] = []
        self.clients: list[httpx.AsyncClient] = []

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.exc is not None:
            raise self.exc
        return httpx.Response(self.status, json=self.json_body)

    def client_factory(self) -> httpx.AsyncClient:
        client = create_client(transport=httpx.MockTransport(self.handler))
        self.clients.append(client)
        return client


class SpyController:
    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def on_toggle_chat(self, enabled: bool) -> None:
        self.calls.append(("on_toggle_chat", enabled))

    def toggle_move_confirmation(self) -> None:
        self.calls.append(("toggle_move_confirmation",))

    def toggle_zen_mode(self) -> None:
        self.calls.append(("toggle_zen_mode",))
