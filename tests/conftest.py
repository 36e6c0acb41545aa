# Shared fixtures: a fixed platform probe, isolated storage directories,
# a mock account server and an offscreen QApplication for widget tests.

import asyncio
import os
import sys
from pathlib import Path

import pytest

from db.shared_preferences import SharedPreferences
from gui.app.bootstrap import bootstrap_dependencies

from factories import FakeProbe, MockAccountServer, SpyController, make_session


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    monkeypatch.delenv("CHESS_CLIENT_STORAGE_KEY", raising=False)


@pytest.fixture
def probe():
    return FakeProbe()


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    d = tmp_path / "data"
    d.mkdir()
    return d


@pytest.fixture
def sounds_dir(tmp_path: Path) -> Path:
    d = tmp_path / "sounds"
    (d / "standard").mkdir(parents=True)
    (d / "standard" / "move.mp3").write_bytes(b"move")
    (d / "standard" / "capture.mp3").write_bytes(b"capture")
    (d / "piano").mkdir()
    (d / "piano" / "move.mp3").write_bytes(b"piano-move")
    return d


@pytest.fixture
def prefs(tmp_path: Path) -> SharedPreferences:
    return SharedPreferences(tmp_path / "prefs" / "shared_prefs.json")


@pytest.fixture
def session():
    return make_session()


@pytest.fixture
def controller():
    return SpyController()


@pytest.fixture
def account_server():
    return MockAccountServer()


@pytest.fixture
def run_bootstrap(data_dir, sounds_dir, probe, account_server):
    """Run the full bootstrap synchronously; opened databases are closed afterwards."""
    opened = []

    def _run(**overrides):
        kwargs = dict(
            data_dir=data_dir,
            sounds_dir=sounds_dir,
            probe=probe,
            client_factory=account_server.client_factory,
        )
        kwargs.update(overrides)
        deps = asyncio.run(bootstrap_dependencies(**kwargs))
        opened.append(deps)
        return deps

    yield _run
    for deps in opened:
        deps.database.close()


@pytest.fixture(scope="session")
def qapp():
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    QtWidgets = pytest.importorskip("PyQt6.QtWidgets")
    return QtWidgets.QApplication.instance() or QtWidgets.QApplication(sys.argv[:1])
