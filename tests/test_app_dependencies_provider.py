import asyncio
import sqlite3

import httpx
import pytest

from config import settings
from db.database import open_db
from gui.app import bootstrap
from gui.app.bootstrap import AppDependenciesProvider, BootstrapError, check_session

from factories import FakeProbe, MockAccountServer, make_session, store_session


class _FakeDeps:
    def __init__(self):
        self.closed = False
        self.released = False
        outer = self

        class _Db:
            def close(self):
                outer.closed = True

        class _Pool:
            def release(self):
                outer.released = True

        self.database = _Db()
        self.sound_pool = (_Pool(), {})


def test_concurrent_get_runs_bootstrap_once():
    calls = []

    async def factory(**options):
        calls.append(options)
        await asyncio.sleep(0.01)
        return _FakeDeps()

    provider = AppDependenciesProvider(factory)
    provider.configure(data_dir="somewhere")

    async def main():
        results = await asyncio.gather(*(provider.get() for _ in range(5)))
        again = await provider.get()
        return results, again

    results, again = asyncio.run(main())
    assert len(calls) == 1
    assert calls[0] == {"data_dir": "somewhere"}
    assert all(r is results[0] for r in results)
    assert again is results[0]
    assert provider.ready


def test_peek_is_none_until_complete():
    seen = []

    async def factory(**_options):
        seen.append(provider.peek())
        return _FakeDeps()

    provider = AppDependenciesProvider(factory)
    assert provider.peek() is None
    deps = asyncio.run(provider.get())
    assert seen == [None]
    assert provider.peek() is deps


def test_failure_reaches_every_waiter_and_is_not_cached():
    attempts = []

    async def factory(**_options):
        attempts.append(1)
        await asyncio.sleep(0)
        if len(attempts) == 1:
            raise BootstrapError("database unavailable")
        return _FakeDeps()

    provider = AppDependenciesProvider(factory)

    async def main():
        results = await asyncio.gather(provider.get(), provider.get(), return_exceptions=True)
        assert all(isinstance(r, BootstrapError) for r in results)
        assert not provider.ready
        return await provider.get()

    deps = asyncio.run(main())
    assert len(attempts) == 2
    assert provider.peek() is deps


def test_configure_after_start_is_rejected():
    async def factory(**_options):
        return _FakeDeps()

    provider = AppDependenciesProvider(factory)
    asyncio.run(provider.get())
    with pytest.raises(RuntimeError):
        provider.configure(data_dir="late")


def test_teardown_releases_resources():
    async def factory(**_options):
        return _FakeDeps()

    provider = AppDependenciesProvider(factory)

    async def main():
        deps = await provider.get()
        await provider.teardown()
        return deps

    deps = asyncio.run(main())
    assert deps.closed and deps.released
    assert provider.peek() is None
    provider.configure(data_dir="again")  # allowed once torn down


def test_session_check_timeout_keeps_session(tmp_path):
    deleted = []

    class _Storage:
        def delete(self):
            deleted.append(True)

    server = MockAccountServer(status=401, delay=1.0)
    asyncio.run(
        check_session(
            _Storage(),
            make_session(),
            user_agent="ChessClient/test",
            client_factory=server.client_factory,
            timeout=0.05,
        )
    )
    assert deleted == []
    assert server.clients[0].is_closed


def test_session_check_network_error_keeps_session():
    deleted = []

    class _Storage:
        def delete(self):
            deleted.append(True)

    server = MockAccountServer(exc=httpx.ConnectError("no route to host"))
    asyncio.run(
        check_session(
            _Storage(),
            make_session(),
            user_agent="ChessClient/test",
            client_factory=server.client_factory,
        )
    )
    assert deleted == []
    assert server.clients[0].is_closed


@pytest.fixture
def opened_connections(monkeypatch):
    opened = []

    def recording_open_db(path):
        conn = open_db(path)
        opened.append(conn)
        return conn

    monkeypatch.setattr(bootstrap, "open_db", recording_open_db)
    return opened


def _is_closed(conn):
    try:
        conn.execute("SELECT 1")
    except sqlite3.ProgrammingError:
        return True
    return False


def test_teardown_during_session_check_closes_database(
    run_bootstrap, data_dir, sounds_dir, session, opened_connections
):
    run_bootstrap()  # first run done; secure storage now keeps the session
    store_session(data_dir, session)
    opened_connections.clear()
    server = MockAccountServer(status=200, delay=1.0)
    provider = AppDependenciesProvider()
    provider.configure(
        data_dir=data_dir,
        sounds_dir=sounds_dir,
        probe=FakeProbe(),
        client_factory=server.client_factory,
    )

    async def main():
        waiter = asyncio.ensure_future(provider.get())
        while not server.requests:
            await asyncio.sleep(0.01)
        await provider.teardown()
        with pytest.raises(asyncio.CancelledError):
            await waiter

    asyncio.run(main())
    assert len(opened_connections) == 1
    assert _is_closed(opened_connections[0])
    assert provider.peek() is None
    assert server.clients[0].is_closed


def test_failure_after_database_open_closes_it(
    run_bootstrap, monkeypatch, opened_connections
):
    monkeypatch.setenv(settings.SECURE_STORAGE_KEY_ENV, "not-a-fernet-key")
    with pytest.raises(ValueError):
        run_bootstrap()
    assert len(opened_connections) == 1
    assert _is_closed(opened_connections[0])
