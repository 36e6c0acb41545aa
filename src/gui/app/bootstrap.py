"""Application bootstrap: builds the process-wide dependency bundle.

Responsibilities:
 - Query platform package metadata and device descriptor
 - Open the local preference store and load the sound pool for the chosen theme
 - Run the installed-version migration (including the 0.7.0 data wipe)
 - Open the SQLite database and apply migrations
 - First-run cleanup of secure storage and default board theme
 - Provision the socket random identifier (SRI)
 - Validate a stored auth session against the account endpoint
 - Compute the engine memory budget

Every step runs strictly after the previous one. Platform queries and the
database open are fatal: their errors abort startup wrapped in
``BootstrapError``. The session check never fails startup.

``AppDependenciesProvider`` memoizes the bundle for the process lifetime;
concurrent callers await the same in-flight bootstrap.
"""

from __future__ import annotations

import asyncio
import logging
import math
import os
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Mapping, Optional, Tuple

import httpx
from packaging.version import InvalidVersion, Version

from config import settings
from core.async_http import auth_headers, create_client, make_user_agent
from core.platform_info import DeviceInfo, PackageInfo, PlatformProbe
from db.database import database_path, delete_database, open_db
from db.secure_storage import SecureStorage
from db.session_storage import SessionStorage
from db.shared_preferences import SharedPreferences
from domain.auth import AuthSessionState
from domain.preferences import BoardPrefs, BoardTheme
from domain.sound import Sound
from gui.services.preference_stores import BoardPreferencesStore, GeneralPreferencesStore
from gui.services.sound_service import SoundPool, load_sound_pool
from utils.strings import gen_random_string

from .timing import TimingLogger

__all__ = [
    "AppDependencies",
    "AppDependenciesProvider",
    "BootstrapError",
    "app_dependencies",
    "bootstrap_dependencies",
    "check_session",
    "compute_engine_max_memory",
    "migrate_installed_version",
    "provision_sri",
    "run_first_run_setup",
]

_log = logging.getLogger(__name__)

ClientFactory = Callable[[], httpx.AsyncClient]


class BootstrapError(RuntimeError):
    """Unrecoverable startup failure (platform query or database open)."""


@dataclass(frozen=True)
class AppDependencies:
    """Process-wide handles produced once at startup.

    Attributes
    ----------
    package_info: Installed client name and version.
    device_info: Host operating system and machine descriptor.
    shared_preferences: Local key-value preference store.
    sound_pool: Loaded sound pool and its ``Sound -> resource id`` mapping.
    user_session: Stored auth session, None when logged out or rejected by the server.
    database: Open SQLite connection.
    sri: Socket random identifier, stable for the installation.
    engine_max_memory_mb: Memory budget handed to the chess engine process.
    """

    package_info: PackageInfo
    device_info: DeviceInfo
    shared_preferences: SharedPreferences
    sound_pool: Tuple[SoundPool, Mapping[Sound, int]]
    user_session: Optional[AuthSessionState]
    database: sqlite3.Connection
    sri: str
    engine_max_memory_mb: int


def _default_client_factory() -> httpx.AsyncClient:
    return create_client(timeout=settings.SESSION_CHECK_TIMEOUT)


def _parse_version(value: str) -> Optional[Version]:
    try:
        return Version(value)
    except InvalidVersion:
        return None


def migrate_installed_version(
    prefs: SharedPreferences, app_version: Version, db_path: str | os.PathLike[str]
) -> bool:
    """Record the running version; returns True when the legacy wipe ran.

    An install that never recorded a version and starts directly on the legacy
    milestone loses all preferences and its database.
    """
    # TODO: drop the 0.7.0 wipe once no supported upgrade path starts before it.
    installed = prefs.get_string(settings.INSTALLED_VERSION_KEY)
    wiped = False
    if installed is None and app_version == Version(settings.LEGACY_WIPE_VERSION):
        _log.warning("Legacy %s install detected: wiping preferences and database", app_version)
        prefs.clear()
        delete_database(db_path)
        wiped = True
    if installed is None or _parse_version(installed) != app_version:
        prefs.set_string(settings.INSTALLED_VERSION_KEY, str(app_version))
    return wiped


def run_first_run_setup(
    prefs: SharedPreferences, secure_storage: SecureStorage, probe: PlatformProbe
) -> bool:
    """One-time setup on a fresh install; returns True if it ran."""
    if prefs.get_bool(settings.FIRST_RUN_KEY) is False:
        return False
    # Secure storage can survive an uninstall; a fresh install must not see old secrets.
    secure_storage.delete_all()
    if probe.core_palette() is not None:
        BoardPreferencesStore.write_to_storage(prefs, BoardPrefs(board_theme=BoardTheme.SYSTEM))
    prefs.set_bool(settings.FIRST_RUN_KEY, False)
    _log.info("First run setup done")
    return True


def provision_sri(secure_storage: SecureStorage) -> str:
    stored = secure_storage.read(settings.SRI_STORAGE_KEY)
    if stored is None:
        sri = gen_random_string(settings.SRI_LENGTH)
        _log.info("Generated new SRI: %s", sri)
        secure_storage.write(settings.SRI_STORAGE_KEY, sri)
    if stored is not None:
        return stored
    # Another writer may have stored a value in between; last write wins.
    reread = secure_storage.read(settings.SRI_STORAGE_KEY)
    return reread if reread is not None else gen_random_string(settings.SRI_LENGTH)


async def check_session(
    session_storage: SessionStorage,
    session: AuthSessionState,
    *,
    user_agent: str,
    client_factory: ClientFactory = _default_client_factory,
    timeout: float = settings.SESSION_CHECK_TIMEOUT,
) -> None:
    """Delete the stored session if the server rejects it with 401.

    Every other outcome (success, other status codes, timeout, network error)
    leaves the session untouched.
    """
    client = client_factory()
    try:
        response = await asyncio.wait_for(
            client.get(settings.ACCOUNT_PATH, headers=auth_headers(session, user_agent)),
            timeout=timeout,
        )
        if response.status_code == 401:
            _log.info("Stored session for %s rejected by server, deleting it", session.user.id)
            session_storage.delete()
        elif response.status_code != 200:
            _log.warning("Unexpected status %d while checking session", response.status_code)
    except Exception as exc:  # noqa: BLE001 - session check must never abort startup
        _log.warning("Error while checking session: %r", exc)
    finally:
        await client.aclose()


def compute_engine_max_memory(physical_memory_mb: Optional[float]) -> int:
    physical = (
        physical_memory_mb
        if physical_memory_mb is not None
        else settings.DEFAULT_PHYSICAL_MEMORY_MB
    )
    return math.ceil(physical / settings.ENGINE_MEMORY_DIVISOR)


async def bootstrap_dependencies(
    *,
    data_dir: str | os.PathLike[str] = settings.DATA_DIR,
    sounds_dir: str | os.PathLike[str] = settings.SOUNDS_DIR,
    probe: Optional[PlatformProbe] = None,
    secure_storage: Optional[SecureStorage] = None,
    client_factory: ClientFactory = _default_client_factory,
    timing: Optional[TimingLogger] = None,
) -> AppDependencies:
    """Run the startup sequence and return the finished bundle."""
    probe = probe or PlatformProbe()
    timing = timing or TimingLogger()
    data_dir = Path(data_dir)

    with timing.measure("platform_info"):
        try:
            package_info = probe.package_info()
            device_info = probe.device_info()
            app_version = Version(package_info.version)
        except Exception as exc:  # noqa: BLE001 - any platform failure is fatal
            raise BootstrapError(f"Unable to read platform info: {exc}") from exc
    _log.info(
        "Starting %s %s on %s/%s",
        package_info.app_name,
        package_info.version,
        device_info.system,
        device_info.release,
    )

    with timing.measure("shared_preferences"):
        prefs = await asyncio.to_thread(SharedPreferences.open, data_dir)
        sound_theme = GeneralPreferencesStore.fetch_from_storage(prefs).sound_theme

    with timing.measure("sound_pool"):
        sound_pool = await asyncio.to_thread(load_sound_pool, sound_theme, sounds_dir)

    db_path = database_path(data_dir)

    with timing.measure("version_migration"):
        migrate_installed_version(prefs, app_version, db_path)

    with timing.measure("open_database"):
        try:
            db = await asyncio.to_thread(open_db, db_path)
        except (sqlite3.Error, OSError) as exc:
            raise BootstrapError(f"Unable to open database at {db_path}: {exc}") from exc

    # From here on the connection belongs to the bundle; any abort (error or
    # cancellation by teardown) must close it.
    try:
        if secure_storage is None:
            secure_storage = SecureStorage(data_dir)
        session_storage = SessionStorage(secure_storage)

        with timing.measure("first_run"):
            run_first_run_setup(prefs, secure_storage, probe)

        with timing.measure("sri"):
            sri = provision_sri(secure_storage)

        stored_session = session_storage.read()
        if stored_session is not None:
            with timing.measure("session_check"):
                await check_session(
                    session_storage,
                    stored_session,
                    user_agent=make_user_agent(package_info, device_info, sri, stored_session.user),
                    client_factory=client_factory,
                )

        engine_max_memory = compute_engine_max_memory(probe.physical_memory_mb())

        deps = AppDependencies(
            package_info=package_info,
            device_info=device_info,
            shared_preferences=prefs,
            sound_pool=sound_pool,
            user_session=session_storage.read(),
            database=db,
            sri=sri,
            engine_max_memory_mb=engine_max_memory,
        )
    except BaseException:
        db.close()
        sound_pool[0].release()
        raise

    timing.stop()
    _log.info("Startup completed in %.1f ms", timing.total_duration * 1000)
    return deps


class AppDependenciesProvider:
    """Once-only, memoized access to the dependency bundle.

    ``get()`` starts the bootstrap on first use; later and concurrent callers
    await the same task. A failed bootstrap is not retried automatically: the
    error reaches every waiting caller and only a new ``get()`` starts over.
    """

    def __init__(
        self, factory: Optional[Callable[..., Awaitable[AppDependencies]]] = None
    ) -> None:
        self._factory = factory or bootstrap_dependencies
        self._options: dict[str, Any] = {}
        self._task: Optional[asyncio.Future[AppDependencies]] = None
        self._value: Optional[AppDependencies] = None

    def configure(self, **options: Any) -> None:
        """Set keyword arguments for the bootstrap; only allowed before it starts."""
        if self._task is not None or self._value is not None:
            raise RuntimeError("App dependencies already initialized")
        self._options.update(options)

    @property
    def ready(self) -> bool:
        return self._value is not None

    def peek(self) -> Optional[AppDependencies]:
        return self._value

    async def get(self) -> AppDependencies:
        if self._value is not None:
            return self._value
        if self._task is None:
            self._task = asyncio.ensure_future(self._run())
        # One cancelled waiter must not cancel the bootstrap for the others.
        return await asyncio.shield(self._task)

    async def _run(self) -> AppDependencies:
        try:
            deps = await self._factory(**self._options)
        except BaseException:
            self._task = None
            raise
        self._value = deps
        return deps

    async def teardown(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        value, self._value = self._value, None
        if value is not None:
            value.database.close()
            value.sound_pool[0].release()
            _log.info("App dependencies released")


app_dependencies = AppDependenciesProvider()
