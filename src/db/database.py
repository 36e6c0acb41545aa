"""Opening, creating and deleting the on-device SQLite database."""

from __future__ import annotations

import logging
import os
import sqlite3
from pathlib import Path

from config import settings

from .migration_manager import apply_pending_migrations, verify_migration_checksums
from .schema import apply_schema

__all__ = ["get_databases_path", "database_path", "open_db", "delete_database"]

_log = logging.getLogger(__name__)

_SIDE_FILE_SUFFIXES = ("-journal", "-wal", "-shm")


def get_databases_path(data_dir: str | os.PathLike[str]) -> str:
    """Directory holding database files for the given data directory."""
    return os.path.join(os.fspath(data_dir), "databases")


def database_path(data_dir: str | os.PathLike[str]) -> str:
    return os.path.join(get_databases_path(data_dir), settings.DATABASE_FILE_NAME)


def open_db(path: str | os.PathLike[str]) -> sqlite3.Connection:
    """Open (or create) the database at ``path`` and bring its schema up to date.

    Errors are not caught: a database that cannot be opened aborts startup.
    """
    path = os.fspath(path)
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    # Opened on a worker thread during bootstrap, used on the main thread afterwards.
    conn = sqlite3.connect(path, check_same_thread=False)
    try:
        conn.execute("PRAGMA foreign_keys=ON")
        row = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='schema_meta'"
        ).fetchone()
        if not row:
            apply_schema(conn)
            _log.info("Initialized new SQLite database at %s", path)
        applied = apply_pending_migrations(conn)
        drifted = verify_migration_checksums(conn)
    except sqlite3.Error:
        conn.close()
        raise
    if applied:
        _log.info("Applied database migrations: %s", ", ".join(str(mid) for mid, _ in applied))
    for mid, _expected, _found in drifted:
        _log.warning("Migration %d changed after it was applied to %s", mid, path)
    return conn


def delete_database(path: str | os.PathLike[str]) -> None:
    """Delete the database file and its journal side files, if present."""
    base = Path(path)
    for candidate in [base, *(base.with_name(base.name + s) for s in _SIDE_FILE_SUFFIXES)]:
        try:
            candidate.unlink()
        except FileNotFoundError:
            continue
    _log.info("Deleted database %s", base)
