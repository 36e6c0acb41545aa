"""Migration manager for the local chess client database.

Applies pending migrations in order. The applied level is kept in the
``schema_meta`` table under the key 'migration_version'.

Public API:
- apply_pending_migrations(conn, dry_run=False) -> list[tuple[int,str]] of applied or pending migrations.
- verify_migration_checksums(conn) -> list of drifted migrations.

Every pending migration runs inside one transaction (all-or-nothing). Re-running
when nothing is pending returns an empty list.

Each applied migration's ``upgrade`` source is hashed (SHA256) into
``migration_checksums`` so later edits of an already shipped migration can be
detected.
"""

from __future__ import annotations

import hashlib
import inspect
import sqlite3
from typing import Dict, List, Tuple

from .migrations import discover_migrations

MIGRATION_VERSION_KEY = "migration_version"
CHECKSUM_TABLE_DDL = (
    "CREATE TABLE IF NOT EXISTS migration_checksums ("
    " migration_id INTEGER PRIMARY KEY,"
    " checksum TEXT NOT NULL"
    ")"
)


def get_current_version(conn: sqlite3.Connection) -> int:
    cur = conn.execute("SELECT value FROM schema_meta WHERE key=?", (MIGRATION_VERSION_KEY,))
    row = cur.fetchone()
    if not row:
        return 0
    try:
        return int(row[0])
    except ValueError:
        return 0


def _set_current_version(conn: sqlite3.Connection, version: int) -> None:
    conn.execute(
        "INSERT OR REPLACE INTO schema_meta(key,value) VALUES(?,?)",
        (MIGRATION_VERSION_KEY, str(version)),
    )


def _hash_migration(fn) -> str:
    try:
        src = inspect.getsource(fn)
    except OSError:
        src = repr(fn)
    return hashlib.sha256(src.encode("utf-8")).hexdigest()


def _get_stored_checksums(conn: sqlite3.Connection) -> Dict[int, str]:
    conn.execute(CHECKSUM_TABLE_DDL)
    cur = conn.execute("SELECT migration_id, checksum FROM migration_checksums")
    return {int(r[0]): r[1] for r in cur.fetchall()}


def verify_migration_checksums(conn: sqlite3.Connection) -> List[Tuple[int, str, str]]:
    """Return list of (migration_id, expected_checksum, found_checksum) mismatches.

    Only migrations that were already applied are compared.
    """
    stored = _get_stored_checksums(conn)
    mismatches: List[Tuple[int, str, str]] = []
    for mid, _desc, fn in discover_migrations():
        if mid not in stored:
            continue
        current_hash = _hash_migration(fn)
        if current_hash != stored[mid]:
            mismatches.append((mid, stored[mid], current_hash))
    return mismatches


def apply_pending_migrations(
    conn: sqlite3.Connection, dry_run: bool = False
) -> List[Tuple[int, str]]:
    current = get_current_version(conn)
    pending = [(mid, desc, fn) for (mid, desc, fn) in discover_migrations() if mid > current]
    result_meta: List[Tuple[int, str]] = [(mid, desc) for (mid, desc, _fn) in pending]
    if dry_run or not pending:
        return result_meta
    with conn:
        conn.execute(CHECKSUM_TABLE_DDL)
        for mid, _desc, fn in pending:
            fn(conn)
            conn.execute(
                "INSERT OR REPLACE INTO migration_checksums(migration_id, checksum) VALUES(?,?)",
                (mid, _hash_migration(fn)),
            )
            _set_current_version(conn, mid)
    return result_meta


__all__ = [
    "apply_pending_migrations",
    "get_current_version",
    "verify_migration_checksums",
]
