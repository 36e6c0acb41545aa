"""SQLite schema definitions for the local chess client cache.

Defines the baseline tables for offline puzzles, stored games and chat read
markers. Payloads are JSON documents in ``data`` columns; the rows only carry
the keys needed for lookup and eviction.

Design Principles:
 - Singular table names except where kept for storage compatibility (``puzzle_batchs``)
 - Timestamps stored as ISO-8601 text (UTC)
 - Later additions go through ``db.migrations``
"""

from __future__ import annotations

import sqlite3

SCHEMA_VERSION = 1

# DDL statements (ordered for FK dependencies)
DDL: list[str] = [
    """
    CREATE TABLE IF NOT EXISTS schema_meta (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL
    );
    """.strip(),
    """
    CREATE TABLE IF NOT EXISTS puzzle_batchs (
        user_id TEXT NOT NULL,
        angle TEXT NOT NULL,
        data TEXT NOT NULL,
        last_modified TEXT NOT NULL,
        PRIMARY KEY (user_id, angle)
    );
    """.strip(),
    """
    CREATE TABLE IF NOT EXISTS puzzle (
        puzzle_id TEXT PRIMARY KEY,
        data TEXT NOT NULL,
        last_modified TEXT NOT NULL
    );
    """.strip(),
    """
    CREATE TABLE IF NOT EXISTS correspondence_game (
        game_id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        data TEXT NOT NULL,
        last_modified TEXT NOT NULL
    );
    """.strip(),
]


def apply_schema(conn: sqlite3.Connection) -> None:
    cur = conn.cursor()
    for stmt in DDL:
        cur.execute(stmt)
    cur.execute(
        "INSERT OR REPLACE INTO schema_meta(key, value) VALUES ('schema_version', ?)",
        (str(SCHEMA_VERSION),),
    )
    conn.commit()
