"""Migration 0001: Add game table.

Finished games are cached per user so the game history works offline.
"""

from __future__ import annotations

import sqlite3

MIGRATION_ID = 1
description = "Add game table"

DDL = """
CREATE TABLE IF NOT EXISTS game (
    game_id TEXT NOT NULL,
    user_id TEXT NOT NULL,
    data TEXT NOT NULL,
    last_modified TEXT NOT NULL,
    PRIMARY KEY (game_id, user_id)
);
""".strip()


def upgrade(conn: sqlite3.Connection) -> None:
    conn.execute(DDL)
