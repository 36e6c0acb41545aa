"""Migration 0002: Add chat_read_messages table.

Stores how many chat lines of a game the user has already seen, used to
show the unread badge on the chat button.
"""

from __future__ import annotations

import sqlite3

MIGRATION_ID = 2
description = "Add chat_read_messages table"

DDL = """
CREATE TABLE IF NOT EXISTS chat_read_messages (
    id TEXT PRIMARY KEY,
    nb_read INTEGER NOT NULL DEFAULT 0
);
""".strip()


def upgrade(conn: sqlite3.Connection) -> None:
    conn.execute(DDL)
