from __future__ import annotations
import sqlite3
from db.schema import apply_schema
from db.migration_manager import apply_pending_migrations, verify_migration_checksums


def _migrated_conn():
    conn = sqlite3.connect(":memory:")
    conn.execute("PRAGMA foreign_keys=ON")
    apply_schema(conn)
    apply_pending_migrations(conn)
    return conn


def test_checksums_recorded_after_apply():
    conn = _migrated_conn()
    count = conn.execute("SELECT COUNT(*) FROM migration_checksums").fetchone()[0]
    assert count == 2
    assert verify_migration_checksums(conn) == []


def test_checksum_mismatch_detection(monkeypatch):
    conn = _migrated_conn()
    import db.migrations.m0001_game_storage as m0001

    def fake_upgrade(conn):  # pragma: no cover - executed only for checksum hashing
        # altered body
        pass

    monkeypatch.setattr(m0001, "upgrade", fake_upgrade)
    mismatches = verify_migration_checksums(conn)
    assert [mid for (mid, _expected, _found) in mismatches] == [m0001.MIGRATION_ID]
