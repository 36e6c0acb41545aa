"""Local storage package.

Provides the SQLite database lifecycle (schema, migrations, open/delete),
the plain key-value preference store and the encrypted secure storage used
during application startup.
"""

from .schema import apply_schema  # noqa: F401
from .migration_manager import (  # noqa: F401
    apply_pending_migrations,
    get_current_version,
    verify_migration_checksums,
)
from .database import (  # noqa: F401
    database_path,
    delete_database,
    get_databases_path,
    open_db,
)
from .shared_preferences import SharedPreferences  # noqa: F401
from .secure_storage import SecureStorage  # noqa: F401
from .session_storage import SessionStorage  # noqa: F401

__all__ = [
    "apply_schema",
    "apply_pending_migrations",
    "get_current_version",
    "verify_migration_checksums",
    "database_path",
    "delete_database",
    "get_databases_path",
    "open_db",
    "SharedPreferences",
    "SecureStorage",
    "SessionStorage",
]
