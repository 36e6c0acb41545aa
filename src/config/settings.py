"""Global configuration and constants for the chess client core."""

from __future__ import annotations

import os
from typing import Final

APP_NAME: Final = "chess-client"
USER_AGENT_PRODUCT: Final = "ChessClient"

HOST: Final = os.environ.get("CHESS_CLIENT_HOST", "https://lichess.org").rstrip("/")
ACCOUNT_PATH: Final = "/api/account"
ACCOUNT_PREFERENCES_PATH: Final = "/api/account/preferences"
SESSION_CHECK_TIMEOUT: Final = 3.0  # seconds
DEFAULT_TIMEOUT: Final = 10.0  # seconds

DATA_DIR: Final = os.environ.get("CHESS_CLIENT_DATA_DIR", "data")
DATABASE_FILE_NAME: Final = "chess_client.db"
SHARED_PREFS_FILE_NAME: Final = "shared_prefs.json"
SECURE_STORAGE_FILE_NAME: Final = "secure_storage.enc"
SECURE_STORAGE_KEY_FILE_NAME: Final = "secure_storage.key"
SECURE_STORAGE_KEY_ENV: Final = "CHESS_CLIENT_STORAGE_KEY"
SOUNDS_DIR: Final = os.environ.get("CHESS_CLIENT_SOUNDS_DIR", os.path.join("assets", "sounds"))

# Shared preferences keys
INSTALLED_VERSION_KEY: Final = "installed_version"
FIRST_RUN_KEY: Final = "first_run"

# Secure storage keys
SRI_STORAGE_KEY: Final = "socket_random_identifier"
SESSION_STORAGE_KEY: Final = "session"
SRI_LENGTH: Final = 12

# 0.7.0 changed every local id; installs upgrading straight into it start from scratch.
LEGACY_WIPE_VERSION: Final = "0.7.0"

# Used to sign bearer tokens sent with the user agent; override per build.
CLIENT_SECRET: Final = os.environ.get("CHESS_CLIENT_SECRET", "chess-client-dev")

DEFAULT_PHYSICAL_MEMORY_MB: Final = 256.0
ENGINE_MEMORY_DIVISOR: Final = 10
