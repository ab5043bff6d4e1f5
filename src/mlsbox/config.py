"""Configuration loaded from environment variables."""

import os


# Databases
SERVER_DB_URL = os.getenv("MLSBOX_SERVER_DB_URL", "sqlite+aiosqlite:///db/server.db")
CLIENT_DB_URL = os.getenv("MLSBOX_CLIENT_DB_URL", "sqlite+aiosqlite:///db/client.db")

# SQLite durability, one of OFF | NORMAL | FULL | EXTRA
SERVER_SYNCHRONOUS = os.getenv("MLSBOX_SERVER_SYNCHRONOUS", "EXTRA").upper()
CLIENT_SYNCHRONOUS = os.getenv("MLSBOX_CLIENT_SYNCHRONOUS", "NORMAL").upper()

DB_ECHO = os.getenv("MLSBOX_DB_ECHO", "false").lower() == "true"
