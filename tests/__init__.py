"""Test package. Environment is pinned before any app module reads settings."""

import os

# Cheap bcrypt cost and a throwaway SQLite URL so importing app.core.database never
# needs a running Postgres.
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("APP_ENV", "dev")
