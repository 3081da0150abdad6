"""Test environment: in-memory SQLite and cheap bcrypt, set before warden is imported."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("APP_ENV", "dev")
