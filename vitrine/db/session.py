"""Database engine helpers."""

from __future__ import annotations

import os

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine


DEFAULT_DATABASE_URL = "postgresql://user:pass@db:5432/vitrine"


def database_url() -> str:
    return os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL)


def create_engine_from_env() -> Engine:
    """Create an engine using the DATABASE_URL environment variable."""
    return create_engine(database_url(), pool_pre_ping=True, future=True)
