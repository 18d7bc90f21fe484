"""
db/session.py

SQLAlchemy engine and session factory for the invoice backend.
"""

from __future__ import annotations

import os

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from db.config import resolve_database_url


def _get_int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def create_db_engine() -> Engine:
    """
    Create the pooled PostgreSQL engine.

    Every import worker holds one connection per collaborator call, so the
    default pool is never smaller than INVOICE_IMPORT_MAX_WORKERS.
    """
    workers = max(1, _get_int_env("INVOICE_IMPORT_MAX_WORKERS", 1))

    return create_engine(
        resolve_database_url(),
        pool_pre_ping=True,
        pool_recycle=_get_int_env("DB_POOL_RECYCLE", 1800),
        pool_size=_get_int_env("DB_POOL_SIZE", max(5, workers)),
        max_overflow=_get_int_env("DB_MAX_OVERFLOW", 5),
        pool_timeout=_get_int_env("DB_POOL_TIMEOUT", 30),
    )


_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def get_engine() -> Engine:
    """Return the shared engine, creating it on first call."""
    global _engine
    if _engine is None:
        _engine = create_db_engine()
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    """Return the shared session factory bound to the engine."""
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(
            bind=get_engine(),
            autoflush=False,
            expire_on_commit=False,
        )
    return _session_factory
