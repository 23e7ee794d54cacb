"""
Domain models package - SQLAlchemy ORM models of the local store.
"""

from domain.models.database import (
    Base,
    engine,
    SessionLocal,
    create_local_engine,
    init_database,
    get_db_session,
)
from domain.models.local_store import AuthToken, StoredCart

__all__ = [
    "Base",
    "engine",
    "SessionLocal",
    "create_local_engine",
    "init_database",
    "get_db_session",
    "AuthToken",
    "StoredCart",
]
