"""
Local database configuration and session management.

The client keeps its auth tokens and the current cart in a small SQLite store.
"""

import logging
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import settings

logger = logging.getLogger("nidus.database")

# Create SQLAlchemy Base
Base = declarative_base()


def create_local_engine(url: str = None, echo: bool = None) -> Engine:
    """Create an engine for the local store; in-memory SQLite shares one connection"""
    url = url or settings.local_db_url
    echo = settings.db_echo if echo is None else echo
    kwargs = {}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
    return create_engine(url, echo=echo, future=True, **kwargs)


# Create engine
engine = create_local_engine()

# Create session factory
SessionLocal = sessionmaker(bind=engine, future=True, expire_on_commit=False)


def init_database(bind: Engine = None):
    """Initialize database schema"""
    # Model modules must be imported so their tables are registered on Base.
    import domain.models.local_store  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
    logger.info("Local store tables created")


def get_db_session():
    """Get database session (for dependency injection)"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
