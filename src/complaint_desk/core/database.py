"""Database connection and session management.

This module handles the SQLite connection backing local storage using
SQLAlchemy.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from complaint_desk.config import DATA_DIR, STORAGE_DATABASE_URL
from complaint_desk.models.base import Base
# Import models to ensure they are registered with Base.metadata
from complaint_desk.models import storage_record  # noqa: F401

IN_MEMORY_URL = "sqlite:///:memory:"


def create_storage_engine(url: str = STORAGE_DATABASE_URL) -> Engine:
    """Create the engine for the local storage database.

    Args:
        url: SQLAlchemy database URL.

    Returns:
        Engine with tables created.
    """
    if url == IN_MEMORY_URL:
        # One shared connection, otherwise each thread sees an empty database
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        # Ensure data directory exists
        DATA_DIR.mkdir(parents=True, exist_ok=True)
        engine = create_engine(url, connect_args={"check_same_thread": False})
    init_db(engine)
    return engine


def init_db(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)


def create_session_factory(engine: Engine) -> sessionmaker:
    """Build a session factory bound to the given engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
