"""
Handles database connection setup and session management.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from .core.config import settings


def _engine_options(url: str) -> dict:
    """Builds engine keyword arguments suited to the configured database."""
    if not url.startswith("sqlite"):
        return {}
    # SQLite connections are shared across FastAPI's worker threads
    options = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # An in-memory database only lives as long as its single connection
        options["poolclass"] = StaticPool
    return options


# Create the SQLAlchemy engine, which manages connections to the database
engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

# Create a session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for declarative class definitions (our ORM models)
Base = declarative_base()


def get_db():
    """
    FastAPI dependency to create and manage database sessions per request.

    This function yields a database session to the API endpoint and ensures
    it is always closed afterward, even if an error occurs.

    Yields:
        Session: A new SQLAlchemy database session.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
