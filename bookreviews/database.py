"""
Database Configuration Module

SQLAlchemy 2.0 setup for the Book Reviews API.

Session Management Pattern
==========================
We use the "session per request" pattern:
1. Request arrives → create a new session
2. Services use that session and commit once per mutating operation
3. Services roll back when the store rejects a write (constraint violation)
4. Session is closed when the request ends

Uniqueness guarantees (one active review per user and book, one like per
user and review) live in the database as constraints. The services rely on
the store rejecting duplicate inserts, not on in-process locks.
"""

from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from bookreviews.config import get_settings

settings = get_settings()


# =============================================================================
# Database Engine
# =============================================================================
# - pool_size / max_overflow: only meaningful for server databases
# - pool_pre_ping: test connection health before using it
# - echo: log all SQL statements in debug mode

def _engine_options() -> dict:
    if settings.is_sqlite:
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": True,
    }


engine = create_engine(
    settings.database_url,
    echo=settings.debug,
    **_engine_options(),
)


# =============================================================================
# Session Factory
# =============================================================================
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


# =============================================================================
# Base Model Class
# =============================================================================
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Alembic uses Base.metadata to discover tables for migrations.
    """
    pass


# =============================================================================
# Dependency Injection
# =============================================================================
def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Yields a new session and closes it when the request ends, even if the
    handler raised.

    Usage in Routes:
        @router.get("/reviews/{review_id}")
        def read_review(review_id: int, db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
