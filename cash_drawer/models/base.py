"""
Database engine, session management, and base model.

This module is the foundation for all database operations.
Every model inherits from Base. Every request gets a session
from get_db().

Nothing here is created at import time. create_app() builds
the engine and session factory from an explicit Settings
object and keeps them on app.state.
"""

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session

from cash_drawer.config import Settings


class Base(DeclarativeBase):
    pass


def build_engine(settings: Settings) -> Engine:
    """
    Create the engine for the configured database.

    pool_pre_ping=True tests connections before using them,
    which handles cases where the database restarted or a
    connection went stale.
    """
    connect_args = {}
    if settings.DATABASE_URL.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(
        settings.DATABASE_URL,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    """
    Session factory bound to an engine.

    autocommit=False means the API layer decides when a unit
    of work is committed. autoflush=False means SQL is only
    sent when a service explicitly flushes.
    """
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
    )


# --- Dependency for FastAPI ---
def get_db(request: Request):
    """
    Provide a database session for a single request.

    The try/finally pattern ensures the session is always
    closed, preventing connection leaks.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
