"""Database utilities for SQLAlchemy 2.x.

Provides engine/session factories and a convenient session scope context
manager for applications (and tests) wiring model aspects to a database.
PostgreSQL (via psycopg) and SQLite are supported.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator

from sqlalchemy import MetaData, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from searchable.exceptions import ConfigError


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


def get_engine(url: str, *, echo: bool = False) -> Engine:
    """Create a SQLAlchemy engine.

    Parameters
    ----------
    url:
        SQLAlchemy URL. "postgresql://..." is normalized to use the psycopg
        driver; "sqlite://..." URLs are used as-is.
    echo:
        If True, SQL statements are logged (useful for debugging).
    """
    if url.startswith("sqlite"):
        kwargs: Dict[str, Any] = {}
        if _is_memory_sqlite(url):
            # One shared connection, otherwise every connection sees an empty database
            kwargs = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
        return create_engine(url, echo=echo, **kwargs)

    if url.startswith("postgresql://"):
        url = "postgresql+psycopg://" + url[len("postgresql://") :]
    elif not url.startswith("postgresql+psycopg://"):
        raise ConfigError(
            "Unsupported database URL. Expected 'postgresql+psycopg://' or 'sqlite://'."
        )

    # Enable pre-ping to gracefully handle stale/disconnected connections
    return create_engine(url, echo=echo, pool_pre_ping=True)


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a sessionmaker bound to the provided engine.

    ``expire_on_commit`` is off so search results stay readable after the
    session that fetched them is gone.
    """
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations.

    Commits on success, rolls back on error, and always closes the session.
    """
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Engine, metadata: MetaData) -> None:
    """Create the tables of ``metadata`` if they do not exist."""
    metadata.create_all(bind=engine)
