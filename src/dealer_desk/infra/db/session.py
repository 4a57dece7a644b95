from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from dealer_desk.infra.db.config import PoolSettings, database_url

logger = logging.getLogger(__name__)

# Created on first use so importing the app never needs DATABASE_URL
_engine: Engine | None = None
_session_local: sessionmaker[Session] | None = None


def get_engine() -> Engine:
    """
    Get or create the database engine.

    Pool sizing comes from PoolSettings.from_env(); pool_pre_ping drops dead
    connections before checkout. Total max connections = pool_size + max_overflow.
    """
    global _engine
    if _engine is None:
        settings = PoolSettings.from_env()
        _engine = create_engine(
            database_url(),
            pool_size=settings.pool_size,
            max_overflow=settings.max_overflow,
            pool_pre_ping=True,
            pool_recycle=settings.pool_recycle,
        )
        logger.info(
            "Database engine created",
            extra={"pool_size": settings.pool_size, "max_overflow": settings.max_overflow},
        )
    return _engine


def get_session_local() -> sessionmaker[Session]:
    global _session_local
    if _session_local is None:
        _session_local = sessionmaker(
            bind=get_engine(),
            class_=Session,
            expire_on_commit=False,
        )
    return _session_local


@contextmanager
def get_session() -> Iterator[Session]:
    """Session scoped to one unit of work: commit on success, rollback on error."""
    session = get_session_local()()

    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def reset_engine() -> None:
    """Dispose the pooled engine (tests, process forks)."""
    global _engine, _session_local
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_local = None
