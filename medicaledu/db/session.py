# medicaledu/db/session.py

from __future__ import annotations

from contextlib import contextmanager
from typing import Generator

import structlog
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from medicaledu.core.domain.entities import Base
from medicaledu.db.audit import register_audit_listener
from medicaledu.shared.config import settings

logger = structlog.get_logger()

# ---------------------------------------------------------------------------
# Engine / Session factory
# ---------------------------------------------------------------------------


def build_engine(database_url: str = settings.DATABASE_URL, **kwargs) -> Engine:
    # SQLite needs a special flag when used in a multi-threaded web app.
    connect_args: dict[str, object] = {}
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}

    return create_engine(
        database_url,
        echo=settings.DATABASE_ECHO,
        pool_pre_ping=not database_url.startswith("sqlite"),
        connect_args=connect_args,
        **kwargs,
    )


def build_session_factory(bind: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=bind,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        class_=Session,
    )


engine = build_engine()
SessionLocal = build_session_factory(engine)

register_audit_listener(Session)


def init_db(bind: Engine = engine) -> None:
    """Create every mapped table that does not exist yet."""
    Base.metadata.create_all(bind=bind)
    logger.info("database_initialized", url=bind.url.render_as_string(hide_password=True))


# ---------------------------------------------------------------------------
# FastAPI dependency / helper
# ---------------------------------------------------------------------------


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI-style dependency that yields a database session and ensures it
    is closed afterwards. Commits happen in the transaction pipeline step.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def db_session() -> Generator[Session, None, None]:
    """
    Context manager for non-FastAPI usage, e.g. scripts or background jobs.

        from medicaledu.db.session import db_session

        with db_session() as db:
            ...
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


__all__ = ["engine", "SessionLocal", "build_engine", "build_session_factory", "init_db", "get_db", "db_session"]
