"""Database engine and session factory construction."""

from datetime import datetime
from typing import Optional

from sqlalchemy import create_engine, Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from papertrade.core.timezone import to_eastern

Base = declarative_base()


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine for ``database_url``.

    In-memory SQLite gets a ``StaticPool`` so every session shares the
    one connection that holds the schema.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False, "timeout": 30}}
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, echo=echo, **kwargs)
    return create_engine(database_url, echo=echo, pool_pre_ping=True)


def build_session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to ``engine``."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


def init_db(engine: Engine) -> None:
    """Create tables if they do not exist."""
    from papertrade.repositories.sqlalchemy import orm_models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def to_db_datetime(dt: Optional[datetime]) -> Optional[datetime]:
    """Store timestamps as naive US/Eastern wall-clock time."""
    if dt is None:
        return None
    return to_eastern(dt).replace(tzinfo=None)


def from_db_datetime(dt: Optional[datetime]) -> Optional[datetime]:
    if dt is None:
        return None
    return to_eastern(dt)
