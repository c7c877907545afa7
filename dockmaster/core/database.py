"""Database engine and session factory (SQLite file by default)."""

from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from dockmaster.models import Base

_IN_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create the engine for database_url. Nothing is opened until first use.

    SQLite connections are shared across the request thread pool, so the
    same-thread check is disabled; an in-memory URL gets a single static
    connection so every session sees the same database.
    """
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True, echo=echo)

    connect_args = {"check_same_thread": False}
    if database_url in _IN_MEMORY_URLS:
        return create_engine(
            database_url,
            connect_args=connect_args,
            poolclass=StaticPool,
            echo=echo,
        )
    return create_engine(database_url, connect_args=connect_args, echo=echo)


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def ensure_sqlite_directory(engine: Engine) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    if engine.url.get_backend_name() == "sqlite" and engine.url.database not in (None, "", ":memory:"):
        Path(engine.url.database).parent.mkdir(parents=True, exist_ok=True)


def create_tables(engine: Engine) -> None:
    """Create any missing tables. Alembic manages later schema changes."""
    ensure_sqlite_directory(engine)
    Base.metadata.create_all(bind=engine)
