"""Engine and session factory for the application database."""
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from world_impact.db.models import Base

_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def create_engine_from_url(url: str, echo: bool = False) -> Engine:
    """Create an engine; SQLite connections are shared across worker threads."""
    kwargs = {"echo": echo}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in _MEMORY_URLS:
            kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


class Database:
    """Owns the engine and session factory. One instance per application."""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine = create_engine_from_url(url, echo=echo)
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=True,
            expire_on_commit=False,
        )

    def create_all(self) -> None:
        """Create all tables that do not exist yet."""
        Base.metadata.create_all(self.engine)

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """Session context: commit on success, rollback + re-raise on exception."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
