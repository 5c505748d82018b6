"""Database connection and session management."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlalchemy import create_engine, make_url
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session as OrmSession
from sqlalchemy.pool import StaticPool

from ..errors import StoreError
from .models import Base

logger = logging.getLogger(__name__)

# ── paths ────────────────────────────────────────────────────────────────────

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "TimerWidget"
DB_PATH = APP_SUPPORT_DIR / "timerwidget.db"


def default_url(db_path: Path | None = None) -> str:
    return f"sqlite:///{db_path or DB_PATH}"


class Database:
    """Owns one SQLAlchemy engine and its session factory.

    Constructed explicitly and handed to whoever needs it; ``open`` on
    process start, ``close`` on shutdown.
    """

    def __init__(self, url: str | None = None) -> None:
        self._url = url or default_url()
        self._engine: Engine | None = None
        self._session_factory: sessionmaker | None = None

    @property
    def url(self) -> str:
        return self._url

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    def open(self) -> None:
        """Create the engine and the schema.  Safe to call twice."""
        if self._engine is not None:
            return
        kwargs: dict = {
            "connect_args": {"check_same_thread": False},
            "echo": False,
        }
        if self._is_memory_url(self._url):
            # One shared connection so every thread sees the same database
            kwargs["poolclass"] = StaticPool
        else:
            db_file = make_url(self._url).database
            if db_file:
                Path(db_file).parent.mkdir(parents=True, exist_ok=True)
        self._engine = create_engine(self._url, **kwargs)
        Base.metadata.create_all(self._engine)
        self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        logger.info("Opened database %s", self._url)

    def close(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Closed database %s", self._url)

    @contextmanager
    def session(self) -> Iterator[OrmSession]:
        """Yield a SQLAlchemy session; commit on success, rollback on error."""
        if self._session_factory is None:
            raise StoreError(f"database {self._url} is not open")
        session: OrmSession = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    @staticmethod
    def _is_memory_url(url: str) -> bool:
        return url in ("sqlite://", "sqlite:///:memory:")
