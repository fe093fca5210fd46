from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from typing import Any, Generator, Optional
from contextlib import contextmanager
from pathlib import Path
import logging

from .base import KeyValueStore
from .models import Base, DocumentModel

logger = logging.getLogger(__name__)


class SqlKeyValueStore(KeyValueStore):
    """
    SQLAlchemy-backed document store.

    Works against SQLite (default, file or in-memory) and Postgres.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self._engine = None
        self._session_factory = None

    def _engine_kwargs(self) -> dict:
        if not self.url.startswith("sqlite"):
            return {"pool_pre_ping": True}
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in self.url or self.url == "sqlite://":
            # Single shared connection, otherwise each session sees an empty database
            kwargs["poolclass"] = StaticPool
        return kwargs

    def _ensure_sqlite_directory(self) -> None:
        prefix = "sqlite:///"
        if not self.url.startswith(prefix) or ":memory:" in self.url:
            return
        Path(self.url[len(prefix):]).parent.mkdir(parents=True, exist_ok=True)

    def connect(self) -> None:
        if self._engine:
            return

        try:
            logger.info(f"Connecting to document store at {self.url.split('@')[-1]}")
            self._ensure_sqlite_directory()

            self._engine = create_engine(self.url, echo=self.echo, **self._engine_kwargs())
            Base.metadata.create_all(self._engine)

            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
            logger.info("Document store ready.")

        except Exception as e:
            logger.error(f"Failed to connect to document store: {e}")
            raise

    def close(self) -> None:
        if self._engine:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Document store closed.")

    def health_check(self) -> bool:
        if not self._engine:
            return False
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception:
            logger.exception("document store unhealthy")
            return False

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """
        Provide a transactional scope around a series of operations.
        """
        if not self._session_factory:
            raise ConnectionError("Document store is not connected. Call connect() first.")

        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # --- KeyValueStore ---

    def load(self, key: str) -> Optional[Any]:
        with self.get_session() as session:
            doc = session.get(DocumentModel, key)
            return doc.value if doc else None

    def save(self, key: str, value: Any) -> None:
        with self.get_session() as session:
            doc = session.get(DocumentModel, key)
            if doc is None:
                session.add(DocumentModel(key=key, value=value, version=1))
            else:
                doc.value = value
                doc.version += 1

    def delete(self, key: str) -> bool:
        with self.get_session() as session:
            doc = session.get(DocumentModel, key)
            if not doc:
                return False
            session.delete(doc)
            return True
