from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Generator, Optional
from sqlalchemy.orm import Session, sessionmaker

class StorageAdapter(ABC):
    """
    Base class for relational storage adapters.

    Subclasses own the engine; this class provides the transactional
    session scope on top of whatever session factory connect() installs.
    """

    _session_factory: Optional[sessionmaker] = None

    @abstractmethod
    def connect(self) -> None:
        """Create the engine and session factory."""

    @abstractmethod
    def close(self) -> None:
        """Dispose of the engine."""

    @abstractmethod
    def health_check(self) -> bool:
        """True when the backend answers a trivial query."""

    @abstractmethod
    def create_schema(self) -> None:
        """Create missing tables."""

    @property
    def is_connected(self) -> bool:
        return self._session_factory is not None

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """
        Provide a transactional scope around a series of operations.

        Commits on success, rolls back on any exception.
        """
        if not self._session_factory:
            raise ConnectionError("Database is not connected. Call connect() first.")

        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
