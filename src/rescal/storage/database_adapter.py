from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from typing import Any, Dict
from pathlib import Path
import logging

from pydantic_settings import BaseSettings
from .base import StorageAdapter
from .models import Base

logger = logging.getLogger(__name__)

class DatabaseConfig(BaseSettings):
    """Configuration for relational storage."""
    DATABASE_URL: str = "sqlite:///data/rescal.db"
    DATABASE_POOL_SIZE: int = 5
    DATABASE_MAX_OVERFLOW: int = 10
    DATABASE_ECHO: bool = False

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def is_sqlite(self) -> bool:
        return make_url(self.DATABASE_URL).get_backend_name() == "sqlite"

    @property
    def is_memory(self) -> bool:
        return self.is_sqlite and make_url(self.DATABASE_URL).database in (None, "", ":memory:")

class DatabaseAdapter(StorageAdapter):
    """
    SQLAlchemy-based adapter for resources and assignments.

    Works against Postgres in deployment and SQLite locally and in tests.
    """

    def __init__(self, config: DatabaseConfig):
        self.config = config
        self._engine = None
        self._session_factory = None

    def _engine_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {"echo": self.config.DATABASE_ECHO}
        if self.config.is_sqlite:
            # Sessions are opened from worker threads
            options["connect_args"] = {"check_same_thread": False}
            if self.config.is_memory:
                # One shared connection, otherwise every thread sees an empty database
                options["poolclass"] = StaticPool
        else:
            options["pool_size"] = self.config.DATABASE_POOL_SIZE
            options["max_overflow"] = self.config.DATABASE_MAX_OVERFLOW
            options["pool_pre_ping"] = True
        return options

    def connect(self) -> None:
        if self._engine:
            return

        url = make_url(self.config.DATABASE_URL)
        if self.config.is_sqlite and not self.config.is_memory:
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

        try:
            logger.info(f"Connecting to database {url.render_as_string(hide_password=True)}")
            self._engine = create_engine(url, **self._engine_options())
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
            logger.info("Database connection pool established.")
        except Exception as e:
            logger.error(f"Failed to connect to database: {e}")
            raise

    def close(self) -> None:
        if self._engine:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database connection pool closed.")

    def health_check(self) -> bool:
        if not self._engine:
            return False
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception:
            logger.exception("database unhealthy")
            return False

    def create_schema(self) -> None:
        """Create missing tables. Helper for local dev setup and tests."""
        if not self._engine:
            raise ConnectionError("Database is not connected. Call connect() first.")
        Base.metadata.create_all(self._engine)
