# vault_ledger/database/connection.py

from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional
from urllib.parse import urlsplit

from sqlalchemy import create_engine, Engine, text
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import QueuePool, StaticPool

from ..core.logging import LedgerLogger, log_with_context, INFO, DEBUG, ERROR
from ..types.configs.config import DatabaseConfig
from .base import LedgerBase
from . import tables  # noqa: F401  registers every table on LedgerBase.metadata


class DatabaseManager:
    """
    Engine and session lifecycle for the ledger database.

    Sessions never autoflush and never expire on commit: entities read for
    one event stay usable after that event's transaction closes.
    """

    def __init__(self, config: DatabaseConfig):
        if not config:
            raise ValueError("DatabaseConfig is required")

        self.config = config
        self.logger = LedgerLogger.get_logger('database.manager')
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

        log_with_context(self.logger, INFO, "DatabaseManager created",
                         backend=self.backend,
                         db_host=self.host)

    @property
    def backend(self) -> str:
        return urlsplit(self.config.url).scheme.split('+')[0] or "unknown"

    @property
    def host(self) -> str:
        return urlsplit(self.config.url).hostname or "local"

    @property
    def is_sqlite(self) -> bool:
        return self.backend == "sqlite"

    def _engine_options(self) -> Dict[str, Any]:
        if self.is_sqlite:
            # A single shared connection keeps in-memory databases alive across sessions
            return {
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            }
        return {
            "poolclass": QueuePool,
            "pool_size": self.config.pool_size,
            "max_overflow": self.config.max_overflow,
            "pool_timeout": 30,
            "pool_recycle": 3600,
        }

    def initialize(self) -> None:
        if self._engine is not None:
            self.logger.warning("Database already initialized")
            return

        options = self._engine_options()
        try:
            engine = create_engine(self.config.url, echo=self.config.echo, **options)
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception as e:
            log_with_context(self.logger, ERROR, "Database connection failed",
                             backend=self.backend,
                             error=str(e),
                             exception_type=type(e).__name__)
            raise

        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        log_with_context(self.logger, INFO, "Database ready",
                         backend=self.backend,
                         pool_class=options["poolclass"].__name__)

    def create_tables(self) -> None:
        LedgerBase.metadata.create_all(self.engine)
        log_with_context(self.logger, INFO, "Ledger tables created",
                         table_count=len(LedgerBase.metadata.tables))

    def drop_tables(self) -> None:
        LedgerBase.metadata.drop_all(self.engine)
        self.logger.info("Ledger tables dropped")

    def shutdown(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._session_factory = None
        self.logger.info("Database connections closed")

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database not initialized. Call initialize() first.")
        return self._engine

    @property
    def session_factory(self) -> sessionmaker:
        if self._session_factory is None:
            raise RuntimeError("Database not initialized. Call initialize() first.")
        return self._session_factory

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Read session; anything left pending is rolled back on error"""
        session = self.session_factory()
        try:
            yield session
        except Exception as e:
            log_with_context(self.logger, DEBUG, "Rolling back session",
                             error=str(e),
                             exception_type=type(e).__name__)
            session.rollback()
            raise
        finally:
            session.close()

    @contextmanager
    def get_transaction(self) -> Generator[Session, None, None]:
        """Session committed on a clean exit, rolled back otherwise"""
        with self.get_session() as session:
            yield session
            session.commit()
