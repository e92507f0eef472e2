"""Database handle and the process-wide connection manager.

The manager is created once per application and stored on ``app.state``;
route handlers receive it through the ``get_connection_manager`` dependency.

Lifecycle: uninitialized -> connecting -> ready. A failed connection attempt
goes back to uninitialized so the next ``acquire()`` retries from scratch.
"""

import enum
import logging
import threading
from concurrent.futures import Future
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Generator

from fastapi import Request
from sqlalchemy import Engine, create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from devevent.core import config
from devevent.core.errors import ConnectivityError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


@dataclass(frozen=True)
class DatabaseConfig:
    url: str = config.DATABASE_URL
    connect_timeout: float = config.DB_CONNECT_TIMEOUT
    pool_size: int = config.DB_POOL_SIZE

    def engine_args(self) -> dict:
        url = make_url(self.url)
        if url.get_backend_name() == "sqlite":
            args: dict = {
                "connect_args": {
                    "check_same_thread": False,
                    "timeout": self.connect_timeout,
                },
            }
            if url.database in (None, "", ":memory:"):
                args["poolclass"] = StaticPool
            else:
                args["pool_size"] = self.pool_size
            return args

        return {
            "pool_size": self.pool_size,
            "pool_timeout": self.connect_timeout,
            "pool_pre_ping": True,
            "connect_args": {"connect_timeout": max(1, int(self.connect_timeout))},
        }


class Database:
    """A ready-to-use store handle: an engine plus its session factory."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._session_factory = sessionmaker(
            bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
        )

    @classmethod
    def connect(cls, db_config: DatabaseConfig) -> "Database":
        """Create the engine, verify the server answers and ensure the schema."""
        engine = None
        try:
            engine = create_engine(db_config.url, **db_config.engine_args())
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            # Import models so that they register with Base.metadata
            from devevent.models import bookings, events  # noqa: F401

            Base.metadata.create_all(bind=engine)
        except SQLAlchemyError as e:
            if engine is not None:
                engine.dispose()
            raise ConnectivityError(f"Could not connect to the database: {e}") from e
        return cls(engine)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        db = self._session_factory()
        try:
            yield db
        finally:
            db.close()

    def dispose(self) -> None:
        self.engine.dispose()


class ConnectionState(str, enum.Enum):
    UNINITIALIZED = "uninitialized"
    CONNECTING = "connecting"
    READY = "ready"


class ConnectionManager:
    """Single-flight, lazily connected holder of the shared ``Database``."""

    def __init__(
        self,
        db_config: DatabaseConfig | None = None,
        connector: Callable[[DatabaseConfig], Database] = Database.connect,
    ) -> None:
        self.config = db_config or DatabaseConfig()
        self._connector = connector
        self._lock = threading.Lock()
        self._database: Database | None = None
        self._pending: Future | None = None

    @property
    def state(self) -> ConnectionState:
        if self._database is not None:
            return ConnectionState.READY
        if self._pending is not None:
            return ConnectionState.CONNECTING
        return ConnectionState.UNINITIALIZED

    def acquire(self) -> Database:
        """Return the shared handle, connecting on first use.

        Callers arriving while a connection attempt is in flight wait on that
        attempt. A failure is raised to all of them and clears the attempt.

        Raises:
            ConnectivityError: If the store cannot be reached.
        """
        database = self._database
        if database is not None:
            return database

        with self._lock:
            if self._database is not None:
                return self._database
            owner = self._pending is None
            if owner:
                self._pending = Future()
            pending = self._pending

        if owner:
            self._connect(pending)
        return pending.result()

    def _connect(self, pending: Future) -> None:
        logger.info("Connecting to database")
        try:
            database = self._connector(self.config)
        except Exception as e:
            error = e if isinstance(e, ConnectivityError) else ConnectivityError(str(e))
            logger.error(f"Database connection failed: {error}")
            with self._lock:
                self._pending = None
            pending.set_exception(error)
            return

        with self._lock:
            self._database = database
            self._pending = None
        logger.info("Database connection established")
        pending.set_result(database)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        with self.acquire().session() as db:
            yield db

    def dispose(self) -> None:
        with self._lock:
            database, self._database = self._database, None
        if database is not None:
            database.dispose()
            logger.info("Database connection pool disposed")


def get_connection_manager(request: Request) -> ConnectionManager:
    return request.app.state.connections
