"""
Database handles and the connection manager
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar, Union

import firebase_admin
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.core.errors import ConfigurationError, DomainError, InfrastructureError

logger = logging.getLogger(__name__)

Base = declarative_base()

T = TypeVar("T")


class SqlDatabase:
    """Connection handle for a SQLAlchemy engine.

    ORM work is blocking, so ``run`` executes it on a worker thread with its
    own session and maps driver errors to ``InfrastructureError``.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    async def run(self, work: Callable[..., T], *args: Any) -> T:
        return await asyncio.to_thread(self._run_sync, work, *args)

    def _run_sync(self, work: Callable[..., T], *args: Any) -> T:
        with self.session_factory() as session:
            try:
                return work(session, *args)
            except DomainError:
                session.rollback()
                raise
            except SQLAlchemyError as e:
                session.rollback()
                logger.error(f"Database error: {e}")
                raise InfrastructureError(f"Database operation failed: {e}") from e

    async def close(self) -> None:
        await asyncio.to_thread(self.engine.dispose)


class FirestoreDatabase:
    """Connection handle for a firebase-admin app and its async Firestore client"""

    def __init__(self, app: Any, client: Any):
        self.app = app
        self.client = client

    async def close(self) -> None:
        # Closes the gRPC channel; the async client may hand back a coroutine
        closing = self.client.close()
        if inspect.isawaitable(closing):
            await closing
        firebase_admin.delete_app(self.app)


Database = Union[SqlDatabase, FirestoreDatabase]
Connector = Callable[[Settings], Awaitable[Database]]


def create_sql_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine; SQLite connections may be shared across worker threads."""
    kwargs: dict = {"echo": echo}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **kwargs)


def _open_sql(settings: Settings) -> SqlDatabase:
    # Import models so that they register with Base.metadata
    import app.models  # noqa: F401

    engine = create_sql_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    try:
        Base.metadata.create_all(bind=engine)
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception:
        engine.dispose()
        raise
    return SqlDatabase(engine)


async def open_database(settings: Settings) -> Database:
    """Open the backend selected by ``settings``"""
    if settings.USE_FIREBASE:
        from app.services.firebase_client import open_firestore

        app, client = await asyncio.to_thread(open_firestore, settings)
        return FirestoreDatabase(app, client)
    return await asyncio.to_thread(_open_sql, settings)


class ConnectionManager:
    """Owns the single live database handle for the application.

    ``connect`` returns the cached handle when there is one. Otherwise the
    first caller starts a connection attempt and every concurrent caller
    awaits that same attempt. A failed attempt clears the pending marker so
    the next call retries.
    """

    def __init__(self, settings: Settings, connector: Optional[Connector] = None):
        self.settings = settings
        self._connector = connector or open_database
        self._handle: Optional[Database] = None
        self._pending: Optional[asyncio.Future] = None

    @property
    def is_connected(self) -> bool:
        return self._handle is not None

    def _validate_settings(self) -> None:
        if self.settings.USE_FIREBASE:
            if not self.settings.has_firebase_credentials():
                raise ConfigurationError(
                    "Firebase credentials not provided. Set FIREBASE_CREDENTIALS_FILE, "
                    "FIREBASE_CREDENTIALS_JSON, or FIREBASE_CREDENTIALS_B64"
                )
        elif not self.settings.DATABASE_URL:
            raise ConfigurationError(
                "Please define the DATABASE_URL environment variable inside .env"
            )

    async def connect(self) -> Database:
        if self._handle is not None:
            return self._handle

        if self._pending is None:
            self._validate_settings()
            self._pending = asyncio.ensure_future(self._establish())

        return await asyncio.shield(self._pending)

    async def _establish(self) -> Database:
        try:
            handle = await self._connector(self.settings)
        except DomainError:
            self._pending = None
            raise
        except Exception as e:
            self._pending = None
            logger.error(f"Database connection error: {e}")
            raise InfrastructureError(f"Failed to connect to database: {e}") from e

        self._handle = handle
        self._pending = None
        logger.info("Database connected successfully")
        return handle

    async def disconnect(self) -> None:
        if self._handle is None:
            return
        handle = self._handle
        self._handle = None
        self._pending = None
        await handle.close()
        logger.info("Database disconnected")

    # Pool-style aliases used by the application lifespan
    acquire = connect
    release = disconnect
