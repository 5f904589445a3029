"""SQLAlchemy async database setup."""

from collections.abc import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from cableindex.config import get_settings


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


# Engine and session factory (initialized on startup)
_engine = None
_async_session_factory = None


def configure_sqlite(engine: AsyncEngine) -> None:
    """Make SQLite transactions take the write lock when they begin.

    SQLite has no ``SELECT ... FOR UPDATE``. Emitting ``BEGIN IMMEDIATE``
    for every transaction serializes writers on the file instead, so a
    read-then-write sequence (counter increment, usage count followed by a
    delete) cannot interleave with another writer.
    """
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # Stop the driver from issuing its own deferred BEGIN.
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(url: str, echo: bool = False, busy_timeout: float = 30.0) -> AsyncEngine:
    """Create an async engine with the store-specific transaction setup."""
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["timeout"] = busy_timeout

    engine = create_async_engine(url, echo=echo, connect_args=connect_args)
    configure_sqlite(engine)
    return engine


def get_engine():
    """Get the database engine, creating it if necessary."""
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = build_engine(
            settings.database.url,
            echo=settings.database.echo or settings.server.debug,
            busy_timeout=settings.database.busy_timeout,
        )
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the session factory, creating it if necessary."""
    global _async_session_factory
    if _async_session_factory is None:
        engine = get_engine()
        _async_session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _async_session_factory


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting database sessions."""
    session_factory = get_session_factory()
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def is_unique_violation(error: IntegrityError) -> bool:
    """Whether an IntegrityError comes from a unique constraint.

    PostgreSQL drivers report SQLSTATE 23505; SQLite only says so in the
    message. Foreign key and NOT NULL failures return False.
    """
    orig = error.orig
    if getattr(orig, "sqlstate", None) == "23505" or getattr(orig, "pgcode", None) == "23505":
        return True
    message = str(orig).lower()
    return "unique" in message or "duplicate" in message


async def init_db() -> None:
    """Initialize database tables."""
    # Register every mapped table before create_all.
    import cableindex.models  # noqa: F401

    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close database connections."""
    global _engine, _async_session_factory
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _async_session_factory = None
