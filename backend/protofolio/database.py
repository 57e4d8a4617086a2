"""
Protofolio Backend — Database Context and Session Management
==============================================================

What:  The `Database` context object (async engine + session factory), the ORM
       base class, and the FastAPI session dependency.
Why:   Centralizes all database connection logic in one place and gives the
       store connection an explicit lifecycle instead of a module global.
How:   `Database` is constructed once by the application lifespan, probed for
       connectivity (fail fast), stored on `app.state.database`, handed to
       requests through `get_db_session`, and disposed on shutdown.
Who:   The lifespan handler, the session dependency, the health route and
       the diagnostics CLI.

Connection Pooling Strategy:
    PostgreSQL (asyncpg):  pooled with pre-ping and hourly recycle.
    SQLite (aiosqlite):    SQLAlchemy's default pool for file databases;
                           pool sizing options do not apply.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from protofolio.config import Settings
from protofolio.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, which Alembic reads for migrations and
    `Database.connect()` uses when `auto_create_schema` is enabled.
    """
    pass


class Database:
    """
    Lifecycle-scoped owner of the engine and session factory.

    There is exactly one per running application. Nothing imports it as a
    global; it travels by reference via `app.state.database`.
    """

    def __init__(self, settings: Settings):
        self.url = settings.database_url
        self.auto_create_schema = settings.auto_create_schema

        engine_kwargs = {"echo": settings.log_level == "DEBUG"}
        if not settings.is_sqlite:
            engine_kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )
        self.engine = create_async_engine(settings.database_url, **engine_kwargs)

        if settings.is_sqlite:
            # SQLite leaves foreign key enforcement off unless asked per connection
            @event.listens_for(self.engine.sync_engine, "connect")
            def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

        # expire_on_commit=False: response models are built after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def connect(self) -> None:
        """
        Verify the store is reachable and optionally create the schema.

        Raises:
            DatabaseError: The store could not be reached. The caller (the
            lifespan handler or the diagnostics CLI) lets this propagate so the
            process fails fast instead of serving with a dangling dependency.
        """
        # Register models with Base.metadata before create_all
        from protofolio.models import record  # noqa: F401

        try:
            async with self.engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
                if self.auto_create_schema:
                    await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            logger.error("Record store unreachable: %s", str(e))
            raise DatabaseError(
                message="Could not connect to the record store",
                context={"error_type": type(e).__name__, "error": str(e)},
            ) from e
        logger.info("Connected to record store (schema auto-create=%s)", self.auto_create_schema)

    async def ping(self) -> bool:
        """Lightweight connectivity probe used by the health check."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Record store ping failed: %s", str(e))
            return False

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Unit-of-work scope: commit on success, roll back on any error.

        The connection is returned to the pool even if the body raises.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def dispose(self) -> None:
        """Close all pooled connections (called on shutdown)."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    Example usage in a route:
        @router.get("/records")
        async def list_records(db: AsyncSession = Depends(get_db_session)):
            ...

    Raises:
        Any database exceptions are propagated to the global error handler.
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
