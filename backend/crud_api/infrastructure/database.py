"""Database Session Manager: async connection pool with scoped sessions and error mapping.

Invariants:
    - One pooled async engine per manager; sessions are scoped to one request/operation
    - Every session rolls back on exception or cancellation and is always closed
    - Driver exceptions are mapped: IntegrityError -> ConflictError,
      connection/driver/IO failures -> StoreUnavailableError; programming and
      data errors propagate unchanged
    - The manager is an explicit handle created in the app lifespan and stored on
      app.state; request code receives sessions through get_db, never the engine

Design Decisions:
    - expire_on_commit=False: committed rows stay readable after the transaction
    - pool_pre_ping: stale pooled connections are detected before use
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import (
    DataError, DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from crud_api.core.errors import ConflictError, CrudApiError, StoreUnavailableError
from crud_api.db.session import create_schema

logger = logging.getLogger(__name__)

_UNAVAILABLE = (OperationalError, DBAPIError, OSError, TimeoutError)


async def _rollback_quietly(session: AsyncSession) -> None:
    """Roll back; a dead connection cannot roll back, it is discarded on close."""
    try:
        await asyncio.shield(session.rollback())
    except (SQLAlchemyError, OSError) as e:
        logger.warning(f"Rollback failed, connection will be discarded: {e}")


@asynccontextmanager
async def store_operation(
    session: AsyncSession,
    operation: str,
    conflict_message: str = "Uniqueness constraint violated",
    conflict_field: str | None = None,
) -> AsyncGenerator[None, None]:
    """Scope one store operation: roll back and translate any failure."""
    try:
        yield
    except IntegrityError as e:
        await _rollback_quietly(session)
        logger.warning(
            f"DB integrity error during {operation}: {e.orig}",
            extra={"error_code": "CONFLICT"},
        )
        raise ConflictError(conflict_message, field=conflict_field) from e
    except DataError:
        await _rollback_quietly(session)
        raise
    except _UNAVAILABLE as e:
        await _rollback_quietly(session)
        logger.error(
            f"DB error during {operation}: {e}",
            extra={"error_code": "STORE_UNAVAILABLE"},
        )
        raise StoreUnavailableError(operation) from e
    except (SQLAlchemyError, asyncio.CancelledError, CrudApiError):
        await _rollback_quietly(session)
        raise


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_kwargs = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a session; rolled back on any failure, always closed."""
        session = self._session_factory()
        try:
            async with store_operation(session, "session"):
                yield session
        finally:
            await session.close()

    async def create_schema(self) -> None:
        """Create missing tables (CREATE TABLE IF NOT EXISTS semantics)."""
        try:
            await create_schema(self.engine)
        except _UNAVAILABLE as e:
            logger.error(f"Schema bootstrap failed: {e}")
            raise StoreUnavailableError("create_schema") from e

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except StoreUnavailableError as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def close(self) -> None:
        await self.engine.dispose()


def get_db_manager(request: Request) -> DatabaseSessionManager:
    """The manager attached to the running app by the lifespan."""
    manager = getattr(request.app.state, "db_manager", None)
    if manager is None:
        raise RuntimeError("Database not initialized")
    return manager


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    async with get_db_manager(request).session() as session:
        yield session
