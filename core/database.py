"""
Async store connection: engine, session factory, schema bootstrap.
Every store call goes through store_call so a slow or failing backend
surfaces as ServiceUnavailableError instead of hanging the request.
"""

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Awaitable, TypeVar

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from core.config import Settings
from core.exceptions import ServiceUnavailableError
from models.records import Base
from utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class Database:
    """Owns the async engine and session factory for one application instance."""

    def __init__(self, url: str, echo: bool = False, timeout_seconds: float = 5.0):
        self.url = make_url(url)
        self.timeout_seconds = timeout_seconds
        if self.url.get_backend_name() == "sqlite":
            self.engine = create_async_engine(url, echo=echo)
        else:
            self.engine = create_async_engine(url, echo=echo, pool_pre_ping=True)
        self.session_maker = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.DATABASE_URL,
            echo=settings.DATABASE_ECHO,
            timeout_seconds=settings.STORE_TIMEOUT_SECONDS,
        )

    async def create_all(self) -> None:
        """Create tables and unique constraints if missing."""
        database = self.url.database
        if self.url.get_backend_name() == "sqlite" and database and database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await asyncio.wait_for(conn.execute(text("SELECT 1")), timeout=self.timeout_seconds)
            return True
        except (SQLAlchemyError, OSError, asyncio.TimeoutError):
            logger.warning("store_ping_failed", extra={"backend": self.url.get_backend_name()})
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session as async context manager. Rolls back on error."""
        async with self.session_maker() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise


async def store_call(awaitable: Awaitable[T], timeout_seconds: float, operation: str) -> T:
    """
    Await a store operation with a timeout.
    Timeouts and SQLAlchemy errors become ServiceUnavailableError.
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_seconds)
    except asyncio.TimeoutError as e:
        logger.error("store_timeout", extra={"operation": operation, "timeout_seconds": timeout_seconds})
        raise ServiceUnavailableError() from e
    except SQLAlchemyError as e:
        logger.exception("store_error", extra={"operation": operation, "error": str(e)})
        raise ServiceUnavailableError() from e
