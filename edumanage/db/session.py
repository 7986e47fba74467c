from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from edumanage.core.config import Settings

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Connection pool plus session factory for one application instance.

    Constructed explicitly by the application factory and disposed on shutdown;
    nothing in the package holds a module-level engine.
    """

    def __init__(self, url: str, *, pool_recycle: int = 300, echo: bool = False) -> None:
        kwargs = {"echo": echo, "future": True}
        if url.startswith("sqlite"):
            # One shared connection, otherwise every checkout sees its own :memory: database.
            if ":memory:" in url:
                kwargs["poolclass"] = StaticPool
        else:
            # pool_pre_ping: check connection is alive before use (avoids "connection is closed" errors
            # when DB or network closed idle connections).
            # pool_recycle: discard connections after this many seconds to avoid stale connections.
            kwargs["pool_pre_ping"] = True
            kwargs["pool_recycle"] = pool_recycle
        self.engine: AsyncEngine = create_async_engine(url, **kwargs)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        self.sessionmaker = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(settings.database_url, pool_recycle=settings.db_pool_recycle_seconds)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Session bound to one pooled connection; released on every exit path."""
        async with self.sessionmaker() as session:
            yield session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """Acquire, begin, yield, then commit, or roll back if the block raised."""
        async with self.sessionmaker() as session:
            async with session.begin():
                yield session

    async def create_all(self) -> None:
        # Importing the models registers every table on Base.metadata.
        import edumanage.core.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
