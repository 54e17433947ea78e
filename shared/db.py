# shared/db.py
import logging
import math
from typing import AsyncIterator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from shared.config import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def _register_sqlite_math(dbapi_connection, connection_record):
    # SQLite builds don't reliably ship trig functions; the distance query needs them.
    dbapi_connection.create_function("radians", 1, math.radians)
    dbapi_connection.create_function("cos", 1, math.cos)
    dbapi_connection.create_function("sin", 1, math.sin)
    dbapi_connection.create_function("acos", 1, math.acos)


class Database:
    """Async engine, bounded connection pool and session factory for one process."""

    def __init__(self, settings: Settings):
        url = settings.database_url
        engine_kwargs = {"pool_pre_ping": True}
        connect_args = {}

        if url.get_backend_name() == "sqlite":
            engine_kwargs.pop("pool_pre_ping")
        else:
            # No overflow: requests beyond pool_size wait in the pool's queue.
            engine_kwargs.update(
                pool_size=settings.pool_size,
                max_overflow=0,
                pool_timeout=settings.pool_timeout,
            )
            ssl_context = settings.ssl_context()
            if ssl_context is not None:
                connect_args["ssl"] = ssl_context
            else:
                logger.warning("No CA certificate configured, connecting to %s without TLS", url.host)

        self.engine = create_async_engine(url, connect_args=connect_args, **engine_kwargs)
        if url.get_backend_name() == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _register_sqlite_math)

        self.session_factory = async_sessionmaker(self.engine, expire_on_commit=False)

    async def init_models(self) -> None:
        # Import models so they are registered with Base.metadata
        import services.school_locator.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    database: Database = request.app.state.db
    async with database.session_factory() as session:
        yield session
