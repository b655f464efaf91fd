"""Database handle owned by the process bootstrap."""

import logging

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from news_curation.persistence.tables import Base

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///news_curation.db"


class Database:
    """Explicit async database connection, injected into repositories.

    Args:
        url: SQLAlchemy async URL (e.g. ``sqlite+aiosqlite:///app.db`` or
            ``postgresql+asyncpg://...``).
        echo: Log emitted SQL.
    """

    def __init__(self, url: str = DEFAULT_DATABASE_URL, *, echo: bool = False) -> None:
        self._url = url
        self._echo = echo
        self._engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None

    @property
    def connected(self) -> bool:
        return self._engine is not None

    async def connect(self, *, create_schema: bool = True) -> None:
        """Open the engine and create missing tables."""
        if self._engine is not None:
            return
        self._engine = create_async_engine(self._url, echo=self._echo)
        self._sessionmaker = async_sessionmaker(self._engine, expire_on_commit=False)
        if create_schema:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        logger.info("Connected to database %s", self._engine.url.render_as_string(hide_password=True))

    async def disconnect(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._sessionmaker = None
        logger.info("Disconnected from database")

    def session(self) -> AsyncSession:
        if self._sessionmaker is None:
            raise RuntimeError("Database is not connected. Call connect() first.")
        return self._sessionmaker()
