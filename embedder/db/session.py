import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from embedder.core.config.settings import EmbedderSettings


logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Owns the pooled async engine shared by every VectorStore handle"""

    def __init__(self, settings: EmbedderSettings):
        self._settings = settings
        self._engine: Optional[AsyncEngine] = None

    def get_engine(self) -> AsyncEngine:
        """Get or create the engine"""
        if self._engine is None:
            logger.info("Creating pooled database engine")
            self._engine = create_async_engine(
                self._settings.SQLALCHEMY_DATABASE_URL,
                echo=False,
                pool_size=self._settings.DB_POOL_SIZE,
                max_overflow=self._settings.DB_MAX_OVERFLOW,
                pool_timeout=self._settings.DB_POOL_TIMEOUT,
                pool_recycle=self._settings.DB_POOL_RECYCLE,
                pool_pre_ping=True,
            )
        return self._engine

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            logger.info("Database engine disposed")
