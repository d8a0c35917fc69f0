import logging

import httpx
from injector import Module, provider, singleton

from embedder.core.config.settings import EmbedderSettings
from embedder.db.session import DatabaseSessionManager
from embedder.db.store import VectorStore
from embedder.providers.base import EmbeddingClient, EmbeddingConfig


logger = logging.getLogger(__name__)


class Dependencies(Module):

    def __init__(self, settings: EmbedderSettings):
        self._settings = settings

    def configure(self, binder):
        binder.bind(EmbedderSettings, to=self._settings, scope=singleton)

    # ------------------------------------------------------------------
    # PROVIDERS
    # ------------------------------------------------------------------
    @provider
    @singleton
    def provide_session_manager(self, settings: EmbedderSettings) -> DatabaseSessionManager:
        return DatabaseSessionManager(settings)

    @provider
    @singleton
    def provide_vector_store(
        self, manager: DatabaseSessionManager, settings: EmbedderSettings
    ) -> VectorStore:
        return VectorStore.from_settings(manager.get_engine(), settings)

    @provider
    @singleton
    def provide_http_client(self, settings: EmbedderSettings) -> httpx.AsyncClient:
        """Shared connection pool for every provider request."""
        return httpx.AsyncClient(
            timeout=httpx.Timeout(settings.DEFAULT_TIMEOUT, connect=settings.CONNECT_TIMEOUT),
        )

    @provider
    @singleton
    def provide_embedding_config(self, settings: EmbedderSettings) -> EmbeddingConfig:
        return EmbeddingConfig.from_settings(settings)

    @provider
    @singleton
    def provide_embedding_client(
        self, config: EmbeddingConfig, http_client: httpx.AsyncClient
    ) -> EmbeddingClient:
        logger.debug(f"DI: embedding provider {config.type}")
        return config.get(http_client=http_client)
