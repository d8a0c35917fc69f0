"""
Ollama embedding provider implementation
"""

import logging
from typing import List, Optional

import httpx

from embedder.core.exceptions import ErrorKey, ProviderError

from .base import EmbeddingConfig, check_embeddings, post_json

logger = logging.getLogger(__name__)

DEFAULT_OLLAMA_API_URL = "http://localhost:11434/api/embed"
DEFAULT_OLLAMA_EMBEDDING_MODEL = "nomic-embed-text"


class OllamaClient:
    """Ollama embedding provider"""

    def __init__(self, config: EmbeddingConfig, http_client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self.model = config.model_name or DEFAULT_OLLAMA_EMBEDDING_MODEL
        self.base_url = config.base_url or DEFAULT_OLLAMA_API_URL
        self._http_client = http_client

    async def create_embeddings(self, texts: List[str]) -> List[List[float]]:
        body = await post_json(
            self.base_url,
            {"input": list(texts), "model": self.model},
            self.config,
            http_client=self._http_client,
        )

        try:
            vectors = body["embeddings"]
        except (KeyError, TypeError) as e:
            raise ProviderError(
                ErrorKey.PROVIDER_RESPONSE_FORMAT, error_detail=f"missing field {e}"
            ) from e

        logger.info(f"Ollama embedded {len(texts)} texts with model {self.model}")
        return check_embeddings(vectors, len(texts))
