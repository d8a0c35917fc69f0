"""
OpenAI embedding provider implementation
"""

import logging
from typing import List, Optional

import httpx

from embedder.core.exceptions import AppException, ErrorKey, ProviderError

from .base import EmbeddingConfig, check_embeddings, post_json

logger = logging.getLogger(__name__)

OPENAI_API_URL = "https://api.openai.com/v1/embeddings"
OPENAI_EMBEDDING_MODEL = "text-embedding-3-large"


class OpenAIClient:
    """OpenAI embedding provider"""

    # Dimension mapping for OpenAI models
    MODEL_DIMENSIONS = {
        "text-embedding-ada-002": 1536,
        "text-embedding-3-small": 1536,
        "text-embedding-3-large": 3072,
    }

    def __init__(self, config: EmbeddingConfig, http_client: Optional[httpx.AsyncClient] = None):
        if not config.api_key:
            raise AppException(ErrorKey.MISSING_OPEN_AI_API_KEY, 400)
        self.config = config
        self.model = config.model_name or OPENAI_EMBEDDING_MODEL
        self.base_url = config.base_url or OPENAI_API_URL
        self._http_client = http_client

        if config.dimension is not None and self.dimension not in (None, config.dimension):
            raise AppException(
                ErrorKey.MODEL_DIMENSION_MISMATCH,
                500,
                error_variables=(self.model, self.dimension, config.dimension),
            )

    @property
    def dimension(self) -> Optional[int]:
        return self.MODEL_DIMENSIONS.get(self.model)

    async def create_embeddings(self, texts: List[str]) -> List[List[float]]:
        """
        Generate embeddings for a list of texts

        Args:
            texts: List of texts to embed

        Returns:
            List of embedding vectors, in input order
        """
        body = await post_json(
            self.base_url,
            {"input": list(texts), "model": self.model},
            self.config,
            headers={"Authorization": f"Bearer {self.config.api_key}"},
            http_client=self._http_client,
        )

        try:
            data = body["data"]
            # the API tags every item with the index of its input
            ordered = sorted(data, key=lambda item: item.get("index", 0))
            vectors = [item["embedding"] for item in ordered]
        except (KeyError, TypeError, AttributeError) as e:
            raise ProviderError(
                ErrorKey.PROVIDER_RESPONSE_FORMAT, error_detail=f"missing field {e}"
            ) from e

        logger.info(f"OpenAI embedded {len(texts)} texts with model {self.model}")
        return check_embeddings(vectors, len(texts))
