"""
Embedding provider interface
"""

import logging
from typing import Any, Dict, List, Literal, Optional, Protocol, runtime_checkable

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

from embedder.core.config.settings import EmbedderSettings
from embedder.core.exceptions import ErrorKey, ProviderError


logger = logging.getLogger(__name__)

OPENAI_EMBEDDING_MODELS = (
    "text-embedding-ada-002",
    "text-embedding-3-small",
    "text-embedding-3-large",
)


@runtime_checkable
class EmbeddingClient(Protocol):
    """Anything that turns texts into vectors, one per text, in input order"""

    model: str

    async def create_embeddings(self, texts: List[str]) -> List[List[float]]:
        ...


class EmbeddingConfig(BaseModel):
    """Configuration for an embedding provider"""
    type: Literal["openai", "ollama"] = Field(
        default="openai", description="Type of embedding provider")
    model_name: Optional[str] = Field(
        default=None, description="Name of the embedding model, provider default if unset")
    api_key: Optional[str] = Field(
        default=None, description="API key for external services")
    base_url: Optional[str] = Field(
        default=None, description="Endpoint URL, provider default if unset")
    timeout: float = Field(
        default=60.0, description="Request timeout in seconds")
    connect_timeout: float = Field(
        default=10.0, description="Connect timeout in seconds")
    dimension: Optional[int] = Field(
        default=None, description="Vector size the store expects, unchecked if unset")

    model_config = ConfigDict(extra="forbid")

    @field_validator("timeout", "connect_timeout")
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError("timeouts must be positive")
        return v

    @staticmethod
    def from_settings(settings: EmbedderSettings) -> "EmbeddingConfig":
        if settings.EMBEDDING_PROVIDER == "openai":
            return EmbeddingConfig(
                type="openai",
                model_name=settings.OPENAI_EMBEDDING_MODEL,
                api_key=settings.OPENAI_API_KEY,
                base_url=settings.OPENAI_API_URL,
                timeout=settings.DEFAULT_TIMEOUT,
                connect_timeout=settings.CONNECT_TIMEOUT,
                dimension=settings.EMBEDDING_DIMENSION,
            )
        return EmbeddingConfig(
            type="ollama",
            model_name=settings.OLLAMA_EMBEDDING_MODEL,
            base_url=settings.OLLAMA_API_URL,
            timeout=settings.DEFAULT_TIMEOUT,
            connect_timeout=settings.CONNECT_TIMEOUT,
            dimension=settings.EMBEDDING_DIMENSION,
        )

    def get(self, http_client: Optional[httpx.AsyncClient] = None) -> EmbeddingClient:
        if self.type == "openai":
            from .openai import OpenAIClient
            return OpenAIClient(self.model_copy(), http_client=http_client)
        elif self.type == "ollama":
            from .ollama import OllamaClient
            return OllamaClient(self.model_copy(), http_client=http_client)
        raise ProviderError(ErrorKey.PROVIDER_NOT_SUPPORTED, error_detail=self.type, status_code=400)


async def post_json(
    url: str,
    payload: Dict[str, Any],
    config: EmbeddingConfig,
    headers: Optional[Dict[str, str]] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> Any:
    """
    POST a JSON payload and decode the JSON answer.

    Uses `http_client` when given, otherwise a short-lived client built from
    the config timeouts.

    Raises:
        ProviderError: On transport failure, non-2xx status or a non-JSON body
    """
    async def _send(client: httpx.AsyncClient) -> Any:
        response = await client.post(url, json=payload, headers=headers)
        response.raise_for_status()
        return response.json()

    try:
        if http_client is not None:
            return await _send(http_client)
        async with httpx.AsyncClient(
                timeout=httpx.Timeout(config.timeout, connect=config.connect_timeout),
                ) as client:
            return await _send(client)
    except httpx.HTTPStatusError as e:
        logger.error(f"Embedding request to {url} failed with status {e.response.status_code}")
        raise ProviderError(
            error_detail=f"{e.response.status_code} {e.response.reason_phrase} from {url}"
        ) from e
    except httpx.HTTPError as e:
        logger.error(f"Embedding request to {url} failed: {e!r}")
        raise ProviderError(error_detail=f"{type(e).__name__}: {e}") from e
    except ValueError as e:
        logger.error(f"Embedding response from {url} is not JSON: {e}")
        raise ProviderError(ErrorKey.PROVIDER_RESPONSE_FORMAT, error_detail=str(e)) from e


def check_embeddings(vectors: Any, expected: int) -> List[List[float]]:
    """Ensure the provider answered with one list of numbers per input text."""
    if not isinstance(vectors, list) or len(vectors) != expected:
        got = len(vectors) if isinstance(vectors, list) else type(vectors).__name__
        raise ProviderError(
            ErrorKey.PROVIDER_RESPONSE_FORMAT,
            error_detail=f"expected {expected} embeddings, got {got}",
        )
    for vector in vectors:
        if not isinstance(vector, list):
            raise ProviderError(
                ErrorKey.PROVIDER_RESPONSE_FORMAT,
                error_detail=f"embedding is a {type(vector).__name__}, not a list",
            )
    return vectors
