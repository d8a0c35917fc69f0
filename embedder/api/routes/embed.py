"""Routes for embedding texts."""

import logging
from typing import List, Optional

import httpx
from fastapi import APIRouter, Header
from fastapi_injector import Injected
from pydantic import BaseModel

from embedder.core.config.settings import EmbedderSettings
from embedder.core.exceptions import AppException, ErrorKey
from embedder.domain.embeddings import InputTexts
from embedder.providers.base import OPENAI_EMBEDDING_MODELS, EmbeddingConfig


logger = logging.getLogger(__name__)

router = APIRouter()


class EmbedRequest(BaseModel):
    model: Optional[str] = None
    texts: List[str]


class EmbedResponse(BaseModel):
    model: str
    embeddings: List[List[float]]


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def select_embedding_config(
    model: Optional[str],
    authorization: Optional[str],
    settings: EmbedderSettings,
) -> EmbeddingConfig:
    """
    OpenAI models go to OpenAI, with the bearer token taking precedence over
    the configured fallback key. Anything else goes to Ollama.
    """
    if model in OPENAI_EMBEDDING_MODELS:
        api_key = _bearer_token(authorization) or settings.OPENAI_API_KEY
        if not api_key:
            raise AppException(ErrorKey.MISSING_OPEN_AI_API_KEY, 400)
        return EmbeddingConfig(
            type="openai",
            model_name=model,
            api_key=api_key,
            base_url=settings.OPENAI_API_URL,
            timeout=settings.DEFAULT_TIMEOUT,
            connect_timeout=settings.CONNECT_TIMEOUT,
        )

    return EmbeddingConfig(
        type="ollama",
        model_name=model or settings.OLLAMA_EMBEDDING_MODEL,
        base_url=settings.OLLAMA_API_URL,
        timeout=settings.DEFAULT_TIMEOUT,
        connect_timeout=settings.CONNECT_TIMEOUT,
    )


@router.post("/embed", response_model=EmbedResponse)
async def embed_texts(
    body: EmbedRequest,
    authorization: Optional[str] = Header(default=None),
    settings: EmbedderSettings = Injected(EmbedderSettings),
    http_client: httpx.AsyncClient = Injected(httpx.AsyncClient),
):
    texts = InputTexts(body.texts)
    config = select_embedding_config(body.model, authorization, settings)
    client = config.get(http_client=http_client)

    logger.info(f"Embedding {len(texts)} texts with {config.type} model {client.model}")
    embeddings = await client.create_embeddings(list(texts))

    return EmbedResponse(model=client.model, embeddings=embeddings)
