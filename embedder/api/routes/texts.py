"""Routes for storing texts and retrieving similar ones."""

import logging
from typing import List, Optional

from fastapi import APIRouter
from fastapi_injector import Injected
from pydantic import BaseModel, Field

from embedder.core.config.settings import EmbedderSettings
from embedder.db.store import VectorStore
from embedder.domain.embeddings import InputTexts
from embedder.providers.base import EmbeddingClient


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/texts")


class StoreTextsRequest(BaseModel):
    texts: List[str]


class StoreTextsResponse(BaseModel):
    stored: int


class SimilarTextsRequest(BaseModel):
    texts: List[str]
    top_k: Optional[int] = Field(default=None, ge=0)


class SimilarTextsResponse(BaseModel):
    results: List[List[str]]


@router.post("", response_model=StoreTextsResponse, status_code=201)
async def store_texts(
    body: StoreTextsRequest,
    client: EmbeddingClient = Injected(EmbeddingClient),
    store: VectorStore = Injected(VectorStore),
):
    embedded = await InputTexts(body.texts).embed(client, dimension=store.dimension)
    await embedded.store(store)
    logger.info(f"Stored {len(embedded)} texts")
    return StoreTextsResponse(stored=len(embedded))


@router.post("/similar", response_model=SimilarTextsResponse)
async def similar_texts(
    body: SimilarTextsRequest,
    client: EmbeddingClient = Injected(EmbeddingClient),
    store: VectorStore = Injected(VectorStore),
    settings: EmbedderSettings = Injected(EmbedderSettings),
):
    top_k = settings.DEFAULT_TOP_K if body.top_k is None else body.top_k
    embedded = await InputTexts(body.texts).embed(client, dimension=store.dimension)
    results = await embedded.fetch_similar(top_k, store)
    return SimilarTextsResponse(results=results)
