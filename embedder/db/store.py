"""
Vector Store - pgvector persistence for embedded texts.

Owns the `embeddings` table: creates it, appends (text, embedding) records
with a single multi-row insert, and answers exact nearest-neighbor queries
ranked by cosine distance.
"""

import logging
from typing import List, Sequence, Tuple

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from embedder.core.config.settings import EmbedderSettings
from embedder.core.exceptions import (
    BatchTooLargeError,
    InvalidDimensionError,
    InvalidTopKError,
    StoreError,
)
from embedder.domain.embeddings import DEFAULT_EMBEDDING_DIMENSION, Embedding


logger = logging.getLogger(__name__)

# asyncpg binds at most 32767 arguments per statement, two per row here
MAX_INSERT_ROWS = 32767 // 2


def to_vector_literal(values: Sequence[float]) -> str:
    """Render values in pgvector's text input format, e.g. '[0.1,0.2]'."""
    return "[" + ",".join(repr(float(v)) for v in values) + "]"


class VectorStore:
    """
    Storage interface for embedded texts.

    The store is a handle around a pooled SQLAlchemy async engine; it can be
    shared freely between callers. Each operation checks out one connection.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        table: str = "embeddings",
        dimension: int = DEFAULT_EMBEDDING_DIMENSION,
    ):
        """
        Initialize the vector store.

        Args:
            engine: SQLAlchemy async engine (asyncpg)
            table: Name of the embeddings table
            dimension: Size of the embedding column
        """
        self._engine = engine
        self.table = table
        self.dimension = dimension

    @classmethod
    def from_settings(cls, engine: AsyncEngine, settings: EmbedderSettings) -> "VectorStore":
        return cls(engine, table=settings.EMBEDDINGS_TABLE, dimension=settings.EMBEDDING_DIMENSION)

    # =========================================================================
    # Schema
    # =========================================================================

    async def create_schema(self) -> None:
        """Ensure the pgvector extension and the embeddings table exist."""
        try:
            async with self._engine.begin() as conn:
                await conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
                await conn.execute(
                    text(
                        f"""
                        CREATE TABLE IF NOT EXISTS {self.table} (
                            id UUID DEFAULT gen_random_uuid(),
                            text TEXT,
                            embedding vector({self.dimension}),
                            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                            PRIMARY KEY (id)
                        )
                        """
                    )
                )
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Failed to create schema for table {self.table}: {e}")
            raise StoreError(error_detail=str(e)) from e

        logger.info(f"Schema ready: table {self.table}, vector({self.dimension})")

    # =========================================================================
    # Writes
    # =========================================================================

    async def store(self, pairs: Sequence[Tuple[str, Embedding]]) -> None:
        """
        Insert all pairs with one statement.

        Args:
            pairs: (text, embedding) pairs, typically an EmbeddedTexts

        Raises:
            BatchTooLargeError: More than MAX_INSERT_ROWS pairs
            InvalidDimensionError: An embedding does not fit the table
        """
        pairs = list(pairs)
        if not pairs:
            return
        if len(pairs) > MAX_INSERT_ROWS:
            raise BatchTooLargeError(size=len(pairs), limit=MAX_INSERT_ROWS)

        for _, embedding in pairs:
            if embedding.dimension != self.dimension:
                raise InvalidDimensionError(expected=self.dimension, got=embedding.dimension)

        rows = []
        params = {}
        for i, (content, embedding) in enumerate(pairs):
            rows.append(f"(:text_{i}, CAST(CAST(:embedding_{i} AS TEXT) AS vector))")
            params[f"text_{i}"] = content
            params[f"embedding_{i}"] = to_vector_literal(embedding)

        statement = text(
            f"INSERT INTO {self.table} (text, embedding) VALUES " + ", ".join(rows)
        )

        try:
            async with self._engine.begin() as conn:
                await conn.execute(statement, params)
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Failed to store {len(pairs)} embeddings: {e}")
            raise StoreError(error_detail=str(e)) from e

        logger.debug(f"Stored {len(pairs)} embeddings in {self.table}")

    # =========================================================================
    # Reads
    # =========================================================================

    async def fetch_similar(self, query: Embedding, top_k: int) -> List[str]:
        """
        Texts of the stored records closest to `query`, closest first.

        Args:
            query: Query embedding
            top_k: Maximum number of texts to return

        Returns:
            Up to `top_k` texts ordered by ascending cosine distance
        """
        if isinstance(top_k, bool) or not isinstance(top_k, int) or top_k < 0:
            raise InvalidTopKError(top_k)
        if query.dimension != self.dimension:
            raise InvalidDimensionError(expected=self.dimension, got=query.dimension)
        if top_k == 0:
            return []

        statement = text(
            f"""
            SELECT text, embedding <=> CAST(CAST(:query AS TEXT) AS vector({self.dimension})) AS distance
            FROM {self.table}
            WHERE embedding IS NOT NULL
            ORDER BY distance ASC
            LIMIT :top_k
            """
        )

        try:
            async with self._engine.connect() as conn:
                result = await conn.execute(
                    statement, {"query": to_vector_literal(query), "top_k": top_k}
                )
                texts = list(result.scalars().all())
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Failed to fetch similar texts: {e}")
            raise StoreError(error_detail=str(e)) from e

        logger.debug(f"Fetched {len(texts)} similar texts (top_k={top_k})")
        return texts
