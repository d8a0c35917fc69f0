"""
Validated embedding pipeline values.

InputTexts, Embedding and EmbeddedTexts can only be built through their
constructors, which raise a ValidationError subclass on bad input. A value
in hand is therefore always valid, and the store/query paths never
re-validate it.
"""

import asyncio
import logging
import numbers
from typing import TYPE_CHECKING, Iterable, Iterator, List, Optional, Sequence, Tuple, overload

import numpy as np

from embedder.core.exceptions import (
    EmptyInputError,
    EmptyStringError,
    InvalidDimensionError,
    InvalidValuesError,
    MismatchedLengthError,
)

if TYPE_CHECKING:
    from embedder.db.store import VectorStore
    from embedder.providers.base import EmbeddingClient


logger = logging.getLogger(__name__)

DEFAULT_EMBEDDING_DIMENSION = 3072
FLOAT32_MAX = float(np.finfo(np.float32).max)


class InputTexts(Sequence[str]):
    """A non-empty batch of texts, none of them blank."""

    __slots__ = ("_texts",)

    def __init__(self, texts: Iterable[str]):
        texts = tuple(texts)
        if not texts:
            raise EmptyInputError()
        for text in texts:
            if not isinstance(text, str):
                raise TypeError(f"expected str, got {type(text).__name__}")
            if not text.strip():
                raise EmptyStringError()
        self._texts: Tuple[str, ...] = texts

    @property
    def texts(self) -> Tuple[str, ...]:
        return self._texts

    @overload
    def __getitem__(self, index: int) -> str: ...

    @overload
    def __getitem__(self, index: slice) -> Tuple[str, ...]: ...

    def __getitem__(self, index):
        return self._texts[index]

    def __len__(self) -> int:
        return len(self._texts)

    def __iter__(self) -> Iterator[str]:
        return iter(self._texts)

    def __eq__(self, other) -> bool:
        if not isinstance(other, InputTexts):
            return NotImplemented
        return self._texts == other._texts

    def __hash__(self) -> int:
        return hash(self._texts)

    def __repr__(self) -> str:
        return f"InputTexts({list(self._texts)!r})"

    async def embed(
        self,
        client: "EmbeddingClient",
        dimension: int = DEFAULT_EMBEDDING_DIMENSION,
    ) -> "EmbeddedTexts":
        """
        Embed the whole batch with one provider call.

        Args:
            client: Embedding provider
            dimension: Expected dimension of every returned vector

        Returns:
            EmbeddedTexts pairing each text with its embedding, in input order
        """
        logger.debug(f"Embedding {len(self)} texts with {type(client).__name__}")
        vectors = await client.create_embeddings(list(self._texts))
        embeddings = [Embedding(vector, dimension=dimension) for vector in vectors]
        return EmbeddedTexts(self, embeddings)


class Embedding(Sequence[float]):
    """A fixed-dimension vector of finite floats within float32 range."""

    __slots__ = ("_values",)

    def __init__(self, vector: Iterable[float], dimension: int = DEFAULT_EMBEDDING_DIMENSION):
        values = tuple(vector)
        if len(values) != dimension:
            raise InvalidDimensionError(expected=dimension, got=len(values))
        if not all(isinstance(v, numbers.Real) and not isinstance(v, bool) for v in values):
            raise InvalidValuesError()
        array = np.asarray(values, dtype=np.float64)
        # pgvector stores float4
        if not np.all(np.isfinite(array)) or np.any(np.abs(array) > FLOAT32_MAX):
            raise InvalidValuesError()
        self._values: Tuple[float, ...] = tuple(float(v) for v in values)

    @property
    def dimension(self) -> int:
        return len(self._values)

    @property
    def values(self) -> Tuple[float, ...]:
        return self._values

    def as_list(self) -> List[float]:
        return list(self._values)

    def __getitem__(self, index):
        return self._values[index]

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[float]:
        return iter(self._values)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Embedding):
            return NotImplemented
        return self._values == other._values

    def __hash__(self) -> int:
        return hash(self._values)

    def __repr__(self) -> str:
        head = ", ".join(f"{v:.4f}" for v in self._values[:3])
        return f"Embedding(dimension={self.dimension}, values=[{head}, ...])"

    async def fetch_similar(self, top_k: int, store: "VectorStore") -> List[str]:
        """Texts of the `top_k` stored records closest to this embedding."""
        return await store.fetch_similar(self, top_k)


class EmbeddedTexts(Sequence[Tuple[str, Embedding]]):
    """Texts paired positionally with their embeddings."""

    __slots__ = ("_pairs",)

    def __init__(self, texts: InputTexts, embeddings: Sequence[Embedding]):
        if not isinstance(texts, InputTexts):
            raise TypeError(f"expected InputTexts, got {type(texts).__name__}")
        embeddings = tuple(embeddings)
        for embedding in embeddings:
            if not isinstance(embedding, Embedding):
                raise TypeError(f"expected Embedding, got {type(embedding).__name__}")
        if len(texts) != len(embeddings):
            raise MismatchedLengthError(texts=len(texts), embeddings=len(embeddings))
        self._pairs: Tuple[Tuple[str, Embedding], ...] = tuple(zip(texts, embeddings))

    @property
    def texts(self) -> Tuple[str, ...]:
        return tuple(text for text, _ in self._pairs)

    @property
    def embeddings(self) -> Tuple[Embedding, ...]:
        return tuple(embedding for _, embedding in self._pairs)

    def as_list(self) -> List[Tuple[str, Embedding]]:
        return list(self._pairs)

    def __getitem__(self, index):
        return self._pairs[index]

    def __len__(self) -> int:
        return len(self._pairs)

    def __iter__(self) -> Iterator[Tuple[str, Embedding]]:
        return iter(self._pairs)

    def __repr__(self) -> str:
        return f"EmbeddedTexts({len(self._pairs)} pairs)"

    async def store(self, store: "VectorStore") -> None:
        """Persist every pair with a single multi-row insert."""
        await store.store(self._pairs)

    async def fetch_similar(
        self,
        top_k: int,
        store: "VectorStore",
        concurrency: Optional[int] = None,
    ) -> List[List[str]]:
        """
        Run one nearest-neighbor query per pair.

        Queries run one after another by default. With `concurrency` > 1 they
        fan out, at most `concurrency` at a time; results always come back
        aligned to input order.

        Args:
            top_k: Maximum number of texts per query
            store: Vector store to query
            concurrency: Maximum number of queries in flight

        Returns:
            One list of similar texts per input pair
        """
        if not concurrency or concurrency <= 1:
            results = []
            for _, embedding in self._pairs:
                results.append(await store.fetch_similar(embedding, top_k))
            return results

        semaphore = asyncio.Semaphore(concurrency)

        async def _query(embedding: Embedding) -> List[str]:
            async with semaphore:
                return await store.fetch_similar(embedding, top_k)

        return list(await asyncio.gather(*(_query(e) for _, e in self._pairs)))
