from .embeddings import (
    DEFAULT_EMBEDDING_DIMENSION,
    InputTexts,
    Embedding,
    EmbeddedTexts,
)

__all__ = ["DEFAULT_EMBEDDING_DIMENSION", "InputTexts", "Embedding", "EmbeddedTexts"]
