import pytest

from embedder.core.config.settings import EmbedderSettings
from embedder.domain.embeddings import Embedding
from tests.doubles import TEST_DIMENSION, FakeEmbeddingClient, InMemoryVectorStore, vector_for


@pytest.fixture
def settings():
    return EmbedderSettings(
        _env_file=None,
        EMBEDDING_DIMENSION=TEST_DIMENSION,
        OPENAI_API_KEY=None,
        EMBEDDING_PROVIDER="ollama",
        DEFAULT_TOP_K=2,
    )


@pytest.fixture
def fake_client():
    return FakeEmbeddingClient()


@pytest.fixture
def memory_store():
    return InMemoryVectorStore()


@pytest.fixture
def make_embedding():
    def _make(text: str, dimension: int = TEST_DIMENSION) -> Embedding:
        return Embedding(vector_for(text, dimension), dimension=dimension)
    return _make
