import asyncio
from unittest.mock import AsyncMock

import pytest

from embedder.core.exceptions import (
    ErrorKey,
    InvalidDimensionError,
    InvalidTopKError,
    MismatchedLengthError,
)
from embedder.db.store import VectorStore
from embedder.domain.embeddings import EmbeddedTexts, Embedding, InputTexts
from tests.doubles import TEST_DIMENSION, FakeEmbeddingClient


# Test Fixtures
@pytest.fixture
def texts():
    return InputTexts(["a", "b", "c"])


@pytest.fixture
def embeddings(texts, make_embedding):
    return [make_embedding(text) for text in texts]


def test_pairs_follow_input_order(texts, embeddings):
    embedded = EmbeddedTexts(texts, embeddings)

    assert len(embedded) == 3
    for i, pair in enumerate(embedded):
        assert pair == (texts[i], embeddings[i])
    assert embedded.texts == texts.texts
    assert embedded.embeddings == tuple(embeddings)
    assert embedded.as_list() == list(zip(texts, embeddings))


def test_mismatched_batch_is_rejected(make_embedding):
    with pytest.raises(MismatchedLengthError) as exc_info:
        EmbeddedTexts(InputTexts(["x", "y"]), [make_embedding("x")])

    error = exc_info.value
    assert error.texts == 2
    assert error.embeddings == 1
    assert error.error_key == ErrorKey.MISMATCHED_LENGTH
    assert str(error) == "Mismatched lengths: texts=2, embeddings=1"


def test_more_embeddings_than_texts_is_rejected(make_embedding):
    with pytest.raises(MismatchedLengthError) as exc_info:
        EmbeddedTexts(InputTexts(["x"]), [make_embedding("x"), make_embedding("y")])

    assert (exc_info.value.texts, exc_info.value.embeddings) == (1, 2)


@pytest.mark.asyncio
async def test_provider_returning_too_few_vectors_is_a_mismatch(texts):
    client = AsyncMock()
    client.create_embeddings.return_value = [[0.0] * TEST_DIMENSION]

    with pytest.raises(MismatchedLengthError):
        await texts.embed(client, dimension=TEST_DIMENSION)


@pytest.mark.asyncio
async def test_provider_returning_wrong_dimension_is_rejected(texts):
    client = FakeEmbeddingClient(dimension=TEST_DIMENSION + 1)

    with pytest.raises(InvalidDimensionError) as exc_info:
        await texts.embed(client, dimension=TEST_DIMENSION)

    assert exc_info.value.expected == TEST_DIMENSION
    assert exc_info.value.got == TEST_DIMENSION + 1


@pytest.mark.asyncio
async def test_store_uses_a_single_batch(texts, embeddings, memory_store):
    await EmbeddedTexts(texts, embeddings).store(memory_store)

    assert memory_store.insert_batches == [3]
    assert [row[0] for row in memory_store.rows] == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_store_passes_pairs_to_the_store(texts, embeddings):
    store = AsyncMock(spec=VectorStore)
    embedded = EmbeddedTexts(texts, embeddings)

    await embedded.store(store)

    store.store.assert_awaited_once()
    (pairs,), _ = store.store.call_args
    assert list(pairs) == embedded.as_list()


@pytest.mark.asyncio
async def test_round_trip_returns_the_query_text_first(fake_client, memory_store):
    await memory_store.create_schema()
    embedded = await InputTexts(["a", "b", "c"]).embed(fake_client, dimension=TEST_DIMENSION)
    await embedded.store(memory_store)

    query = embedded[0][1]
    result = await query.fetch_similar(3, memory_store)

    assert len(result) == 3
    assert result[0] == "a"


@pytest.mark.asyncio
async def test_fetch_similar_is_aligned_to_input_order(fake_client, memory_store):
    stored = await InputTexts(["a", "b", "c", "d"]).embed(fake_client, dimension=TEST_DIMENSION)
    await stored.store(memory_store)

    queries = await InputTexts(["c", "a", "d"]).embed(fake_client, dimension=TEST_DIMENSION)
    results = await queries.fetch_similar(2, memory_store)

    assert len(results) == 3
    assert [result[0] for result in results] == ["c", "a", "d"]
    assert all(len(result) == 2 for result in results)


@pytest.mark.asyncio
async def test_fetch_similar_results_are_ranked_by_distance(fake_client, memory_store):
    stored = await InputTexts([f"text {i}" for i in range(10)]).embed(fake_client, dimension=TEST_DIMENSION)
    await stored.store(memory_store)
    query = (await InputTexts(["something else"]).embed(fake_client, dimension=TEST_DIMENSION))[0][1]

    result = await query.fetch_similar(4, memory_store)

    assert len(result) <= 4
    distances = [memory_store.distance_to(content, query) for content in result]
    assert distances == sorted(distances)


@pytest.mark.asyncio
async def test_top_k_larger_than_the_table_returns_fewer_rows(fake_client, memory_store):
    embedded = await InputTexts(["a", "b"]).embed(fake_client, dimension=TEST_DIMENSION)
    await embedded.store(memory_store)

    results = await embedded.fetch_similar(10, memory_store)

    assert [len(result) for result in results] == [2, 2]


@pytest.mark.asyncio
async def test_concurrent_fan_out_keeps_input_order(texts, embeddings):
    release = {text: asyncio.Event() for text in texts}
    by_embedding = dict(zip(embeddings, texts))

    async def fetch_similar(embedding: Embedding, top_k: int):
        text = by_embedding[embedding]
        # answer in reverse order: c first, then b, then a
        if text != "c":
            await release[text].wait()
        nxt = {"c": "b", "b": "a"}.get(text)
        if nxt:
            release[nxt].set()
        return [text] * top_k

    store = AsyncMock(spec=VectorStore)
    store.fetch_similar.side_effect = fetch_similar

    results = await EmbeddedTexts(texts, embeddings).fetch_similar(1, store, concurrency=3)

    assert results == [["a"], ["b"], ["c"]]
    assert store.fetch_similar.await_count == 3


@pytest.mark.asyncio
async def test_sequential_queries_by_default(texts, embeddings):
    in_flight = 0
    peak = 0

    async def fetch_similar(embedding: Embedding, top_k: int):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0)
        in_flight -= 1
        return []

    store = AsyncMock(spec=VectorStore)
    store.fetch_similar.side_effect = fetch_similar

    await EmbeddedTexts(texts, embeddings).fetch_similar(3, store)

    assert peak == 1
    assert [c.args for c in store.fetch_similar.await_args_list] == [(e, 3) for e in embeddings]


@pytest.mark.asyncio
async def test_negative_top_k_is_rejected(texts, embeddings, memory_store):
    with pytest.raises(InvalidTopKError):
        await EmbeddedTexts(texts, embeddings).fetch_similar(-1, memory_store)


def test_parts_must_be_validated_values(make_embedding):
    with pytest.raises(TypeError):
        EmbeddedTexts(["   "], [make_embedding("x")])

    with pytest.raises(TypeError):
        EmbeddedTexts(InputTexts(["x"]), [[float("nan")] * TEST_DIMENSION])
