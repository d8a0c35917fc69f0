import pytest
from pydantic import ValidationError

from embedder.core.config.settings import EmbedderSettings


def make_settings(**overrides):
    return EmbedderSettings(_env_file=None, **overrides)


def test_defaults():
    settings = make_settings()

    assert settings.EMBEDDING_DIMENSION == 3072
    assert settings.EMBEDDINGS_TABLE == "embeddings"
    assert settings.DEFAULT_TOP_K == 3
    assert settings.EMBEDDER_APP_PORT == 8080


def test_database_url_is_built_from_parts():
    settings = make_settings(DB_HOST="db", DB_PORT=5433, DB_USER="u", DB_PASS="p", DB_NAME="vectors")

    assert settings.SQLALCHEMY_DATABASE_URL == "postgresql+asyncpg://u:p@db:5433/vectors"


@pytest.mark.parametrize(
    "url, expected",
    [
        ("postgresql://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
        ("postgres://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
        ("postgresql+asyncpg://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
    ],
)
def test_database_url_uses_asyncpg(url, expected):
    assert make_settings(DATABASE_URL=url).SQLALCHEMY_DATABASE_URL == expected


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("EMBEDDING_PROVIDER", "ollama")
    monkeypatch.setenv("EMBEDDING_DIMENSION", "768")

    settings = make_settings()

    assert settings.EMBEDDING_PROVIDER == "ollama"
    assert settings.EMBEDDING_DIMENSION == 768


@pytest.mark.parametrize("table", ["embeddings; DROP TABLE x", "1abc", "my-table", ""])
def test_table_name_must_be_an_identifier(table):
    with pytest.raises(ValidationError):
        make_settings(EMBEDDINGS_TABLE=table)


@pytest.mark.parametrize(
    "overrides",
    [{"EMBEDDING_DIMENSION": 0}, {"DEFAULT_TOP_K": -1}, {"EMBEDDING_PROVIDER": "cohere"}],
)
def test_invalid_values_are_rejected(overrides):
    with pytest.raises(ValidationError):
        make_settings(**overrides)
