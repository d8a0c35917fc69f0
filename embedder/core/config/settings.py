import re
from functools import lru_cache
from typing import Literal, Optional

from pydantic import ConfigDict, computed_field, field_validator
from pydantic_settings import BaseSettings


_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class EmbedderSettings(BaseSettings):

    # === Database ===
    DATABASE_URL: Optional[str] = None
    DB_HOST: Optional[str] = "localhost"
    DB_PORT: int = 5432
    DB_USER: Optional[str] = "postgres"
    DB_PASS: Optional[str] = "postgres"
    DB_NAME: Optional[str] = "embedder"
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800

    # === Vector store ===
    EMBEDDINGS_TABLE: str = "embeddings"
    EMBEDDING_DIMENSION: int = 3072
    DEFAULT_TOP_K: int = 3
    CREATE_SCHEMA_ON_STARTUP: bool = False

    # === Embedding providers ===
    EMBEDDING_PROVIDER: Literal["openai", "ollama"] = "openai"
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_API_URL: str = "https://api.openai.com/v1/embeddings"
    OPENAI_EMBEDDING_MODEL: str = "text-embedding-3-large"
    OLLAMA_API_URL: str = "http://localhost:11434/api/embed"
    OLLAMA_EMBEDDING_MODEL: str = "nomic-embed-text"
    DEFAULT_TIMEOUT: float = 60.0
    CONNECT_TIMEOUT: float = 10.0

    # === Server ===
    EMBEDDER_APP_PORT: int = 8080
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    @field_validator("EMBEDDINGS_TABLE")
    @classmethod
    def validate_table_name(cls, v):
        # interpolated into DDL/DML, so it must be a bare identifier
        if not _IDENTIFIER_RE.match(v):
            raise ValueError("EMBEDDINGS_TABLE must be a plain SQL identifier")
        return v

    @field_validator("EMBEDDING_DIMENSION")
    @classmethod
    def validate_dimension(cls, v):
        if v < 1:
            raise ValueError("EMBEDDING_DIMENSION must be at least 1")
        return v

    @field_validator("DEFAULT_TOP_K")
    @classmethod
    def validate_top_k(cls, v):
        if v < 0:
            raise ValueError("DEFAULT_TOP_K must be non-negative")
        return v

    @computed_field
    @property
    def SQLALCHEMY_DATABASE_URL(self) -> str:
        if self.DATABASE_URL:
            # accept plain libpq style urls as well
            for prefix in ("postgresql://", "postgres://"):
                if self.DATABASE_URL.startswith(prefix):
                    return "postgresql+asyncpg://" + self.DATABASE_URL[len(prefix):]
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.DB_USER}:{self.DB_PASS}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    model_config = ConfigDict(
            env_file=".env",
            env_file_encoding="utf-8",
            extra="ignore",  # ignore unknown fields instead of raising an error
            )


@lru_cache
def get_settings() -> EmbedderSettings:
    """Settings for the application entry points; library code takes them explicitly."""
    return EmbedderSettings()
