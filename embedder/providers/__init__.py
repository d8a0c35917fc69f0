"""
Embedding Module

Provides the embedding providers: OpenAI and Ollama.
"""

from .base import EmbeddingClient, EmbeddingConfig, OPENAI_EMBEDDING_MODELS
from .openai import OpenAIClient
from .ollama import OllamaClient

__all__ = [
    "EmbeddingClient",
    "EmbeddingConfig",
    "OPENAI_EMBEDDING_MODELS",
    "OpenAIClient",
    "OllamaClient",
]
