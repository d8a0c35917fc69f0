"""
Database Module

Engine lifecycle and the pgvector-backed vector store.
"""

from .session import DatabaseSessionManager
from .store import VectorStore

__all__ = ["DatabaseSessionManager", "VectorStore"]
