"""Embedding service module."""

from ragchat.embeddings.models import EmbeddingResult
from ragchat.embeddings.service import EmbeddingService, OpenAIEmbeddingService

__all__ = [
    "EmbeddingResult",
    "EmbeddingService",
    "OpenAIEmbeddingService",
]
