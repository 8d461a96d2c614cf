"""Vector store module."""

from ragchat.vectorstore.models import SearchHit
from ragchat.vectorstore.service import (
    OpenSearchVectorStore,
    VectorStore,
    build_knn_query,
)

__all__ = [
    "OpenSearchVectorStore",
    "SearchHit",
    "VectorStore",
    "build_knn_query",
]
