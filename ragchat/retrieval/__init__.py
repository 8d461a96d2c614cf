"""Retrieval pipeline module."""

from ragchat.retrieval.models import RetrievalResult, RetrievedDocument
from ragchat.retrieval.retriever import Retriever, SemanticRetriever

__all__ = [
    "RetrievalResult",
    "RetrievedDocument",
    "Retriever",
    "SemanticRetriever",
]
