"""RAG pipeline module."""

from ragchat.rag.context import ContextWindow, build_context
from ragchat.rag.hybrid import HybridRAGPipeline
from ragchat.rag.models import Answer, Query, RetrievedDocumentSummary, SearchType
from ragchat.rag.pipeline import SemanticRAGPipeline

__all__ = [
    "Answer",
    "ContextWindow",
    "HybridRAGPipeline",
    "Query",
    "RetrievedDocumentSummary",
    "SearchType",
    "SemanticRAGPipeline",
    "build_context",
]
