"""Observability module for metrics and monitoring."""

from ragchat.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    get_metrics_content_type,
    track_embedding_request,
    track_llm_request,
    track_orchestrator_request,
    track_rag_query,
    track_retrieval_request,
    track_search_request,
)

__all__ = [
    "MetricsMiddleware",
    "get_metrics",
    "get_metrics_content_type",
    "track_embedding_request",
    "track_llm_request",
    "track_orchestrator_request",
    "track_rag_query",
    "track_retrieval_request",
    "track_search_request",
]
