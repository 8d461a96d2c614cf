"""Prometheus metrics for the RAG chat service.

Provides metrics instrumentation for:
- HTTP request latency and counts
- RAG query outcomes per search mode
- Embedding, LLM, OpenSearch and Langflow call latency
- Retrieval metrics (documents, scores)
"""

import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware

from ragchat.logging_config import get_logger

logger = get_logger(__name__)

# HTTP Request Metrics
HTTP_REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint", "status_code"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

HTTP_REQUEST_TOTAL = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

# RAG Query Metrics
RAG_QUERY_DURATION = Histogram(
    "rag_query_duration_seconds",
    "RAG query duration in seconds",
    ["search_type", "status"],
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
)

RAG_QUERY_TOTAL = Counter(
    "rag_queries_total",
    "Total RAG queries",
    ["search_type", "status"],  # status: answered, no_documents, fallback, error
)

# LLM Metrics
LLM_REQUEST_DURATION = Histogram(
    "llm_request_duration_seconds",
    "LLM request duration in seconds",
    ["model", "status"],
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0],
)

LLM_TOKENS_TOTAL = Counter(
    "llm_tokens_total",
    "Total LLM tokens used",
    ["model", "type"],
)

LLM_REQUEST_TOTAL = Counter(
    "llm_requests_total",
    "Total LLM requests",
    ["model", "status"],
)

# Embedding Metrics
EMBEDDING_REQUEST_DURATION = Histogram(
    "embedding_request_duration_seconds",
    "Embedding request duration in seconds",
    ["model", "status"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0],
)

EMBEDDING_REQUEST_TOTAL = Counter(
    "embedding_requests_total",
    "Total embedding requests",
    ["model", "status"],
)

# Retrieval Metrics
RETRIEVAL_DOCUMENTS_RETURNED = Histogram(
    "retrieval_documents_returned",
    "Number of documents returned per k-NN search",
    buckets=[0, 1, 2, 3, 5, 10, 20, 50],
)

RETRIEVAL_TOP_SCORE = Histogram(
    "retrieval_top_score",
    "Top retrieval score per query",
    buckets=[0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0, 2.0],
)

# Upstream Service Metrics
SEARCH_REQUEST_DURATION = Histogram(
    "opensearch_request_duration_seconds",
    "OpenSearch k-NN search duration",
    ["index", "status"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0],
)

ORCHESTRATOR_REQUEST_DURATION = Histogram(
    "langflow_request_duration_seconds",
    "Langflow flow run duration",
    ["status"],
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0],
)


TRACKED_PATHS = frozenset({"/api/chat", "/api/semantic"})


def normalize_endpoint(path: str) -> str:
    """Collapse request paths into a bounded set of metric labels."""
    if path.startswith("/health"):
        return "/health"
    if path in TRACKED_PATHS:
        return path
    return "/api/other" if path.startswith("/api/") else "other"


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to collect HTTP request metrics."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Process request and collect metrics."""
        if request.url.path == "/metrics":
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        endpoint = normalize_endpoint(request.url.path)

        HTTP_REQUEST_DURATION.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).observe(duration)

        HTTP_REQUEST_TOTAL.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).inc()

        return response


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST


def track_rag_query(search_type: str, status: str, duration: float) -> None:
    """Track the outcome of one chat request.

    Args:
        search_type: "semantic" or "hybrid".
        status: answered, no_documents, fallback or error.
        duration: End-to-end duration in seconds.
    """
    RAG_QUERY_DURATION.labels(search_type=search_type, status=status).observe(duration)
    RAG_QUERY_TOTAL.labels(search_type=search_type, status=status).inc()


def track_llm_request(
    model: str,
    duration: float,
    prompt_tokens: int,
    completion_tokens: int,
    success: bool = True,
) -> None:
    """Track LLM request metrics.

    Args:
        model: LLM model name.
        duration: Request duration in seconds.
        prompt_tokens: Number of prompt tokens.
        completion_tokens: Number of completion tokens.
        success: Whether the request succeeded.
    """
    status = "success" if success else "error"

    LLM_REQUEST_DURATION.labels(model=model, status=status).observe(duration)
    LLM_REQUEST_TOTAL.labels(model=model, status=status).inc()

    if success:
        LLM_TOKENS_TOTAL.labels(model=model, type="prompt").inc(prompt_tokens)
        LLM_TOKENS_TOTAL.labels(model=model, type="completion").inc(completion_tokens)


def track_embedding_request(
    model: str,
    duration: float,
    success: bool = True,
) -> None:
    """Track embedding request metrics."""
    status = "success" if success else "error"

    EMBEDDING_REQUEST_DURATION.labels(model=model, status=status).observe(duration)
    EMBEDDING_REQUEST_TOTAL.labels(model=model, status=status).inc()


def track_search_request(index: str, duration: float, success: bool = True) -> None:
    """Track an OpenSearch k-NN request."""
    status = "success" if success else "error"
    SEARCH_REQUEST_DURATION.labels(index=index, status=status).observe(duration)


def track_orchestrator_request(duration: float, success: bool = True) -> None:
    """Track a Langflow flow run."""
    status = "success" if success else "error"
    ORCHESTRATOR_REQUEST_DURATION.labels(status=status).observe(duration)


def track_retrieval_request(
    documents_returned: int,
    top_score: float,
) -> None:
    """Track retrieval request metrics.

    Args:
        documents_returned: Number of documents returned.
        top_score: Highest relevance score.
    """
    RETRIEVAL_DOCUMENTS_RETURNED.observe(documents_returned)
    if top_score > 0:
        RETRIEVAL_TOP_SCORE.observe(top_score)
