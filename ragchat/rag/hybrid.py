"""Hybrid (delegate) pipeline: Langflow performs BM25 + vector retrieval."""

import json
import time
from typing import Any

from ragchat.config import Settings, get_settings
from ragchat.exceptions import RAGChatError
from ragchat.logging_config import get_logger
from ragchat.observability.metrics import track_rag_query
from ragchat.orchestrator.client import LangflowClient
from ragchat.orchestrator.normalize import NO_ANSWER, extract_answer
from ragchat.rag.models import Answer, Query, SearchType

logger = get_logger(__name__)


class HybridRAGPipeline:
    """Delegate-mode pipeline.

    Retrieval, fusion and generation all happen inside the Langflow flow;
    only response normalization runs here.
    """

    def __init__(
        self,
        client: LangflowClient,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the hybrid pipeline.

        Args:
            client: Langflow client.
            settings: Application settings (used for diagnostics only).
        """
        self._client = client
        self._settings = settings or get_settings()

    def _search_info(self, question: str) -> dict[str, Any]:
        # Informational only; the actual query is built inside the flow.
        pipeline_description = {
            "description": "Langflow Hybrid Search Pipeline",
            "components": {
                "1_embedding": {
                    "model": self._settings.openai.embedding_model,
                    "input": question,
                },
                "2_vector_search": {
                    "type": "knn",
                    "field": self._settings.opensearch.vector_field,
                    "k": 10,
                },
                "3_bm25_search": {
                    "type": "keyword",
                    "fields": ["text", "keywords"],
                    "query": "extracted from question",
                },
                "4_hybrid_fusion": {
                    "method": "reciprocal_rank_fusion",
                    "weights": {"vector": 0.5, "bm25": 0.5},
                },
            },
        }
        return {
            "type": "Hybrid Search (BM25 + Vector)",
            "orchestrator": "Langflow",
            "index": self._settings.opensearch.index_name,
            "note": "Retrieved documents handled by Langflow internally",
            "query": json.dumps(pipeline_description, indent=2),
        }

    async def query(self, request: Query) -> Answer:
        """Run one chat turn through Langflow.

        Args:
            request: The RAG query request.

        Returns:
            Answer carrying the (echoed or generated) session id.

        Raises:
            OrchestratorError: If Langflow fails or returns an unusable body.
        """
        start = time.perf_counter()
        logger.info(
            "Processing hybrid query",
            extra={"question_length": len(request.question), "session_id": request.session_id},
        )

        try:
            data = await self._client.run(request.question, request.session_id)
        except RAGChatError:
            track_rag_query(SearchType.HYBRID.value, "error", time.perf_counter() - start)
            raise

        answer = extract_answer(data)
        status = "fallback" if answer == NO_ANSWER else "answered"
        track_rag_query(SearchType.HYBRID.value, status, time.perf_counter() - start)

        return Answer(
            answer=answer,
            search_type=SearchType.HYBRID,
            session_id=request.session_id,
            search_info=self._search_info(request.question),
        )
