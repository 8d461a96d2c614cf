"""Semantic RAG pipeline: embed, k-NN search, assemble context, generate."""

import json
import time
from typing import Any

from ragchat.config import Settings, get_settings
from ragchat.exceptions import ConfigurationError, LLMError, RAGChatError
from ragchat.llm.client import LLMClient
from ragchat.llm.prompts import RAGPromptTemplate
from ragchat.logging_config import get_logger
from ragchat.observability.metrics import track_rag_query
from ragchat.rag.context import ContextWindow, build_context
from ragchat.rag.models import Answer, Query, RetrievedDocumentSummary, SearchType
from ragchat.retrieval.models import RetrievedDocument
from ragchat.retrieval.retriever import Retriever
from ragchat.vectorstore.service import build_knn_query

logger = get_logger(__name__)

NO_DOCUMENTS_ANSWER = "No relevant documents found for your question."
NO_RESPONSE_ANSWER = "No response generated."


def describe_vector(vector: list[float], preview: int = 5) -> str:
    """Abbreviate a query vector for display."""
    head = ", ".join(f"{v:.4f}" for v in vector[:preview])
    return f"[{head}... ({len(vector)} dimensions)]"


class SemanticRAGPipeline:
    """Direct-mode pipeline.

    Steps run strictly in sequence and are never retried. Retrieval failures
    abort the request; generation failures degrade to a fallback answer.
    """

    def __init__(
        self,
        retriever: Retriever,
        llm_client: LLMClient,
        settings: Settings | None = None,
        prompt_template: RAGPromptTemplate | None = None,
    ) -> None:
        """Initialize the RAG pipeline.

        Args:
            retriever: Document retriever.
            llm_client: LLM client for generation.
            settings: Application settings (K, index and model names).
            prompt_template: Prompt template for RAG.
        """
        self._retriever = retriever
        self._llm_client = llm_client
        self._settings = settings or get_settings()
        self._prompt_template = prompt_template or RAGPromptTemplate()

    @property
    def top_k(self) -> int:
        """Configured number of documents to retrieve."""
        return self._settings.opensearch.k

    def preflight(self) -> None:
        """Fail fast when required configuration is missing.

        Raises:
            ConfigurationError: If the API key or the index URL is absent.
        """
        api_key = self._settings.openai.api_key
        if api_key is None or not api_key.get_secret_value():
            raise ConfigurationError("OPENAI_API_KEY not configured")
        if not self._settings.opensearch.url:
            raise ConfigurationError(
                "OPENSEARCH_URL not configured. Set it in the environment or .env file."
            )

    def _search_info(self, query_vector: list[float]) -> dict[str, Any]:
        opensearch = self._settings.opensearch
        display_query = build_knn_query(
            describe_vector(query_vector),
            opensearch.vector_field,
            self.top_k,
        )
        return {
            "type": "k-NN Vector Search",
            "index": opensearch.index_name,
            "embedding_model": self._settings.openai.embedding_model,
            "k": self.top_k,
            "query": json.dumps(display_query, indent=2),
        }

    async def _generate(self, question: str, context: ContextWindow) -> str | None:
        """Generate an answer, or None when the model produced nothing usable."""
        system_prompt, user_prompt = self._prompt_template.build_prompt(
            question=question,
            context=context.text,
        )
        try:
            result = await self._llm_client.generate_text(
                prompt=user_prompt,
                system_prompt=system_prompt,
            )
        except LLMError as e:
            logger.warning(
                f"Generation failed, returning fallback answer: {e.message}",
                extra={"error_code": e.code.value},
            )
            return None

        if result.is_empty:
            logger.warning(
                "Generation returned no text",
                extra={"finish_reason": result.finish_reason},
            )
            return None
        return result.content

    async def query(self, request: Query) -> Answer:
        """Execute a semantic RAG query.

        Args:
            request: The RAG query request.

        Returns:
            Answer with retrieved document summaries and diagnostics.

        Raises:
            ConfigurationError: If required configuration is missing.
            RAGChatError: If embedding or search fails.
        """
        self.preflight()
        start = time.perf_counter()

        logger.info(
            "Processing semantic query",
            extra={"question_length": len(request.question), "top_k": self.top_k},
        )

        try:
            retrieval = await self._retriever.retrieve(request.question, top_k=self.top_k)
        except RAGChatError:
            track_rag_query(SearchType.SEMANTIC.value, "error", time.perf_counter() - start)
            raise

        documents: list[RetrievedDocument] = retrieval.documents
        search_info = self._search_info(retrieval.query_vector)
        context = build_context(documents)

        if context.is_empty:
            track_rag_query(SearchType.SEMANTIC.value, "no_documents", time.perf_counter() - start)
            return Answer(
                answer=NO_DOCUMENTS_ANSWER,
                search_type=SearchType.SEMANTIC,
                session_id=request.session_id,
                docs_retrieved=0,
                retrieved_docs=[],
                search_info=search_info,
            )

        generated = await self._generate(request.question, context)
        status = "answered" if generated is not None else "fallback"
        track_rag_query(SearchType.SEMANTIC.value, status, time.perf_counter() - start)

        retrieved_docs = [
            RetrievedDocumentSummary(
                rank=rank,
                score=doc.score,
                text=RetrievedDocumentSummary.truncate(doc.text),
                file_path=doc.file_path,
            )
            for rank, doc in enumerate(documents, start=1)
        ]

        logger.info(
            "Semantic query completed",
            extra={"docs_retrieved": len(documents), "status": status},
        )

        return Answer(
            answer=generated if generated is not None else NO_RESPONSE_ANSWER,
            search_type=SearchType.SEMANTIC,
            session_id=request.session_id,
            docs_retrieved=len(documents),
            retrieved_docs=retrieved_docs,
            search_info=search_info,
        )
