"""Retriever interface and implementations."""

from abc import ABC, abstractmethod
from typing import Any

from ragchat.embeddings.service import EmbeddingService
from ragchat.exceptions import ErrorCode, RAGChatError, RetrievalError
from ragchat.logging_config import get_logger
from ragchat.observability.metrics import track_retrieval_request
from ragchat.retrieval.models import UNKNOWN_SOURCE, RetrievalResult, RetrievedDocument
from ragchat.vectorstore.models import SearchHit
from ragchat.vectorstore.service import VectorStore

logger = get_logger(__name__)


class Retriever(ABC):
    """Abstract base class for retrievers.

    Defines the interface for retrieving relevant documents.
    """

    @abstractmethod
    async def retrieve(
        self,
        query: str,
        top_k: int,
    ) -> RetrievalResult:
        """Retrieve relevant documents for a query.

        Args:
            query: The search query.
            top_k: Maximum number of results to return.

        Returns:
            Retrieval result with documents ordered by relevance.

        Raises:
            RAGChatError: If embedding or search fails.
        """
        ...


def _to_document(hit: SearchHit) -> RetrievedDocument:
    source: dict[str, Any] = hit.source
    file_path = source.get("file_path")
    if not file_path:
        metadata = source.get("metadata")
        if isinstance(metadata, dict):
            file_path = metadata.get("file_path") or metadata.get("filename")
    return RetrievedDocument(
        text=str(source.get("text") or ""),
        score=hit.score,
        file_path=str(file_path) if file_path else UNKNOWN_SOURCE,
    )


class SemanticRetriever(Retriever):
    """Semantic search retriever using embeddings and vector store.

    Embeds the query and finds its nearest neighbors in the index.
    """

    def __init__(
        self,
        embedding_service: EmbeddingService,
        vector_store: VectorStore,
    ) -> None:
        """Initialize the semantic retriever.

        Args:
            embedding_service: Service for generating embeddings.
            vector_store: Vector database for similarity search.
        """
        self._embedding_service = embedding_service
        self._vector_store = vector_store

    async def retrieve(
        self,
        query: str,
        top_k: int,
    ) -> RetrievalResult:
        """Retrieve documents using semantic similarity.

        Service errors (configuration, embedding, search) propagate unchanged
        so callers can tell them apart.
        """
        try:
            embedding_result = await self._embedding_service.embed(query)
            query_vector = embedding_result.embedding

            hits = await self._vector_store.search(vector=query_vector, k=top_k)
        except RAGChatError:
            raise
        except Exception as e:
            logger.exception("Retrieval failed")
            raise RetrievalError(
                "Failed to retrieve documents",
                code=ErrorCode.RETRIEVAL_ERROR,
                details={"query_length": len(query), "error": type(e).__name__},
            ) from e

        documents = [_to_document(hit) for hit in hits[:top_k]]

        track_retrieval_request(
            documents_returned=len(documents),
            top_score=documents[0].score if documents else 0.0,
        )
        logger.debug(
            f"Retrieved {len(documents)} documents for query",
            extra={
                "query_length": len(query),
                "top_k": top_k,
                "results_count": len(documents),
            },
        )

        return RetrievalResult(query_vector=query_vector, documents=documents)
