"""FastAPI dependency injection.

A single ServiceContainer per process owns the long-lived HTTP clients. It is
built from explicit Settings, and each client is created on first use.
Route handlers depend on `get_semantic_pipeline` / `get_hybrid_pipeline`,
which tests replace through `app.dependency_overrides`. They are coroutines so
the container is only ever touched from the event loop thread.
"""

from functools import lru_cache

from ragchat.config import Settings, get_settings
from ragchat.embeddings.service import OpenAIEmbeddingService
from ragchat.llm.client import OpenAICompatibleClient
from ragchat.logging_config import get_logger
from ragchat.orchestrator.client import LangflowClient
from ragchat.rag.hybrid import HybridRAGPipeline
from ragchat.rag.pipeline import SemanticRAGPipeline
from ragchat.retrieval.retriever import SemanticRetriever
from ragchat.vectorstore.service import OpenSearchVectorStore

logger = get_logger(__name__)


class ServiceContainer:
    """Lazily-initialized holder for clients shared across requests.

    The clients are stateless apart from their connection pools, so
    concurrent requests use them without coordination.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._vector_store: OpenSearchVectorStore | None = None
        self._embedding_service: OpenAIEmbeddingService | None = None
        self._llm_client: OpenAICompatibleClient | None = None
        self._langflow_client: LangflowClient | None = None
        self._semantic_pipeline: SemanticRAGPipeline | None = None
        self._hybrid_pipeline: HybridRAGPipeline | None = None

    @property
    def vector_store(self) -> OpenSearchVectorStore:
        if self._vector_store is None:
            logger.info(
                "Initializing OpenSearchVectorStore",
                extra={"index": self.settings.opensearch.index_name},
            )
            self._vector_store = OpenSearchVectorStore(
                settings=self.settings.opensearch,
                environment=self.settings.environment,
            )
        return self._vector_store

    @property
    def embedding_service(self) -> OpenAIEmbeddingService:
        if self._embedding_service is None:
            self._embedding_service = OpenAIEmbeddingService(settings=self.settings.openai)
        return self._embedding_service

    @property
    def llm_client(self) -> OpenAICompatibleClient:
        if self._llm_client is None:
            self._llm_client = OpenAICompatibleClient(settings=self.settings.openai)
        return self._llm_client

    @property
    def langflow_client(self) -> LangflowClient:
        if self._langflow_client is None:
            logger.info("Initializing LangflowClient")
            self._langflow_client = LangflowClient(settings=self.settings.langflow)
        return self._langflow_client

    @property
    def semantic_pipeline(self) -> SemanticRAGPipeline:
        if self._semantic_pipeline is None:
            retriever = SemanticRetriever(
                embedding_service=self.embedding_service,
                vector_store=self.vector_store,
            )
            self._semantic_pipeline = SemanticRAGPipeline(
                retriever=retriever,
                llm_client=self.llm_client,
                settings=self.settings,
            )
        return self._semantic_pipeline

    @property
    def hybrid_pipeline(self) -> HybridRAGPipeline:
        if self._hybrid_pipeline is None:
            self._hybrid_pipeline = HybridRAGPipeline(
                client=self.langflow_client,
                settings=self.settings,
            )
        return self._hybrid_pipeline

    async def close(self) -> None:
        """Close every client that was created."""
        for client in (
            self._vector_store,
            self._embedding_service,
            self._llm_client,
            self._langflow_client,
        ):
            if client is not None:
                await client.close()


@lru_cache
def get_container() -> ServiceContainer:
    """Get the process-wide service container."""
    return ServiceContainer(get_settings())


async def get_semantic_pipeline() -> SemanticRAGPipeline:
    """Dependency: the direct-mode pipeline."""
    return get_container().semantic_pipeline


async def get_hybrid_pipeline() -> HybridRAGPipeline:
    """Dependency: the delegate-mode pipeline."""
    return get_container().hybrid_pipeline
