"""API routes for chat operations."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ragchat.api.deps import get_hybrid_pipeline, get_semantic_pipeline
from ragchat.exceptions import ValidationError
from ragchat.logging_config import get_logger
from ragchat.rag.hybrid import HybridRAGPipeline
from ragchat.rag.models import Answer, Query, RetrievedDocumentSummary
from ragchat.rag.pipeline import SemanticRAGPipeline

logger = get_logger(__name__)

MESSAGE_REQUIRED = "Message is required"

router = APIRouter(prefix="/api", tags=["Chat"])


class ChatRequest(BaseModel):
    """Request body for both chat modes.

    `message` is optional at the schema level so a missing message gets the
    same 400 response as an empty one.
    """

    message: str | None = Field(default=None, description="User question")
    session_id: str | None = Field(default=None, description="Conversation identifier")


class SemanticChatResponse(BaseModel):
    """Response from direct (semantic) mode."""

    answer: str = Field(description="Generated answer")
    search_type: str = Field(description="Always 'semantic'")
    session_id: str | None = Field(default=None, description="Conversation identifier")
    docs_retrieved: int = Field(description="Documents retrieved")
    retrieved_docs: list[RetrievedDocumentSummary] = Field(
        default_factory=list,
        description="Retrieved document summaries",
    )
    search_info: dict[str, Any] = Field(description="Query diagnostics")


class HybridChatResponse(BaseModel):
    """Response from delegate (hybrid) mode."""

    answer: str = Field(description="Answer from the orchestrator")
    session_id: str = Field(description="Conversation identifier (echoed or generated)")
    search_type: str = Field(description="Always 'hybrid'")
    search_info: dict[str, Any] = Field(description="Query diagnostics")


def chat_request_to_query(request: ChatRequest) -> Query:
    """Convert an API ChatRequest to an internal Query.

    Raises:
        ValidationError: If the message is missing or blank.
    """
    if not request.message or not request.message.strip():
        raise ValidationError(MESSAGE_REQUIRED)
    if request.session_id:
        return Query(question=request.message, session_id=request.session_id)
    return Query(question=request.message)


def answer_to_semantic_response(answer: Answer) -> SemanticChatResponse:
    """Convert an internal Answer to the semantic response body."""
    return SemanticChatResponse(
        answer=answer.answer,
        search_type=answer.search_type.value,
        session_id=answer.session_id,
        docs_retrieved=answer.docs_retrieved or 0,
        retrieved_docs=answer.retrieved_docs or [],
        search_info=answer.search_info,
    )


def answer_to_hybrid_response(answer: Answer, query: Query) -> HybridChatResponse:
    """Convert an internal Answer to the hybrid response body."""
    return HybridChatResponse(
        answer=answer.answer,
        session_id=answer.session_id or query.session_id,
        search_type=answer.search_type.value,
        search_info=answer.search_info,
    )


@router.post("/semantic", response_model=SemanticChatResponse)
async def semantic_endpoint(
    request: ChatRequest,
    pipeline: Annotated[SemanticRAGPipeline, Depends(get_semantic_pipeline)],
) -> SemanticChatResponse:
    """Answer a question with k-NN vector search and generation."""
    query = chat_request_to_query(request)
    answer = await pipeline.query(query)
    return answer_to_semantic_response(answer)


@router.post("/chat", response_model=HybridChatResponse)
async def chat_endpoint(
    request: ChatRequest,
    pipeline: Annotated[HybridRAGPipeline, Depends(get_hybrid_pipeline)],
) -> HybridChatResponse:
    """Answer a question through the Langflow hybrid search flow."""
    query = chat_request_to_query(request)
    answer = await pipeline.query(query)
    return answer_to_hybrid_response(answer, query)
