"""RAG pipeline data models."""

from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

DISPLAY_TEXT_LENGTH = 500


class SearchType(str, Enum):
    """How an answer was produced."""

    SEMANTIC = "semantic"
    HYBRID = "hybrid"


class Query(BaseModel):
    """Input for a RAG query.

    Attributes:
        question: The user's question.
        session_id: Conversation token threaded through the orchestrator.
            Generated when the caller does not supply one.
    """

    model_config = ConfigDict(frozen=True)

    question: str = Field(min_length=1, description="User question")
    session_id: str = Field(
        default_factory=lambda: str(uuid4()),
        min_length=1,
        description="Opaque conversation identifier",
    )


class RetrievedDocumentSummary(BaseModel):
    """A retrieved document as shown to the caller.

    Attributes:
        rank: 1-based position in the result list.
        score: Relevance score.
        text: Document text, truncated for display.
        file_path: Source document path.
    """

    rank: int = Field(ge=1, description="1-based rank")
    score: float = Field(description="Relevance score")
    text: str = Field(description="Display text")
    file_path: str = Field(description="Source document path")

    @staticmethod
    def truncate(text: str, limit: int = DISPLAY_TEXT_LENGTH) -> str:
        """Cut text to `limit` characters, marking the cut with an ellipsis."""
        return text[:limit] + "..." if len(text) > limit else text


class Answer(BaseModel):
    """Structured result returned to the caller.

    Attributes:
        answer: Answer text.
        search_type: Mode that produced the answer.
        session_id: Conversation identifier (echoed or generated).
        docs_retrieved: Number of documents retrieved (semantic mode).
        retrieved_docs: Summaries of the retrieved documents (semantic mode).
        search_info: Diagnostic description of the query that was run.
    """

    answer: str = Field(description="Answer text")
    search_type: SearchType = Field(description="Search mode")
    session_id: str | None = Field(default=None, description="Conversation identifier")
    docs_retrieved: int | None = Field(default=None, ge=0, description="Documents retrieved")
    retrieved_docs: list[RetrievedDocumentSummary] | None = Field(
        default=None,
        description="Retrieved document summaries",
    )
    search_info: dict[str, Any] = Field(
        default_factory=dict,
        description="Diagnostics about the executed query",
    )
