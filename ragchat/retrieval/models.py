"""Retrieval data models."""

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_SOURCE = "unknown"


class RetrievedDocument(BaseModel):
    """A document chunk returned by the index.

    Attributes:
        text: The chunk text.
        score: Relevance score (higher is more relevant, engine-defined scale).
        file_path: Provenance of the chunk.
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Retrieved text content")
    score: float = Field(description="Relevance score")
    file_path: str = Field(default=UNKNOWN_SOURCE, description="Source document path")


class RetrievalResult(BaseModel):
    """Outcome of one retrieval: the query vector and the ranked documents."""

    model_config = ConfigDict(frozen=True)

    query_vector: list[float] = Field(description="Embedding of the question")
    documents: list[RetrievedDocument] = Field(
        default_factory=list,
        description="Documents ordered by descending score",
    )
