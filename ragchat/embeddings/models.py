"""Embedding data models."""

from pydantic import BaseModel, ConfigDict, Field


class EmbeddingResult(BaseModel):
    """A question turned into a query vector.

    Attributes:
        text: The embedded question.
        embedding: The vector, never empty.
        model: Provider model that produced it.
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Embedded text")
    embedding: list[float] = Field(min_length=1, description="Query vector")
    model: str = Field(description="Embedding model")

    @property
    def dimensions(self) -> int:
        """Vector length."""
        return len(self.embedding)
