"""Vector store data models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SearchHit(BaseModel):
    """A single hit from a k-NN search.

    Attributes:
        id: Document identifier in the index.
        score: Engine-defined similarity score (higher is more similar).
        source: The requested `_source` fields.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Document identifier")
    score: float = Field(description="Similarity score")
    source: dict[str, Any] = Field(
        default_factory=dict,
        description="Returned source fields",
    )
