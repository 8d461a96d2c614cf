"""Context window assembly.

Pure functions: no I/O, same input always gives the same output.
"""

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field

from ragchat.retrieval.models import RetrievedDocument

DOCUMENT_SEPARATOR = "\n\n---\n\n"


class ContextWindow(BaseModel):
    """Ranked document texts joined into one prompt section."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(default="", description="Rendered context")
    document_count: int = Field(default=0, ge=0, description="Documents rendered")

    @property
    def is_empty(self) -> bool:
        """True when no document was available to ground an answer."""
        return self.document_count == 0


def render_document(rank: int, document: RetrievedDocument) -> str:
    """Render one document segment."""
    return f"Document {rank}:\n{document.text}"


def build_context(documents: Sequence[RetrievedDocument]) -> ContextWindow:
    """Build a context window from documents already sorted by relevance.

    Args:
        documents: Retrieved documents, best first.

    Returns:
        ContextWindow whose segments are ranked 1..n in input order.
    """
    segments = [render_document(rank, doc) for rank, doc in enumerate(documents, start=1)]
    return ContextWindow(
        text=DOCUMENT_SEPARATOR.join(segments),
        document_count=len(segments),
    )
