"""Application exception hierarchy.

All custom exceptions inherit from RAGChatError.
Each exception has an error code for structured error handling and
a matching HTTP status used by the API layer.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error handling."""

    # General errors (1xxx)
    INTERNAL_ERROR = "RAG-1000"
    CONFIGURATION_ERROR = "RAG-1001"
    VALIDATION_ERROR = "RAG-1002"

    # Embedding errors (3xxx)
    EMBEDDING_SERVICE_ERROR = "RAG-3000"
    EMBEDDING_DIMENSION_MISMATCH = "RAG-3001"
    EMBEDDING_UNREACHABLE = "RAG-3002"
    EMBEDDING_INVALID_RESPONSE = "RAG-3003"

    # Vector store errors (4xxx)
    INDEX_UNREACHABLE = "RAG-4000"
    SEARCH_FAILED = "RAG-4001"
    INVALID_SEARCH_RESPONSE = "RAG-4002"

    # LLM errors (5xxx)
    LLM_SERVICE_ERROR = "RAG-5000"
    LLM_TIMEOUT = "RAG-5001"
    LLM_RATE_LIMIT = "RAG-5002"
    LLM_EMPTY_RESPONSE = "RAG-5003"

    # Retrieval errors (6xxx)
    RETRIEVAL_ERROR = "RAG-6000"

    # Orchestrator (Langflow) errors (8xxx)
    ORCHESTRATOR_UNREACHABLE = "RAG-8000"
    ORCHESTRATOR_REJECTED = "RAG-8001"
    ORCHESTRATOR_HTML_RESPONSE = "RAG-8002"
    ORCHESTRATOR_INVALID_RESPONSE = "RAG-8003"


# Errors caused by an upstream service misbehaving or being unreachable.
_BAD_GATEWAY_CODES = frozenset(
    {
        ErrorCode.EMBEDDING_SERVICE_ERROR,
        ErrorCode.EMBEDDING_UNREACHABLE,
        ErrorCode.EMBEDDING_INVALID_RESPONSE,
        ErrorCode.INDEX_UNREACHABLE,
        ErrorCode.SEARCH_FAILED,
        ErrorCode.INVALID_SEARCH_RESPONSE,
        ErrorCode.LLM_SERVICE_ERROR,
        ErrorCode.LLM_EMPTY_RESPONSE,
        ErrorCode.ORCHESTRATOR_UNREACHABLE,
        ErrorCode.ORCHESTRATOR_HTML_RESPONSE,
        ErrorCode.ORCHESTRATOR_INVALID_RESPONSE,
    }
)


class RAGChatError(Exception):
    """Base exception for all RAG chat errors.

    Attributes:
        message: Human-readable error message, safe to return to callers.
        code: Structured error code.
        details: Additional error context for logs. Never holds credentials.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        """HTTP status for this error."""
        if self.code == ErrorCode.VALIDATION_ERROR:
            return 400
        if self.code == ErrorCode.ORCHESTRATOR_REJECTED:
            upstream = self.details.get("status_code")
            if isinstance(upstream, int) and 400 <= upstream <= 599:
                return upstream
            return 502
        if self.code == ErrorCode.LLM_RATE_LIMIT:
            return 429
        if self.code == ErrorCode.LLM_TIMEOUT:
            return 504
        if self.code in _BAD_GATEWAY_CODES:
            return 502
        return 500

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.message,
            "code": self.code.value,
        }


class ConfigurationError(RAGChatError):
    """Configuration or environment error."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


class ValidationError(RAGChatError):
    """Input validation error."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.VALIDATION_ERROR, details)


class EmbeddingError(RAGChatError):
    """Embedding service error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.EMBEDDING_SERVICE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class VectorStoreError(RAGChatError):
    """Vector store operation error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.SEARCH_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class LLMError(RAGChatError):
    """LLM service error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.LLM_SERVICE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class RetrievalError(RAGChatError):
    """Retrieval operation error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.RETRIEVAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class OrchestratorError(RAGChatError):
    """Langflow orchestrator error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.ORCHESTRATOR_INVALID_RESPONSE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)
