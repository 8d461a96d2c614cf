"""Tests for application exceptions."""

import pytest

from ragchat.exceptions import (
    ConfigurationError,
    EmbeddingError,
    ErrorCode,
    LLMError,
    OrchestratorError,
    RAGChatError,
    RetrievalError,
    ValidationError,
    VectorStoreError,
)


class TestErrorCode:
    """Tests for error codes."""

    def test_error_code_format(self) -> None:
        """Error codes follow RAG-XXXX format."""
        for code in ErrorCode:
            assert code.value.startswith("RAG-")
            assert len(code.value) == 8  # RAG-XXXX

    def test_error_code_uniqueness(self) -> None:
        """All error codes are unique."""
        codes = [code.value for code in ErrorCode]
        assert len(codes) == len(set(codes))


class TestRAGChatError:
    """Tests for base exception."""

    def test_basic_exception(self) -> None:
        """Base exception stores message and code."""
        error = RAGChatError("Something went wrong")
        assert error.message == "Something went wrong"
        assert error.code == ErrorCode.INTERNAL_ERROR
        assert error.details == {}
        assert str(error) == "Something went wrong"

    def test_exception_with_details(self) -> None:
        """Exception can have additional details."""
        error = RAGChatError(
            "Search failed",
            code=ErrorCode.SEARCH_FAILED,
            details={"status_code": 403},
        )
        assert error.details == {"status_code": 403}

    def test_to_dict(self) -> None:
        """Exception converts to API response body."""
        error = RAGChatError("Boom", code=ErrorCode.SEARCH_FAILED, details={"secret": "x"})
        assert error.to_dict() == {"error": "Boom", "code": "RAG-4001"}


class TestStatusCode:
    """Tests for the HTTP status mapping."""

    @pytest.mark.parametrize(
        ("code", "expected"),
        [
            (ErrorCode.VALIDATION_ERROR, 400),
            (ErrorCode.CONFIGURATION_ERROR, 500),
            (ErrorCode.INTERNAL_ERROR, 500),
            (ErrorCode.EMBEDDING_DIMENSION_MISMATCH, 500),
            (ErrorCode.EMBEDDING_SERVICE_ERROR, 502),
            (ErrorCode.INDEX_UNREACHABLE, 502),
            (ErrorCode.SEARCH_FAILED, 502),
            (ErrorCode.LLM_RATE_LIMIT, 429),
            (ErrorCode.LLM_TIMEOUT, 504),
            (ErrorCode.ORCHESTRATOR_UNREACHABLE, 502),
            (ErrorCode.ORCHESTRATOR_HTML_RESPONSE, 502),
            (ErrorCode.ORCHESTRATOR_INVALID_RESPONSE, 502),
        ],
    )
    def test_status_for_code(self, code: ErrorCode, expected: int) -> None:
        """Each code maps to a fixed HTTP status."""
        assert RAGChatError("x", code=code).status_code == expected

    def test_rejected_passes_upstream_status(self) -> None:
        """Langflow's own error status is returned to the caller."""
        error = OrchestratorError(
            "Langflow error: Unauthorized",
            code=ErrorCode.ORCHESTRATOR_REJECTED,
            details={"status_code": 401},
        )
        assert error.status_code == 401

    def test_rejected_without_status_is_bad_gateway(self) -> None:
        """A rejection with no usable status maps to 502."""
        error = OrchestratorError("x", code=ErrorCode.ORCHESTRATOR_REJECTED)
        assert error.status_code == 502

        error = OrchestratorError(
            "x",
            code=ErrorCode.ORCHESTRATOR_REJECTED,
            details={"status_code": 200},
        )
        assert error.status_code == 502


class TestSpecificExceptions:
    """Tests for specific exception types."""

    def test_configuration_error(self) -> None:
        """ConfigurationError has correct code."""
        error = ConfigurationError("OPENAI_API_KEY not configured")
        assert error.code == ErrorCode.CONFIGURATION_ERROR
        assert error.status_code == 500

    def test_validation_error(self) -> None:
        """ValidationError has correct code."""
        error = ValidationError("Message is required")
        assert error.code == ErrorCode.VALIDATION_ERROR
        assert error.status_code == 400

    def test_default_codes(self) -> None:
        """Service errors carry a sensible default code."""
        assert EmbeddingError("x").code == ErrorCode.EMBEDDING_SERVICE_ERROR
        assert VectorStoreError("x").code == ErrorCode.SEARCH_FAILED
        assert LLMError("x").code == ErrorCode.LLM_SERVICE_ERROR
        assert RetrievalError("x").code == ErrorCode.RETRIEVAL_ERROR
        assert OrchestratorError("x").code == ErrorCode.ORCHESTRATOR_INVALID_RESPONSE

    def test_custom_code(self) -> None:
        """Subclasses accept a custom code."""
        error = EmbeddingError("bad size", code=ErrorCode.EMBEDDING_DIMENSION_MISMATCH)
        assert error.code == ErrorCode.EMBEDDING_DIMENSION_MISMATCH

    def test_all_inherit_from_base(self) -> None:
        """All exceptions inherit from RAGChatError."""
        exceptions = [
            ConfigurationError("test"),
            ValidationError("test"),
            EmbeddingError("test"),
            VectorStoreError("test"),
            LLMError("test"),
            RetrievalError("test"),
            OrchestratorError("test"),
        ]

        for exc in exceptions:
            assert isinstance(exc, RAGChatError)
            assert isinstance(exc, Exception)
