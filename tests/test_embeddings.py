"""Tests for embedding service."""

from collections.abc import Callable
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from ragchat.config import OpenAISettings
from ragchat.embeddings.models import EmbeddingResult
from ragchat.embeddings.service import OpenAIEmbeddingService
from ragchat.exceptions import ConfigurationError, EmbeddingError, ErrorCode, ValidationError

ResponseFactory = Callable[..., httpx.Response]

EMBEDDINGS_URL = "https://api.openai.com/v1/embeddings"


class TestEmbeddingResult:
    """Tests for EmbeddingResult model."""

    def test_valid_result(self) -> None:
        """Valid embedding result is created."""
        result = EmbeddingResult(
            text="test",
            embedding=[0.1, 0.2, 0.3],
            model="test-model",
        )
        assert result.text == "test"
        assert len(result.embedding) == 3
        assert result.dimensions == 3

    def test_empty_vector_rejected(self) -> None:
        """A result must carry a vector."""
        with pytest.raises(ValueError):
            EmbeddingResult(text="test", embedding=[], model="test-model")


class TestOpenAIEmbeddingService:
    """Tests for OpenAIEmbeddingService."""

    def _create_settings(self, **overrides: object) -> OpenAISettings:
        values: dict[str, object] = {"api_key": "sk-test", "embedding_dimension": 3}
        values.update(overrides)
        return OpenAISettings(**values)

    def _create_mock_client(self, response: httpx.Response | None = None) -> MagicMock:
        client = MagicMock(spec=httpx.AsyncClient)
        client.post = AsyncMock(return_value=response)
        return client

    def test_model_name(self) -> None:
        """Service returns configured model name."""
        settings = self._create_settings(embedding_model="text-embedding-3-large")
        service = OpenAIEmbeddingService(settings=settings)
        assert service.model_name == "text-embedding-3-large"

    def test_dimensions_from_settings(self) -> None:
        """Dimensions come from configuration, not the model name."""
        service = OpenAIEmbeddingService(settings=self._create_settings(embedding_dimension=768))
        assert service.dimensions == 768

    @pytest.mark.asyncio
    async def test_missing_api_key_fails_before_network(self) -> None:
        """No key means a configuration error and no request."""
        client = self._create_mock_client()
        service = OpenAIEmbeddingService(
            settings=OpenAISettings(api_key=None),
            client=client,
        )

        with pytest.raises(ConfigurationError, match="OPENAI_API_KEY not configured"):
            await service.embed("What is the interest rate?")

        client.post.assert_not_called()

    @pytest.mark.asyncio
    async def test_embed_empty_text_raises(self) -> None:
        """Empty text is rejected."""
        service = OpenAIEmbeddingService(
            settings=self._create_settings(),
            client=self._create_mock_client(),
        )

        with pytest.raises(ValidationError):
            await service.embed("   ")

    @pytest.mark.asyncio
    async def test_embed_success(self, make_response: ResponseFactory) -> None:
        """Successful embedding returns the vector."""
        response = make_response(
            200,
            EMBEDDINGS_URL,
            json={"data": [{"embedding": [0.1, 0.2, 0.3]}]},
        )
        client = self._create_mock_client(response)
        service = OpenAIEmbeddingService(settings=self._create_settings(), client=client)

        result = await service.embed("What is the interest rate?")

        assert result.embedding == [0.1, 0.2, 0.3]
        assert result.dimensions == 3
        assert result.model == "text-embedding-3-small"

        url = client.post.call_args.args[0]
        kwargs = client.post.call_args.kwargs
        assert url == EMBEDDINGS_URL
        assert kwargs["json"] == {
            "input": "What is the interest rate?",
            "model": "text-embedding-3-small",
        }
        assert kwargs["headers"]["Authorization"] == "Bearer sk-test"

    @pytest.mark.asyncio
    async def test_embed_custom_base_url(self, make_response: ResponseFactory) -> None:
        """Requests go to the configured base URL."""
        response = make_response(200, json={"data": [{"embedding": [1.0, 0.0, 0.0]}]})
        client = self._create_mock_client(response)
        settings = self._create_settings(base_url="http://gateway:8080/v1/")
        service = OpenAIEmbeddingService(settings=settings, client=client)

        await service.embed("hello")

        assert client.post.call_args.args[0] == "http://gateway:8080/v1/embeddings"

    @pytest.mark.asyncio
    async def test_embed_http_error(self, make_response: ResponseFactory) -> None:
        """Provider errors include the status and provider message."""
        response = make_response(
            401,
            EMBEDDINGS_URL,
            json={"error": {"message": "Incorrect API key provided"}},
        )
        service = OpenAIEmbeddingService(
            settings=self._create_settings(),
            client=self._create_mock_client(response),
        )

        with pytest.raises(EmbeddingError) as exc_info:
            await service.embed("test")

        assert exc_info.value.code == ErrorCode.EMBEDDING_SERVICE_ERROR
        assert "401" in exc_info.value.message
        assert "Incorrect API key provided" in exc_info.value.message
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_embed_unreachable(self) -> None:
        """Network failures map to EMBEDDING_UNREACHABLE."""
        client = MagicMock(spec=httpx.AsyncClient)
        client.post = AsyncMock(side_effect=httpx.ConnectError("Connection refused"))
        service = OpenAIEmbeddingService(settings=self._create_settings(), client=client)

        with pytest.raises(EmbeddingError) as exc_info:
            await service.embed("test")

        assert exc_info.value.code == ErrorCode.EMBEDDING_UNREACHABLE

    @pytest.mark.asyncio
    async def test_embed_missing_vector(self, make_response: ResponseFactory) -> None:
        """A body without a vector is an invalid response."""
        response = make_response(200, EMBEDDINGS_URL, json={"data": []})
        service = OpenAIEmbeddingService(
            settings=self._create_settings(),
            client=self._create_mock_client(response),
        )

        with pytest.raises(EmbeddingError) as exc_info:
            await service.embed("test")

        assert exc_info.value.code == ErrorCode.EMBEDDING_INVALID_RESPONSE

    @pytest.mark.asyncio
    async def test_embed_dimension_mismatch(self, make_response: ResponseFactory) -> None:
        """A vector of the wrong length is rejected."""
        response = make_response(
            200,
            EMBEDDINGS_URL,
            json={"data": [{"embedding": [0.1, 0.2, 0.3, 0.4, 0.5]}]},
        )
        service = OpenAIEmbeddingService(
            settings=self._create_settings(),
            client=self._create_mock_client(response),
        )

        with pytest.raises(EmbeddingError) as exc_info:
            await service.embed("test")

        assert exc_info.value.code == ErrorCode.EMBEDDING_DIMENSION_MISMATCH
        assert exc_info.value.details == {"expected": 3, "actual": 5}
        assert "EMBEDDING_DIMENSION" in exc_info.value.message
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_close_leaves_injected_client_open(self) -> None:
        """Injected clients belong to the caller."""
        client = self._create_mock_client()
        client.aclose = AsyncMock()
        service = OpenAIEmbeddingService(settings=self._create_settings(), client=client)

        await service.close()

        client.aclose.assert_not_called()
