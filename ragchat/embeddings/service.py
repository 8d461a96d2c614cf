"""Embedding service interface and implementations."""

import time
from abc import ABC, abstractmethod
from typing import Any

import httpx

from ragchat.config import OpenAISettings, get_settings
from ragchat.embeddings.models import EmbeddingResult
from ragchat.exceptions import (
    ConfigurationError,
    EmbeddingError,
    ErrorCode,
    ValidationError,
)
from ragchat.logging_config import get_logger
from ragchat.observability.metrics import track_embedding_request

logger = get_logger(__name__)

PROVIDER_NAME = "OpenAI"


class EmbeddingService(ABC):
    """Abstract base class for embedding services.

    Defines the interface for turning a question into a query vector.
    """

    @abstractmethod
    async def embed(self, text: str) -> EmbeddingResult:
        """Generate embedding for a single text.

        Args:
            text: Text to embed.

        Returns:
            EmbeddingResult with vector.

        Raises:
            ConfigurationError: If the provider is not configured.
            EmbeddingError: If embedding fails.
        """
        ...

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model name used for embeddings."""
        ...

    @property
    @abstractmethod
    def dimensions(self) -> int:
        """Get the embedding dimensions."""
        ...


def _provider_error_message(response: httpx.Response) -> str:
    """Pull a readable message out of an OpenAI-style error body."""
    try:
        data: Any = response.json()
    except ValueError:
        return response.text[:200] or response.reason_phrase
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
    return response.reason_phrase


class OpenAIEmbeddingService(EmbeddingService):
    """Embedding service for OpenAI-compatible `/embeddings` APIs."""

    def __init__(
        self,
        settings: OpenAISettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the embedding service.

        Args:
            settings: Provider configuration. Uses defaults if not provided.
            client: HTTP client. Creates new one if not provided.
        """
        self._settings = settings or get_settings().openai
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._settings.timeout,
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def model_name(self) -> str:
        """Get the model name."""
        return self._settings.embedding_model

    @property
    def dimensions(self) -> int:
        """Get the configured embedding dimensions."""
        return self._settings.embedding_dimension

    def _api_key(self) -> str:
        if self._settings.api_key is None or not self._settings.api_key.get_secret_value():
            raise ConfigurationError(
                "OPENAI_API_KEY not configured",
                details={"provider": PROVIDER_NAME},
            )
        return self._settings.api_key.get_secret_value()

    async def embed(self, text: str) -> EmbeddingResult:
        """Generate embedding for a single text.

        The API key is checked before any network call is made.
        """
        api_key = self._api_key()
        if not text or not text.strip():
            raise ValidationError("Cannot embed empty text")

        client = await self._get_client()
        url = f"{self._settings.base_url}/embeddings"
        payload = {
            "input": text,
            "model": self._settings.embedding_model,
        }
        headers = {"Authorization": f"Bearer {api_key}"}

        start = time.perf_counter()
        try:
            response = await client.post(url, json=payload, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            upstream_message = _provider_error_message(e.response)
            track_embedding_request(self.model_name, time.perf_counter() - start, success=False)
            logger.error(
                f"Embedding request failed: {status}",
                extra={"provider": PROVIDER_NAME, "status": status},
            )
            raise EmbeddingError(
                f"{PROVIDER_NAME} embedding request failed ({status}): {upstream_message}",
                code=ErrorCode.EMBEDDING_SERVICE_ERROR,
                details={"provider": PROVIDER_NAME, "status_code": status},
            ) from e
        except httpx.RequestError as e:
            track_embedding_request(self.model_name, time.perf_counter() - start, success=False)
            logger.error(
                f"Embedding request error: {type(e).__name__}",
                extra={"provider": PROVIDER_NAME, "url": url},
            )
            raise EmbeddingError(
                f"Failed to reach {PROVIDER_NAME} embedding service at "
                f"{self._settings.base_url}: {type(e).__name__}",
                code=ErrorCode.EMBEDDING_UNREACHABLE,
                details={"provider": PROVIDER_NAME, "url": url},
            ) from e

        track_embedding_request(self.model_name, time.perf_counter() - start, success=True)

        try:
            data = response.json()
            embedding = data["data"][0]["embedding"]
            if not isinstance(embedding, list) or not embedding:
                raise ValueError("embedding is not a non-empty list")
            vector = [float(v) for v in embedding]
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise EmbeddingError(
                f"Invalid response from {PROVIDER_NAME} embedding service: "
                "missing embedding vector",
                code=ErrorCode.EMBEDDING_INVALID_RESPONSE,
                details={"provider": PROVIDER_NAME, "error": str(e)},
            ) from e

        if len(vector) != self.dimensions:
            raise EmbeddingError(
                f"Embedding model {self.model_name} returned {len(vector)} dimensions "
                f"but the index expects {self.dimensions}. Set EMBEDDING_DIMENSION to "
                "match the index mapping or switch models.",
                code=ErrorCode.EMBEDDING_DIMENSION_MISMATCH,
                details={"expected": self.dimensions, "actual": len(vector)},
            )

        return EmbeddingResult(
            text=text,
            embedding=vector,
            model=self.model_name,
        )
