"""Chat completion clients."""

import time
from abc import ABC, abstractmethod
from typing import Any

import httpx

from ragchat.config import OpenAISettings, get_settings
from ragchat.exceptions import ConfigurationError, ErrorCode, LLMError
from ragchat.llm.models import GenerationResult, Message, Role, TokenUsage
from ragchat.logging_config import get_logger
from ragchat.observability.metrics import track_llm_request

logger = get_logger(__name__)


class LLMClient(ABC):
    """Abstract base class for LLM clients."""

    @abstractmethod
    async def generate(
        self,
        messages: list[Message],
    ) -> GenerationResult:
        """Complete a conversation.

        Raises:
            ConfigurationError: If the provider is not configured.
            LLMError: If generation fails.
        """
        ...

    async def generate_text(
        self,
        prompt: str,
        system_prompt: str | None = None,
    ) -> GenerationResult:
        """Complete a single user turn, optionally preceded by a system prompt."""
        messages = [Message(role=Role.USER, content=prompt)]
        if system_prompt:
            messages.insert(0, Message(role=Role.SYSTEM, content=system_prompt))
        return await self.generate(messages)

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model name."""
        ...


def _status_error(status: int) -> LLMError:
    if status == 429:
        return LLMError(
            "Rate limit exceeded",
            code=ErrorCode.LLM_RATE_LIMIT,
            details={"status_code": status},
        )
    return LLMError(
        f"LLM service returned {status}",
        code=ErrorCode.LLM_SERVICE_ERROR,
        details={"status_code": status},
    )


def parse_completion(data: Any, default_model: str) -> GenerationResult:
    """Read the first choice of a chat completion body.

    Raises:
        LLMError: If the body has no choices.
    """
    try:
        choice = data["choices"][0]
        message = choice.get("message") or {}
        return GenerationResult(
            content=message.get("content") or "",
            model=data.get("model") or default_model,
            finish_reason=choice.get("finish_reason"),
            usage=TokenUsage.from_payload(data.get("usage")),
        )
    except (KeyError, IndexError, TypeError, AttributeError) as e:
        raise LLMError(
            "Invalid response from LLM",
            code=ErrorCode.LLM_SERVICE_ERROR,
            details={"error": type(e).__name__},
        ) from e


class OpenAICompatibleClient(LLMClient):
    """Client for OpenAI-compatible `/chat/completions` endpoints.

    Sampling temperature and output length come from configuration and are
    the same for every request.
    """

    def __init__(
        self,
        settings: OpenAISettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Provider configuration.
            client: HTTP client (for testing).
        """
        self._settings = settings or get_settings().openai
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
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
        return self._settings.llm_model

    def _authorization(self) -> str:
        key = self._settings.api_key
        if key is None or not key.get_secret_value():
            raise ConfigurationError("OPENAI_API_KEY not configured")
        return f"Bearer {key.get_secret_value()}"

    async def generate(
        self,
        messages: list[Message],
    ) -> GenerationResult:
        """Send the conversation and return the first choice."""
        headers = {"Authorization": self._authorization()}
        client = await self._get_client()
        url = f"{self._settings.base_url}/chat/completions"
        payload = {
            "model": self.model_name,
            "messages": [message.to_payload() for message in messages],
            "temperature": self._settings.temperature,
            "max_tokens": self._settings.max_tokens,
        }

        start = time.perf_counter()
        try:
            response = await client.post(url, json=payload, headers=headers)
            response.raise_for_status()
            result = parse_completion(response.json(), self.model_name)
        except httpx.TimeoutException as e:
            track_llm_request(self.model_name, time.perf_counter() - start, 0, 0, success=False)
            logger.error("LLM request timed out", extra={"timeout": self._settings.timeout})
            raise LLMError(
                "LLM request timed out",
                code=ErrorCode.LLM_TIMEOUT,
                details={"timeout": self._settings.timeout},
            ) from e
        except httpx.HTTPStatusError as e:
            track_llm_request(self.model_name, time.perf_counter() - start, 0, 0, success=False)
            logger.error(f"LLM request failed: {e.response.status_code}")
            raise _status_error(e.response.status_code) from e
        except httpx.RequestError as e:
            track_llm_request(self.model_name, time.perf_counter() - start, 0, 0, success=False)
            logger.error(f"LLM connection error: {type(e).__name__}")
            raise LLMError(
                "Failed to connect to LLM service",
                code=ErrorCode.LLM_SERVICE_ERROR,
                details={"url": url},
            ) from e
        except ValueError as e:
            track_llm_request(self.model_name, time.perf_counter() - start, 0, 0, success=False)
            raise LLMError(
                "Invalid JSON response from LLM",
                code=ErrorCode.LLM_SERVICE_ERROR,
            ) from e
        except LLMError:
            track_llm_request(self.model_name, time.perf_counter() - start, 0, 0, success=False)
            raise

        track_llm_request(
            self.model_name,
            time.perf_counter() - start,
            result.usage.prompt_tokens,
            result.usage.completion_tokens,
        )
        return result
