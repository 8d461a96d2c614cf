"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator, Callable, Iterator
from typing import Any

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from ragchat.api.app import app
from ragchat.config import (
    Environment,
    LangflowSettings,
    OpenAISettings,
    OpenSearchSettings,
    Settings,
)


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client for FastAPI app.

    Yields:
        AsyncClient configured for testing.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture(autouse=True)
def clear_dependency_overrides() -> Iterator[None]:
    """Reset FastAPI dependency overrides after each test."""
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def settings() -> Settings:
    """Fully configured settings pointing at fake services."""
    return Settings(
        environment=Environment.DEVELOPMENT,
        openai=OpenAISettings(api_key="sk-test", embedding_dimension=3),
        opensearch=OpenSearchSettings(url="http://opensearch:9200", index_name="rag_demo"),
        langflow=LangflowSettings(url="http://langflow:7860", flow_id="flow-123"),
    )


@pytest.fixture
def make_response() -> Callable[..., httpx.Response]:
    """Factory for real httpx responses bound to a request.

    `raise_for_status` and `is_error` need a genuine Response.
    """

    def _make(
        status_code: int,
        url: str = "http://test/",
        json: Any = None,
        text: str | None = None,
    ) -> httpx.Response:
        request = httpx.Request("POST", url)
        if text is not None:
            return httpx.Response(status_code, text=text, request=request)
        return httpx.Response(status_code, json=json, request=request)

    return _make
