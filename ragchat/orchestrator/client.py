"""HTTP client for running a Langflow flow."""

import json
import time
from typing import Any

import httpx

from ragchat.config import LangflowSettings, get_settings
from ragchat.exceptions import ErrorCode, OrchestratorError
from ragchat.logging_config import get_logger, redact_url
from ragchat.observability.metrics import track_orchestrator_request
from ragchat.orchestrator.normalize import extract_error_message, looks_like_html

logger = get_logger(__name__)

MISSING_KEY_HINT = (
    " Langflow 1.5+ requires an API key: set LANGFLOW_API_KEY (create one in Langflow:"
    " Settings > API Keys). Or run Langflow with LANGFLOW_SKIP_AUTH_AUTO_LOGIN=true for"
    " local dev without auth."
)
INVALID_KEY_HINT = (
    " Check that LANGFLOW_API_KEY is valid and LANGFLOW_FLOW_ID matches your flow in the"
    " Langflow UI."
)
BASE_URL_HINT = (
    " Also ensure LANGFLOW_URL is the base URL (e.g. http://localhost:7860) and the flow"
    " is built and running."
)


class LangflowClient:
    """Runs the hybrid search flow and returns its decoded JSON body.

    Response bodies are read as text first so HTML pages (login screens,
    wrong URLs) are reported as such instead of as JSON parse failures.
    """

    def __init__(
        self,
        settings: LangflowSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Langflow client.

        Args:
            settings: Langflow configuration.
            client: HTTP client (for testing).
        """
        self._settings = settings or get_settings().langflow
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
        """Close the HTTP client."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def has_api_key(self) -> bool:
        """Whether an API key is configured."""
        key = self._settings.api_key
        return key is not None and bool(key.get_secret_value())

    @property
    def run_url(self) -> str:
        """Endpoint running the configured flow."""
        return f"{self._settings.url}/api/v1/run/{self._settings.flow_id}"

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.has_api_key:
            headers["x-api-key"] = self._settings.api_key.get_secret_value()  # type: ignore[union-attr]
        return headers

    @staticmethod
    def build_payload(question: str, session_id: str) -> dict[str, str]:
        """Build the flow run request body."""
        return {
            "output_type": "chat",
            "input_type": "chat",
            "input_value": question,
            "session_id": session_id,
        }

    async def run(self, question: str, session_id: str) -> Any:
        """Run the flow for one chat turn.

        Args:
            question: The user's message.
            session_id: Conversation identifier kept by Langflow.

        Returns:
            Decoded JSON response body.

        Raises:
            OrchestratorError: If Langflow is unreachable, returns HTML,
                reports an error, or returns something other than JSON.
        """
        client = await self._get_client()
        url = self.run_url

        start = time.perf_counter()
        try:
            response = await client.post(
                url,
                json=self.build_payload(question, session_id),
                headers=self._headers(),
            )
        except httpx.RequestError as e:
            track_orchestrator_request(time.perf_counter() - start, success=False)
            logger.error(
                f"Langflow request error: {type(e).__name__}",
                extra={"url": redact_url(url)},
            )
            raise OrchestratorError(
                f"Failed to reach Langflow at {redact_url(self._settings.url)}. "
                "Check LANGFLOW_URL and that Langflow is running.",
                code=ErrorCode.ORCHESTRATOR_UNREACHABLE,
                details={"url": redact_url(url)},
            ) from e

        body = response.text
        status = response.status_code

        if looks_like_html(body):
            track_orchestrator_request(time.perf_counter() - start, success=False)
            logger.error(
                "Langflow returned HTML instead of JSON",
                extra={"status": status, "body": body.strip()[:150]},
            )
            hint = INVALID_KEY_HINT if self.has_api_key else MISSING_KEY_HINT
            raise OrchestratorError(
                "Langflow returned a page instead of JSON." + hint + BASE_URL_HINT,
                code=ErrorCode.ORCHESTRATOR_HTML_RESPONSE,
                details={"status_code": status},
            )

        if not response.is_success:
            track_orchestrator_request(time.perf_counter() - start, success=False)
            logger.error("Langflow error response", extra={"status": status, "body": body[:500]})
            try:
                error_data = json.loads(body)
            except ValueError:
                message = f"Langflow API error: {status}"
            else:
                message = f"Langflow error: {extract_error_message(error_data)}"
            raise OrchestratorError(
                message,
                code=ErrorCode.ORCHESTRATOR_REJECTED,
                details={"status_code": status},
            )

        try:
            data = json.loads(body)
        except ValueError as e:
            track_orchestrator_request(time.perf_counter() - start, success=False)
            logger.error("Failed to parse Langflow response", extra={"body": body[:500]})
            raise OrchestratorError(
                "Invalid JSON response from Langflow",
                code=ErrorCode.ORCHESTRATOR_INVALID_RESPONSE,
                details={"status_code": status},
            ) from e

        track_orchestrator_request(time.perf_counter() - start, success=True)
        return data
