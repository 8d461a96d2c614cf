"""Vector store interface and OpenSearch implementation."""

import base64
import time
from abc import ABC, abstractmethod
from typing import Any

import httpx

from ragchat.config import (
    Environment,
    OpenSearchSettings,
    get_settings,
    resolve_verify_tls,
)
from ragchat.exceptions import ConfigurationError, ErrorCode, VectorStoreError
from ragchat.logging_config import get_logger, redact_url
from ragchat.observability.metrics import track_search_request
from ragchat.vectorstore.models import SearchHit

logger = get_logger(__name__)

DEFAULT_SOURCE_FIELDS = ("text", "file_path")


def build_knn_query(
    vector: list[float] | str,
    field: str,
    k: int,
    source_fields: tuple[str, ...] = DEFAULT_SOURCE_FIELDS,
) -> dict[str, Any]:
    """Build an OpenSearch k-NN query body.

    Exactly `k` neighbors are requested and only `source_fields` come back,
    never the stored vector or the full document.

    Args:
        vector: Query vector (or a display placeholder for diagnostics).
        field: knn_vector field name.
        k: Number of neighbors.
        source_fields: `_source` fields to return.

    Returns:
        Query body ready to be serialized.
    """
    return {
        "size": k,
        "_source": list(source_fields),
        "query": {
            "knn": {
                field: {
                    "vector": vector,
                    "k": k,
                },
            },
        },
    }


class VectorStore(ABC):
    """Abstract base class for vector stores.

    Defines the interface for nearest-neighbor search.
    """

    @abstractmethod
    async def search(
        self,
        vector: list[float],
        k: int | None = None,
    ) -> list[SearchHit]:
        """Search for the nearest neighbors of a vector.

        Args:
            vector: Query vector.
            k: Number of neighbors (defaults to the configured K).

        Returns:
            Hits ordered by descending score, possibly empty.

        Raises:
            ConfigurationError: If the store is not configured.
            VectorStoreError: If the search fails.
        """
        ...

    @property
    @abstractmethod
    def index_name(self) -> str:
        """Get the searched index name."""
        ...


class OpenSearchVectorStore(VectorStore):
    """OpenSearch k-NN search over the REST API.

    The HTTP client is created lazily on first use and reused for the
    lifetime of the store.
    """

    def __init__(
        self,
        settings: OpenSearchSettings | None = None,
        environment: Environment | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize OpenSearch vector store.

        Args:
            settings: OpenSearch configuration.
            environment: Application environment, used for the TLS default.
            client: Existing client (for testing).
        """
        if settings is None or environment is None:
            app_settings = get_settings()
            settings = settings or app_settings.opensearch
            environment = environment or app_settings.environment
        self._settings = settings
        self._environment = environment
        self._client = client
        self._owns_client = client is None

    @property
    def index_name(self) -> str:
        """Get the searched index name."""
        return self._settings.index_name

    @property
    def verify_tls(self) -> bool:
        """Whether the cluster certificate is verified."""
        return resolve_verify_tls(self._settings, self._environment)

    @property
    def endpoint(self) -> str:
        """Search endpoint with credentials masked, for messages and logs."""
        return redact_url(self._settings.url)

    def _require_url(self) -> str:
        if not self._settings.url:
            raise ConfigurationError(
                "OPENSEARCH_URL not configured. Set it in the environment or .env file.",
            )
        return self._settings.url

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._settings.username:
            password = (
                self._settings.password.get_secret_value() if self._settings.password else ""
            )
            token = base64.b64encode(
                f"{self._settings.username}:{password}".encode()
            ).decode("ascii")
            headers["Authorization"] = f"Basic {token}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            verify = self.verify_tls
            if not verify:
                logger.warning(
                    "TLS certificate verification disabled for OpenSearch",
                    extra={"endpoint": self.endpoint, "environment": self._environment.value},
                )
            self._client = httpx.AsyncClient(
                timeout=self._settings.timeout,
                verify=verify,
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def search(
        self,
        vector: list[float],
        k: int | None = None,
    ) -> list[SearchHit]:
        """Run a k-NN query against the configured index and vector field."""
        base_url = self._require_url()
        k = k or self._settings.k
        index = self._settings.index_name
        url = f"{base_url}/{index}/_search"
        body = build_knn_query(vector, self._settings.vector_field, k)

        client = await self._get_client()
        start = time.perf_counter()
        try:
            response = await client.post(url, json=body, headers=self._headers())
        except httpx.RequestError as e:
            track_search_request(index, time.perf_counter() - start, success=False)
            logger.error(
                f"OpenSearch request error: {type(e).__name__}",
                extra={"endpoint": self.endpoint, "index": index},
            )
            raise VectorStoreError(
                f"Failed to reach OpenSearch at {self.endpoint} (index: {index}). "
                "Check OPENSEARCH_URL and whether the cluster is reachable from this machine.",
                code=ErrorCode.INDEX_UNREACHABLE,
                details={"endpoint": self.endpoint, "index": index},
            ) from e

        if not response.is_success:
            track_search_request(index, time.perf_counter() - start, success=False)
            logger.error(
                f"OpenSearch search failed: {response.status_code}",
                extra={"index": index, "body": response.text[:500]},
            )
            raise VectorStoreError(
                f"Failed to search OpenSearch (status {response.status_code})",
                code=ErrorCode.SEARCH_FAILED,
                details={"index": index, "status_code": response.status_code},
            )

        track_search_request(index, time.perf_counter() - start, success=True)

        try:
            data = response.json()
        except ValueError as e:
            raise VectorStoreError(
                "Invalid JSON response from OpenSearch",
                code=ErrorCode.INVALID_SEARCH_RESPONSE,
                details={"index": index},
            ) from e

        hits_block = data.get("hits") if isinstance(data, dict) else None
        raw_hits = (hits_block.get("hits") or []) if isinstance(hits_block, dict) else []
        hits = [
            SearchHit(
                id=str(hit.get("_id", "")),
                score=float(hit.get("_score") or 0.0),
                source=dict(hit.get("_source") or {}),
            )
            for hit in raw_hits[:k]
        ]

        logger.debug(
            f"k-NN search returned {len(hits)} hits",
            extra={"index": index, "k": k},
        )
        return hits
