"""Application configuration using Pydantic Settings.

All configuration is loaded from environment variables (or a local .env file).
Variable names stay compatible with the original deployment, so
OPENSEARCH_URL, INDEX_NAME, OPENAI_API_KEY and LANGFLOW_FLOW_ID keep working.
No secrets are hardcoded.
"""

from enum import Enum
from functools import lru_cache

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


def _strip_trailing_slashes(value: str) -> str:
    return value.strip().rstrip("/")


class OpenAISettings(BaseSettings):
    """Embedding and generation provider configuration.

    Any OpenAI-compatible API works; the base URL can point at a proxy.
    """

    model_config = SettingsConfigDict(
        env_prefix="OPENAI_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        populate_by_name=True,
    )

    api_key: SecretStr | None = Field(
        default=None,
        description="Provider API key (required for semantic search)",
    )
    base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Provider API base URL",
    )
    embedding_model: str = Field(
        default="text-embedding-3-small",
        description="Embedding model identifier",
    )
    embedding_dimension: int = Field(
        default=1536,
        gt=0,
        validation_alias=AliasChoices("EMBEDDING_DIMENSION", "OPENAI_EMBEDDING_DIMENSION"),
        description="Vector dimension baked into the index mapping",
    )
    llm_model: str = Field(
        default="gpt-4o-mini",
        description="Generation model identifier",
    )
    temperature: float = Field(
        default=0.3,
        ge=0.0,
        le=2.0,
        description="Sampling temperature (low but nonzero)",
    )
    max_tokens: int = Field(
        default=1000,
        gt=0,
        description="Maximum tokens in a generated answer",
    )
    timeout: float = Field(
        default=60.0,
        gt=0,
        description="Request timeout in seconds",
    )

    @field_validator("base_url")
    @classmethod
    def normalize_base_url(cls, value: str) -> str:
        """Drop trailing slashes so paths can be appended."""
        return _strip_trailing_slashes(value)


class OpenSearchSettings(BaseSettings):
    """OpenSearch cluster configuration."""

    model_config = SettingsConfigDict(
        env_prefix="OPENSEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        populate_by_name=True,
    )

    url: str = Field(
        default="",
        description="Cluster endpoint URL (required for semantic search)",
    )
    username: str | None = Field(
        default=None,
        description="Basic auth username (optional for open clusters)",
    )
    password: SecretStr | None = Field(
        default=None,
        description="Basic auth password",
    )
    index_name: str = Field(
        default="rag_demo",
        validation_alias=AliasChoices("INDEX_NAME", "OPENSEARCH_INDEX_NAME"),
        description="Index holding the document chunks",
    )
    vector_field: str = Field(
        default="embeddings",
        description="knn_vector field name in the index mapping",
    )
    k: int = Field(
        default=2,
        gt=0,
        description="Number of nearest neighbors to retrieve",
    )
    ssl_verify: str | None = Field(
        default=None,
        description="Set to false, 0 or no to skip certificate verification",
    )
    ssl_reject_unauthorized: str | None = Field(
        default=None,
        description="Set to false, 0 or no to skip certificate verification",
    )
    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Request timeout in seconds",
    )

    @field_validator("url")
    @classmethod
    def normalize_url(cls, value: str) -> str:
        """Drop trailing slashes so paths can be appended."""
        return _strip_trailing_slashes(value)


class LangflowSettings(BaseSettings):
    """Langflow orchestrator configuration (hybrid search mode)."""

    model_config = SettingsConfigDict(
        env_prefix="LANGFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    url: str = Field(
        default="http://localhost:7860",
        description="Langflow base URL",
    )
    flow_id: str = Field(
        default="6f48da32-743b-49a7-bebf-0e302d172314",
        description="Identifier of the hybrid search flow",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="Langflow API key (required by Langflow 1.5+ unless auth is skipped)",
    )
    timeout: float = Field(
        default=120.0,
        gt=0,
        description="Request timeout in seconds",
    )

    @field_validator("url")
    @classmethod
    def normalize_url(cls, value: str) -> str:
        """Drop trailing slashes so paths can be appended."""
        return _strip_trailing_slashes(value)


class Settings(BaseSettings):
    """Main application settings.

    Aggregates all configuration sections.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Application settings
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # API settings
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host",
    )
    api_port: int = Field(
        default=8000,
        description="API server port",
    )

    # Nested settings
    openai: OpenAISettings = Field(default_factory=OpenAISettings)
    opensearch: OpenSearchSettings = Field(default_factory=OpenSearchSettings)
    langflow: LangflowSettings = Field(default_factory=LangflowSettings)


_OFF_VALUES = frozenset({"false", "0", "no"})


def _is_off(flag: str | None) -> bool:
    return flag is not None and flag.strip().lower() in _OFF_VALUES


def resolve_verify_tls(
    opensearch: OpenSearchSettings,
    environment: Environment,
) -> bool:
    """Decide whether to verify the cluster's TLS certificate.

    OPENSEARCH_SSL_VERIFY or OPENSEARCH_SSL_REJECT_UNAUTHORIZED set to false,
    0 or no turns verification off. Any other value is ignored and the
    environment default applies: outside production an https endpoint skips
    verification, everything else verifies.

    Args:
        opensearch: OpenSearch configuration.
        environment: Current application environment.

    Returns:
        True if certificates must be verified.
    """
    if _is_off(opensearch.ssl_verify) or _is_off(opensearch.ssl_reject_unauthorized):
        return False
    if environment != Environment.PRODUCTION and opensearch.url.lower().startswith("https://"):
        return False
    return True


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()
