"""Tests for application configuration."""

import os
from unittest.mock import patch

import pytest

from ragchat.config import (
    Environment,
    LangflowSettings,
    OpenAISettings,
    OpenSearchSettings,
    Settings,
    get_settings,
    resolve_verify_tls,
)


class TestOpenAISettings:
    """Tests for provider configuration."""

    def test_default_values(self) -> None:
        """Defaults match the demo deployment."""
        with patch.dict(os.environ, {}, clear=True):
            settings = OpenAISettings()
        assert settings.api_key is None
        assert settings.embedding_model == "text-embedding-3-small"
        assert settings.llm_model == "gpt-4o-mini"
        assert settings.embedding_dimension == 1536
        assert settings.temperature == 0.3
        assert settings.max_tokens == 1000

    def test_api_key_is_secret(self) -> None:
        """API key should be masked when printed."""
        with patch.dict(os.environ, {"OPENAI_API_KEY": "sk-secret"}):
            settings = OpenAISettings()
        assert settings.api_key is not None
        assert "sk-secret" not in str(settings.api_key)
        assert "sk-secret" not in repr(settings)
        assert settings.api_key.get_secret_value() == "sk-secret"

    def test_embedding_dimension_env(self) -> None:
        """EMBEDDING_DIMENSION is read without the OPENAI_ prefix."""
        with patch.dict(os.environ, {"EMBEDDING_DIMENSION": "768"}):
            settings = OpenAISettings()
        assert settings.embedding_dimension == 768

    def test_empty_env_value_ignored(self) -> None:
        """An empty variable counts as unset."""
        with patch.dict(os.environ, {"OPENAI_API_KEY": ""}):
            settings = OpenAISettings()
        assert settings.api_key is None


class TestOpenSearchSettings:
    """Tests for OpenSearch configuration."""

    def test_default_values(self) -> None:
        """Default values for OpenSearch."""
        with patch.dict(os.environ, {}, clear=True):
            settings = OpenSearchSettings()
        assert settings.url == ""
        assert settings.index_name == "rag_demo"
        assert settings.vector_field == "embeddings"
        assert settings.k == 2
        assert settings.ssl_verify is None
        assert settings.ssl_reject_unauthorized is None

    def test_index_name_env(self) -> None:
        """INDEX_NAME is read without the OPENSEARCH_ prefix."""
        with patch.dict(os.environ, {"INDEX_NAME": "bank_docs"}):
            settings = OpenSearchSettings()
        assert settings.index_name == "bank_docs"

    def test_url_trailing_slash_removed(self) -> None:
        """Trailing slashes are stripped from the endpoint."""
        settings = OpenSearchSettings(url="https://search.example.com:9200//")
        assert settings.url == "https://search.example.com:9200"

    def test_env_override(self) -> None:
        """Environment variables override defaults."""
        env = {
            "OPENSEARCH_K": "5",
            "OPENSEARCH_VECTOR_FIELD": "vector_field",
            "OPENSEARCH_SSL_VERIFY": "false",
        }
        with patch.dict(os.environ, env):
            settings = OpenSearchSettings()
        assert settings.k == 5
        assert settings.vector_field == "vector_field"
        assert settings.ssl_verify == "false"

    def test_k_must_be_positive(self) -> None:
        """K below one is rejected."""
        with pytest.raises(ValueError):
            OpenSearchSettings(k=0)


class TestLangflowSettings:
    """Tests for Langflow configuration."""

    def test_default_values(self) -> None:
        """Defaults point at a local Langflow."""
        with patch.dict(os.environ, {}, clear=True):
            settings = LangflowSettings()
        assert settings.url == "http://localhost:7860"
        assert settings.api_key is None
        assert settings.timeout == 120.0

    def test_url_trailing_slash_removed(self) -> None:
        """Trailing slashes are stripped from the base URL."""
        settings = LangflowSettings(url="http://langflow:7860/")
        assert settings.url == "http://langflow:7860"


class TestSettings:
    """Tests for main application settings."""

    def test_default_environment(self) -> None:
        """Default environment is development."""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings()
        assert settings.environment == Environment.DEVELOPMENT

    def test_nested_settings_loaded(self) -> None:
        """Nested settings are initialized."""
        settings = Settings()
        assert isinstance(settings.openai, OpenAISettings)
        assert isinstance(settings.opensearch, OpenSearchSettings)
        assert isinstance(settings.langflow, LangflowSettings)

    def test_environment_enum(self) -> None:
        """Environment can be set via string."""
        with patch.dict(os.environ, {"ENVIRONMENT": "production"}):
            settings = Settings()
        assert settings.environment == Environment.PRODUCTION


class TestResolveVerifyTLS:
    """Tests for TLS verification precedence."""

    def test_ssl_verify_false_always_skips(self) -> None:
        """OPENSEARCH_SSL_VERIFY=false wins over every other input."""
        with patch.dict(
            os.environ,
            {"OPENSEARCH_SSL_VERIFY": "false", "OPENSEARCH_SSL_REJECT_UNAUTHORIZED": "true"},
        ):
            settings = OpenSearchSettings(url="https://search.example.com")
        for environment in Environment:
            assert resolve_verify_tls(settings, environment) is False

    def test_either_flag_off_skips(self) -> None:
        """Either flag set to an off value skips verification."""
        for value in ("false", "0", "no", "FALSE"):
            settings = OpenSearchSettings(
                url="https://search.example.com",
                ssl_verify="true",
                ssl_reject_unauthorized=value,
            )
            assert resolve_verify_tls(settings, Environment.PRODUCTION) is False

    def test_true_flags_fall_back_to_environment_default(self) -> None:
        """Only off values override; true leaves the environment default."""
        env = {"OPENSEARCH_SSL_VERIFY": "true", "OPENSEARCH_SSL_REJECT_UNAUTHORIZED": "true"}
        with patch.dict(os.environ, env):
            settings = OpenSearchSettings(url="https://search.example.com")
        assert resolve_verify_tls(settings, Environment.DEVELOPMENT) is False
        assert resolve_verify_tls(settings, Environment.PRODUCTION) is True

    def test_unrecognized_flag_is_ignored(self) -> None:
        """An unparseable value neither fails loading nor overrides."""
        with patch.dict(os.environ, {"OPENSEARCH_SSL_VERIFY": "maybe"}):
            settings = OpenSearchSettings(url="https://search.example.com")
        assert settings.ssl_verify == "maybe"
        assert resolve_verify_tls(settings, Environment.PRODUCTION) is True
        assert resolve_verify_tls(settings, Environment.DEVELOPMENT) is False

    def test_non_production_https_defaults_to_skip(self) -> None:
        """No overrides, non-production and https: skip verification."""
        settings = OpenSearchSettings(url="https://search.example.com")
        assert resolve_verify_tls(settings, Environment.DEVELOPMENT) is False
        assert resolve_verify_tls(settings, Environment.STAGING) is False

    def test_production_defaults_to_verify(self) -> None:
        """No overrides in production: verify."""
        settings = OpenSearchSettings(url="https://search.example.com")
        assert resolve_verify_tls(settings, Environment.PRODUCTION) is True

    def test_plain_http_defaults_to_verify(self) -> None:
        """The https default only applies to encrypted endpoints."""
        settings = OpenSearchSettings(url="http://localhost:9200")
        assert resolve_verify_tls(settings, Environment.DEVELOPMENT) is True


class TestGetSettings:
    """Tests for settings singleton."""

    def test_returns_settings_instance(self) -> None:
        """get_settings returns a Settings instance."""
        get_settings.cache_clear()
        settings = get_settings()
        assert isinstance(settings, Settings)

    def test_caching(self) -> None:
        """Settings are cached."""
        get_settings.cache_clear()
        settings1 = get_settings()
        settings2 = get_settings()
        assert settings1 is settings2
