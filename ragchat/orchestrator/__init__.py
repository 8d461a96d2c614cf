"""Langflow orchestrator module (hybrid search mode)."""

from ragchat.orchestrator.client import LangflowClient
from ragchat.orchestrator.normalize import (
    DEFAULT_RULES,
    NO_ANSWER,
    ExtractionRule,
    extract_answer,
    extract_error_message,
    looks_like_html,
)

__all__ = [
    "DEFAULT_RULES",
    "NO_ANSWER",
    "ExtractionRule",
    "LangflowClient",
    "extract_answer",
    "extract_error_message",
    "looks_like_html",
]
