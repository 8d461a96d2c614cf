"""LLM client module."""

from ragchat.llm.client import LLMClient, OpenAICompatibleClient
from ragchat.llm.models import GenerationResult, Message, Role, TokenUsage
from ragchat.llm.prompts import RAGPromptTemplate

__all__ = [
    "GenerationResult",
    "LLMClient",
    "Message",
    "OpenAICompatibleClient",
    "RAGPromptTemplate",
    "Role",
    "TokenUsage",
]
