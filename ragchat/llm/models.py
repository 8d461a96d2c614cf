"""LLM data models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class Role(str, Enum):
    """Message role in a conversation."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A chat completion message."""

    role: Role
    content: str

    def to_payload(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}


class TokenUsage(BaseModel):
    """Token accounting reported by the provider."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    @classmethod
    def from_payload(cls, usage: Any) -> "TokenUsage":
        """Read a `usage` block, tolerating its absence."""
        if not isinstance(usage, dict):
            return cls()
        return cls(
            prompt_tokens=usage.get("prompt_tokens") or 0,
            completion_tokens=usage.get("completion_tokens") or 0,
            total_tokens=usage.get("total_tokens") or 0,
        )


class GenerationResult(BaseModel):
    """One chat completion.

    `content` is empty when the model returned null or no text; callers
    decide what an empty completion means.
    """

    content: str = Field(default="", description="Generated text")
    model: str = Field(description="Model that answered")
    finish_reason: str | None = Field(default=None, description="Provider stop reason")
    usage: TokenUsage = Field(default_factory=TokenUsage)

    @property
    def is_empty(self) -> bool:
        """True when no usable text was generated."""
        return not self.content.strip()
