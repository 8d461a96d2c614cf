"""Normalization of Langflow run responses.

Langflow's output schema depends on the flow and the Langflow version, so the
answer text is pulled out by an ordered list of extraction rules. Each rule is
a pure function over the decoded JSON; the first one yielding non-empty text
wins. New shapes are supported by appending a rule.
"""

import json
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from ragchat.logging_config import get_logger

logger = get_logger(__name__)

NO_ANSWER = "No response received from the RAG system."
UNKNOWN_ERROR = "Unknown error"

# Where the text may live on each `outputs[].outputs[]` entry, in priority order.
NESTED_TEXT_PATHS: tuple[tuple[str, ...], ...] = (
    ("results", "message", "text"),
    ("results", "text"),
    ("message", "text"),
)

ERROR_MESSAGE_KEYS = ("detail", "message", "error")


@dataclass(frozen=True)
class ExtractionRule:
    """A named way of finding answer text in a response body."""

    name: str
    extract: Callable[[Any], str | None]


def _dig(value: Any, *path: str) -> Any:
    for key in path:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def _non_empty_text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def extract_nested_outputs(data: Any) -> str | None:
    """`outputs[].outputs[]` entries; the last entry carrying text wins."""
    answer = None
    for output in _as_list(_dig(data, "outputs")):
        for inner in _as_list(_dig(output, "outputs")):
            for path in NESTED_TEXT_PATHS:
                text = _non_empty_text(_dig(inner, *path))
                if text:
                    answer = text
                    break
    return answer


def extract_result(data: Any) -> str | None:
    """Top-level `result`: a string, an object's `text`, or any other value serialized."""
    result = _dig(data, "result")
    # Falsy scalars count as absent; empty objects and lists are still serialized.
    if result in (None, "", 0):
        return None
    if isinstance(result, str):
        return _non_empty_text(result)
    if isinstance(result, dict):
        text = _non_empty_text(result.get("text"))
        if text:
            return text
    return json.dumps(result)


def extract_text(data: Any) -> str | None:
    """Top-level `text`."""
    return _non_empty_text(_dig(data, "text"))


DEFAULT_RULES: tuple[ExtractionRule, ...] = (
    ExtractionRule("nested_outputs", extract_nested_outputs),
    ExtractionRule("result", extract_result),
    ExtractionRule("text", extract_text),
)


def extract_answer(data: Any, rules: Sequence[ExtractionRule] = DEFAULT_RULES) -> str:
    """Find the answer text in a decoded Langflow response.

    Args:
        data: Decoded JSON body.
        rules: Extraction rules, tried in order.

    Returns:
        The first non-empty text, or NO_ANSWER when no rule matches.
    """
    for rule in rules:
        text = rule.extract(data)
        if text:
            logger.debug("Extracted answer from Langflow response", extra={"rule": rule.name})
            return text

    logger.warning("No answer text found in Langflow response")
    return NO_ANSWER


def extract_error_message(data: Any) -> str:
    """Pull a readable message out of a Langflow error body."""
    if isinstance(data, dict):
        for key in ERROR_MESSAGE_KEYS:
            value = data.get(key)
            if not value:
                continue
            return value if isinstance(value, str) else json.dumps(value)
    return UNKNOWN_ERROR


def looks_like_html(body: str) -> bool:
    """True when a body is an HTML page (login screen, UI, proxy error page)."""
    head = body.lstrip()[:16].lower()
    return head.startswith("<!doctype") or head.startswith("<html")
