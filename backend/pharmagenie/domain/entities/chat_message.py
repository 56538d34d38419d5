"""Domain entities for GenAI chat messages — framework-independent."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class ChatMessage:
    """A single message in a chat conversation."""

    role: str  # "system" | "user" | "assistant"
    content: str = ""
    tokens: int = 0
    timestamp: datetime | None = None


@dataclass
class TokenUsage:
    """Token usage statistics from a completion."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass
class GenAIRequest:
    """Everything a provider needs to produce one reply."""

    message: str
    history: list[ChatMessage] = field(default_factory=list)
    context: dict[str, Any] | None = None
    session_id: str | None = None


@dataclass
class GenAIResponse:
    """Result from a non-streaming generation call."""

    content: str
    model: str
    provider: str
    finish_reason: str = "stop"  # "stop" | "length" | "error"
    usage: TokenUsage = field(default_factory=TokenUsage)
    latency_ms: int = 0


@dataclass
class StreamEvent:
    """One event of a streamed generation.

    ``type`` is "chunk" for partial content, "done" once the stream ended
    (``content`` then holds the full reply) and "error" on failure.
    """

    type: str  # "chunk" | "done" | "error"
    content: str = ""
    usage: TokenUsage | None = None
    error: str | None = None
