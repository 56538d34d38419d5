"""Pydantic v2 schemas (DTOs) for the chatbot and GenAI chat endpoints."""

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


# ── Rule-based chatbot ──


class ChatQueryRequest(BaseModel):
    """Request body for the natural-language chatbot endpoint."""

    query: str = Field(..., min_length=1, description="Free-text question about the pharma data")


# ── GenAI chat ──


class ChatMessageSchema(BaseModel):
    """A prior turn of the conversation."""

    role: Literal["system", "user", "assistant"]
    content: str = Field(..., max_length=10000)


class GenAIChatRequest(BaseModel):
    """Request schema for a non-streaming GenAI reply."""

    message: str = Field(..., min_length=1, max_length=10000)
    history: list[ChatMessageSchema] = Field(default_factory=list, alias="conversationHistory")
    session_id: str | None = Field(default=None, alias="sessionId")
    context: dict[str, Any] | None = None

    model_config = {"populate_by_name": True}

    @field_validator("message")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Message cannot be empty")
        return value


class TokenUsageResponse(BaseModel):
    """Token usage statistics."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class GenAIChatResponse(BaseModel):
    """Response schema for a non-streaming GenAI reply."""

    content: str
    model: str
    provider: str
    finish_reason: str
    usage: TokenUsageResponse
    latency_ms: int = 0
    session_id: str | None = None


class CreateSessionRequest(BaseModel):
    user_id: str = Field(default="anonymous", min_length=1, max_length=120, alias="userId")
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = {"populate_by_name": True}


class SessionMessageResponse(BaseModel):
    role: str
    content: str
    tokens: int = 0
    timestamp: str | None = None  # ISO 8601


class ChatSessionResponse(BaseModel):
    """A chat session with its full message history."""

    session_id: str
    user_id: str
    message_count: int
    total_tokens: int
    metadata: dict[str, Any] = Field(default_factory=dict)
    messages: list[SessionMessageResponse] = Field(default_factory=list)
    created_at: str | None = None
    updated_at: str | None = None
