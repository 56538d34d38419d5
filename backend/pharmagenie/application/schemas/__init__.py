from .chat import (
    ChatMessageSchema,
    ChatQueryRequest,
    ChatSessionResponse,
    CreateSessionRequest,
    GenAIChatRequest,
    GenAIChatResponse,
    SessionMessageResponse,
    TokenUsageResponse,
)
from .export import ExportRequest
from .query import QueryAnalysisSchema

__all__ = [
    "ChatMessageSchema",
    "ChatQueryRequest",
    "ChatSessionResponse",
    "CreateSessionRequest",
    "GenAIChatRequest",
    "GenAIChatResponse",
    "SessionMessageResponse",
    "TokenUsageResponse",
    "ExportRequest",
    "QueryAnalysisSchema",
]
