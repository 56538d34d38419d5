from .chat_message import ChatMessage, TokenUsage, GenAIRequest, GenAIResponse, StreamEvent
from .chat_session import ChatSession
from .query import (
    FieldClause,
    RecordPredicate,
    QueryAnalysis,
    ConsolidatedResults,
    QueryResult,
)

__all__ = [
    "ChatMessage",
    "TokenUsage",
    "GenAIRequest",
    "GenAIResponse",
    "StreamEvent",
    "ChatSession",
    "FieldClause",
    "RecordPredicate",
    "QueryAnalysis",
    "ConsolidatedResults",
    "QueryResult",
]
