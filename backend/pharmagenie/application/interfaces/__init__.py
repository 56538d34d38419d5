from .chat_session_repository import ChatSessionRepository
from .genai_provider import GenAIConfig, GenAIProvider
from .grammatical_tagger import GrammaticalTagger
from .record_store import RecordStore

__all__ = [
    "ChatSessionRepository",
    "GenAIConfig",
    "GenAIProvider",
    "GrammaticalTagger",
    "RecordStore",
]
