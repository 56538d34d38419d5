from .record_store import SQLAlchemyRecordStore, COLLECTION_MODELS
from .chat_session_repository import SQLAlchemyChatSessionRepository

__all__ = [
    "SQLAlchemyRecordStore",
    "COLLECTION_MODELS",
    "SQLAlchemyChatSessionRepository",
]
