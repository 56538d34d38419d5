from .base import Base
from .session import engine, async_session_factory, get_db_session
from .models import ClinicalTrialModel, ChatSessionModel

__all__ = [
    "Base",
    "engine",
    "async_session_factory",
    "get_db_session",
    "ClinicalTrialModel",
    "ChatSessionModel",
]
