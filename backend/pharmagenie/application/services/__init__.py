from .genai_chat_service import GenAIChatService
from .query_service import QueryService
from .trial_service import TrialService

__all__ = [
    "GenAIChatService",
    "QueryService",
    "TrialService",
]
