from .pharma_models import (
    ClinicalTrialModel,
    DrugModel,
    TrialSiteModel,
    ParticipantModel,
    AdverseEventModel,
)
from .chat_session_models import ChatSessionModel, ChatMessageModel

__all__ = [
    "ClinicalTrialModel",
    "DrugModel",
    "TrialSiteModel",
    "ParticipantModel",
    "AdverseEventModel",
    "ChatSessionModel",
    "ChatMessageModel",
]
