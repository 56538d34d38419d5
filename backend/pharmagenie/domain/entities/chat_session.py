"""Domain entity for persisted GenAI chat sessions."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pharmagenie.domain.entities.chat_message import ChatMessage


@dataclass
class ChatSession:
    """A conversation with its message history and usage metadata."""

    session_id: str
    user_id: str = "anonymous"
    messages: list[ChatMessage] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    total_tokens: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def message_count(self) -> int:
        return len(self.messages)
