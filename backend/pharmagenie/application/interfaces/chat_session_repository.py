"""Abstract repository interface for GenAI chat sessions."""

from abc import ABC, abstractmethod
from typing import Any

from pharmagenie.domain.entities import ChatMessage, ChatSession


class ChatSessionRepository(ABC):
    """Port for chat session persistence — implemented in the infrastructure layer."""

    @abstractmethod
    async def create(
        self,
        user_id: str = "anonymous",
        metadata: dict[str, Any] | None = None,
    ) -> ChatSession:
        """Create an empty session with a freshly generated id."""
        ...

    @abstractmethod
    async def get(self, session_id: str) -> ChatSession | None:
        """Retrieve a session with its messages, or None."""
        ...

    @abstractmethod
    async def append_messages(
        self,
        session_id: str,
        messages: list[ChatMessage],
    ) -> ChatSession:
        """Append messages, creating the session if it does not exist yet."""
        ...

    @abstractmethod
    async def delete(self, session_id: str) -> bool:
        """Delete a session. Returns True if deleted, False if not found."""
        ...
