"""Concrete chat session repository backed by SQLAlchemy."""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pharmagenie.application.interfaces.chat_session_repository import ChatSessionRepository
from pharmagenie.domain.entities import ChatMessage, ChatSession
from pharmagenie.infrastructure.database.models import ChatMessageModel, ChatSessionModel


class SQLAlchemyChatSessionRepository(ChatSessionRepository):
    """Implements the ChatSessionRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: ChatSessionModel) -> ChatSession:
        """Map ORM model → domain entity."""
        return ChatSession(
            session_id=model.id,
            user_id=model.user_id,
            messages=[
                ChatMessage(
                    role=m.role,
                    content=m.content,
                    tokens=m.tokens,
                    timestamp=m.created_at,
                )
                for m in model.messages
            ],
            metadata=dict(model.metadata_ or {}),
            total_tokens=model.total_tokens,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    async def _load(self, session_id: str) -> ChatSessionModel | None:
        stmt = select(ChatSessionModel).where(ChatSessionModel.id == session_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(
        self,
        user_id: str = "anonymous",
        metadata: dict[str, Any] | None = None,
    ) -> ChatSession:
        model = ChatSessionModel(
            id=str(uuid.uuid4()),
            user_id=user_id,
            metadata_=dict(metadata or {}),
            total_tokens=0,
            messages=[],
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def get(self, session_id: str) -> ChatSession | None:
        model = await self._load(session_id)
        return self._to_entity(model) if model else None

    async def append_messages(
        self,
        session_id: str,
        messages: list[ChatMessage],
    ) -> ChatSession:
        model = await self._load(session_id)
        if model is None:
            model = ChatSessionModel(
                id=session_id,
                user_id="anonymous",
                metadata_={},
                total_tokens=0,
                messages=[],
            )
            self._session.add(model)

        for message in messages:
            model.messages.append(
                ChatMessageModel(
                    role=message.role,
                    content=message.content,
                    tokens=message.tokens,
                )
            )
            model.total_tokens += message.tokens
        model.updated_at = datetime.now(timezone.utc)

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, session_id: str) -> bool:
        model = await self._load(session_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True
