"""GenAI chat use case — provider calls, database context and session history."""

import logging
import time
from collections.abc import AsyncIterator
from typing import Any

from pharmagenie.application.interfaces.chat_session_repository import ChatSessionRepository
from pharmagenie.application.interfaces.genai_provider import GenAIProvider
from pharmagenie.application.services.query_service import QueryService
from pharmagenie.application.services.response_formatter import format_chat_response
from pharmagenie.domain.entities import (
    ChatMessage,
    ChatSession,
    GenAIRequest,
    GenAIResponse,
    StreamEvent,
)
from pharmagenie.domain.exceptions import EntityNotFoundError, GenAIProviderError

logger = logging.getLogger(__name__)

_CONTEXT_SAMPLE_SIZE = 3


class GenAIChatService:
    """Application service — orchestrates GenAI replies and chat sessions.

    Provider-agnostic: the provider is injected. When a query service is
    available and the caller sends no context, the message is also run
    through the record query pipeline and the result summary is handed to
    the provider as database context.
    """

    def __init__(
        self,
        provider: GenAIProvider,
        session_repository: ChatSessionRepository,
        query_service: QueryService | None = None,
    ):
        self._provider = provider
        self._sessions = session_repository
        self._query_service = query_service

    @property
    def provider(self) -> GenAIProvider:
        return self._provider

    async def chat(
        self,
        message: str,
        *,
        session_id: str | None = None,
        history: list[ChatMessage] | None = None,
        context: dict[str, Any] | None = None,
    ) -> GenAIResponse:
        """Generate a reply and, with a session id, record the exchange."""
        if context is None:
            context = await self.build_context(message)

        request = GenAIRequest(
            message=message,
            history=list(history or []),
            context=context,
            session_id=session_id,
        )
        start = time.monotonic()
        try:
            response = await self._provider.generate(request)
        except GenAIProviderError as e:
            logger.error("GenAI generation error: %s", e)
            raise
        response.latency_ms = int((time.monotonic() - start) * 1000)

        logger.info(
            "GenAI reply: provider=%s model=%s tokens=%d latency=%dms",
            response.provider,
            response.model,
            response.usage.total_tokens,
            response.latency_ms,
        )

        if session_id:
            await self._record_exchange(
                session_id, message, response.content, response.usage.completion_tokens
            )
        return response

    async def stream(
        self,
        message: str,
        *,
        session_id: str | None = None,
    ) -> AsyncIterator[StreamEvent]:
        """Yield provider events; the full reply is recorded on ``done``.

        Provider failures end the stream with a single ``error`` event.
        """
        request = GenAIRequest(message=message, session_id=session_id)
        try:
            async for event in self._provider.stream_generate(request):
                yield event
                if event.type == "done" and session_id and event.content:
                    tokens = event.usage.completion_tokens if event.usage else 0
                    await self._record_exchange(session_id, message, event.content, tokens)
        except GenAIProviderError as e:
            logger.error("GenAI stream error: %s", e)
            yield StreamEvent(type="error", error=e.message)

    async def build_context(self, message: str) -> dict[str, Any] | None:
        """Database context for ``message``, or None when unavailable."""
        if self._query_service is None or not message.strip():
            return None
        try:
            result = await self._query_service.query(message, allow_partial=True)
        except Exception:
            logger.exception("Could not build database context for GenAI request")
            return None

        response = format_chat_response(message, result.results, result.analysis)
        data = {
            name: response[name][:_CONTEXT_SAMPLE_SIZE]
            for name in result.results.records
            if response.get(name)
        }
        return {"database_results": result.results.summary, "data": data}

    # ── Sessions ─────────────────────────────────────────────────────

    async def create_session(
        self, user_id: str = "anonymous", metadata: dict[str, Any] | None = None
    ) -> ChatSession:
        session_metadata = {
            "provider": self._provider.provider_name,
            "model": self._provider.config.model,
            **(metadata or {}),
        }
        return await self._sessions.create(user_id=user_id, metadata=session_metadata)

    async def get_session(self, session_id: str) -> ChatSession:
        session = await self._sessions.get(session_id)
        if session is None:
            raise EntityNotFoundError("Chat session", session_id)
        return session

    async def delete_session(self, session_id: str) -> None:
        if not await self._sessions.delete(session_id):
            raise EntityNotFoundError("Chat session", session_id)

    async def _record_exchange(
        self, session_id: str, message: str, reply: str, reply_tokens: int
    ) -> None:
        """Persist user + assistant messages; failures are logged, not raised."""
        try:
            await self._sessions.append_messages(
                session_id,
                [
                    ChatMessage(role="user", content=message),
                    ChatMessage(role="assistant", content=reply, tokens=reply_tokens),
                ],
            )
        except Exception:
            logger.exception("Error saving exchange to chat session %s", session_id)
