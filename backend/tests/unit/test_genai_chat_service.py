"""Unit tests for the GenAIChatService — replies, context and sessions."""

from collections.abc import AsyncIterator

import pytest

from pharmagenie.application.interfaces.chat_session_repository import ChatSessionRepository
from pharmagenie.application.interfaces.genai_provider import GenAIConfig, GenAIProvider
from pharmagenie.application.services.genai_chat_service import GenAIChatService
from pharmagenie.domain.entities import (
    ChatMessage,
    ChatSession,
    GenAIRequest,
    GenAIResponse,
    StreamEvent,
    TokenUsage,
)
from pharmagenie.domain.exceptions import EntityNotFoundError, GenAIProviderError


# ── Fakes ────────────────────────────────────────────────────────────


class FakeProvider(GenAIProvider):
    """Echo provider that records every request."""

    requires_api_key = False

    def __init__(self, fail: bool = False):
        super().__init__(GenAIConfig(model="fake-model"))
        self.fail = fail
        self.requests: list[GenAIRequest] = []

    @property
    def provider_name(self) -> str:
        return "fake"

    async def generate(self, request: GenAIRequest) -> GenAIResponse:
        self.requests.append(request)
        if self.fail:
            raise GenAIProviderError("fake", 503, "backend down")
        return GenAIResponse(
            content=f"echo: {request.message}",
            model="fake-model",
            provider="fake",
            usage=TokenUsage(prompt_tokens=3, completion_tokens=4, total_tokens=7),
        )

    async def stream_generate(self, request: GenAIRequest) -> AsyncIterator[StreamEvent]:
        self.requests.append(request)
        if self.fail:
            raise GenAIProviderError("fake", 503, "backend down")
        yield StreamEvent(type="chunk", content="hi ")
        yield StreamEvent(type="chunk", content="there")
        yield StreamEvent(
            type="done",
            content="hi there",
            usage=TokenUsage(prompt_tokens=1, completion_tokens=2, total_tokens=3),
        )


class FakeSessionRepository(ChatSessionRepository):
    def __init__(self, fail_appends: bool = False):
        self.sessions: dict[str, ChatSession] = {}
        self.fail_appends = fail_appends
        self._next = 0

    async def create(self, user_id="anonymous", metadata=None):
        self._next += 1
        session = ChatSession(session_id=f"s-{self._next}", user_id=user_id, metadata=metadata or {})
        self.sessions[session.session_id] = session
        return session

    async def get(self, session_id):
        return self.sessions.get(session_id)

    async def append_messages(self, session_id, messages):
        if self.fail_appends:
            raise RuntimeError("database gone")
        session = self.sessions.setdefault(session_id, ChatSession(session_id=session_id))
        session.messages.extend(messages)
        session.total_tokens += sum(m.tokens for m in messages)
        return session

    async def delete(self, session_id):
        return self.sessions.pop(session_id, None) is not None


class FakeQueryService:
    """Stands in for QueryService.query; only the result shape matters here."""

    def __init__(self, result=None, error: Exception | None = None):
        self._result = result
        self._error = error
        self.queries: list[str] = []

    async def query(self, text, *, allow_partial=False):
        self.queries.append(text)
        if self._error:
            raise self._error
        return self._result


# ── chat ─────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_chat_returns_reply_with_latency():
    provider = FakeProvider()
    service = GenAIChatService(provider, FakeSessionRepository())

    response = await service.chat("hello", history=[ChatMessage(role="user", content="earlier")])

    assert response.content == "echo: hello"
    assert response.latency_ms >= 0
    assert provider.requests[0].history[0].content == "earlier"
    assert provider.requests[0].context is None


@pytest.mark.asyncio
async def test_chat_with_session_records_exchange():
    sessions = FakeSessionRepository()
    service = GenAIChatService(FakeProvider(), sessions)

    await service.chat("hello", session_id="abc")

    messages = sessions.sessions["abc"].messages
    assert [(m.role, m.content) for m in messages] == [
        ("user", "hello"),
        ("assistant", "echo: hello"),
    ]
    assert messages[1].tokens == 4


@pytest.mark.asyncio
async def test_session_persistence_failure_does_not_fail_the_reply():
    service = GenAIChatService(FakeProvider(), FakeSessionRepository(fail_appends=True))
    response = await service.chat("hello", session_id="abc")
    assert response.content == "echo: hello"


@pytest.mark.asyncio
async def test_chat_propagates_provider_errors():
    service = GenAIChatService(FakeProvider(fail=True), FakeSessionRepository())
    with pytest.raises(GenAIProviderError):
        await service.chat("hello")


# ── Database context ─────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_context_is_built_from_the_query_pipeline():
    from pharmagenie.application.nlp import QueryAnalyzer
    from pharmagenie.domain.entities import ConsolidatedResults, QueryResult

    analysis = QueryAnalyzer().analyze("recruiting trials")
    trials = [{"trial_id": f"CT-2024-00{i}", "status": "Recruiting"} for i in range(1, 6)]
    result = QueryResult(analysis=analysis, results=ConsolidatedResults(records={"trials": trials}))
    provider = FakeProvider()
    service = GenAIChatService(provider, FakeSessionRepository(), FakeQueryService(result))

    await service.chat("recruiting trials")

    context = provider.requests[0].context
    assert context["database_results"] == {"trials": 5, "total": 5}
    assert [t["trial_id"] for t in context["data"]["trials"]] == [
        "CT-2024-001",
        "CT-2024-002",
        "CT-2024-003",
    ]


@pytest.mark.asyncio
async def test_explicit_context_skips_the_query_pipeline():
    queries = FakeQueryService(error=AssertionError("should not be called"))
    provider = FakeProvider()
    service = GenAIChatService(provider, FakeSessionRepository(), queries)

    await service.chat("hello", context={"database_results": {"total": 0}})

    assert queries.queries == []
    assert provider.requests[0].context == {"database_results": {"total": 0}}


@pytest.mark.asyncio
async def test_context_failure_degrades_to_no_context():
    provider = FakeProvider()
    service = GenAIChatService(
        provider, FakeSessionRepository(), FakeQueryService(error=ConnectionError("down"))
    )
    await service.chat("recruiting trials")
    assert provider.requests[0].context is None


@pytest.mark.asyncio
async def test_blank_message_gets_no_context():
    queries = FakeQueryService()
    service = GenAIChatService(FakeProvider(), FakeSessionRepository(), queries)
    assert await service.build_context("   ") is None
    assert queries.queries == []


# ── stream ───────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_stream_records_the_full_reply_on_done():
    sessions = FakeSessionRepository()
    service = GenAIChatService(FakeProvider(), sessions)

    events = [e async for e in service.stream("hi", session_id="abc")]

    assert [e.type for e in events] == ["chunk", "chunk", "done"]
    messages = sessions.sessions["abc"].messages
    assert messages[1].content == "hi there"
    assert messages[1].tokens == 2


@pytest.mark.asyncio
async def test_stream_turns_provider_errors_into_an_error_event():
    service = GenAIChatService(FakeProvider(fail=True), FakeSessionRepository())
    events = [e async for e in service.stream("hi")]
    assert len(events) == 1
    assert events[0].type == "error"
    assert events[0].error == "backend down"


# ── Sessions ─────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_create_session_records_provider_and_model():
    service = GenAIChatService(FakeProvider(), FakeSessionRepository())
    session = await service.create_session("user-1", {"topic": "oncology"})
    assert session.user_id == "user-1"
    assert session.metadata == {"provider": "fake", "model": "fake-model", "topic": "oncology"}


@pytest.mark.asyncio
async def test_get_and_delete_missing_session_raise_not_found():
    service = GenAIChatService(FakeProvider(), FakeSessionRepository())
    with pytest.raises(EntityNotFoundError):
        await service.get_session("missing")
    with pytest.raises(EntityNotFoundError):
        await service.delete_session("missing")


@pytest.mark.asyncio
async def test_delete_existing_session():
    sessions = FakeSessionRepository()
    service = GenAIChatService(FakeProvider(), sessions)
    session = await service.create_session()
    await service.delete_session(session.session_id)
    assert sessions.sessions == {}
