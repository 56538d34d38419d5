"""GenAI chat endpoints — replies, SSE streaming and chat sessions.

Every route here is rate limited per client.
"""

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request, Response, status
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pharmagenie.application.interfaces.genai_provider import GenAIProvider
from pharmagenie.application.schemas import (
    ChatSessionResponse,
    CreateSessionRequest,
    GenAIChatRequest,
    GenAIChatResponse,
    SessionMessageResponse,
    TokenUsageResponse,
)
from pharmagenie.application.services import GenAIChatService
from pharmagenie.domain.entities import ChatMessage, ChatSession, StreamEvent
from pharmagenie.domain.exceptions import (
    EntityNotFoundError,
    GenAIProviderError,
    RateLimitExceededError,
)
from pharmagenie.infrastructure.dependencies import (
    get_genai_chat_service,
    get_genai_provider,
    get_rate_limiter,
    get_session_factory,
    open_genai_chat_service,
)
from pharmagenie.infrastructure.rate_limit import SlidingWindowRateLimiter

logger = logging.getLogger(__name__)


def _client_id(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def enforce_rate_limit(
    request: Request,
    response: Response,
    limiter: SlidingWindowRateLimiter = Depends(get_rate_limiter),
) -> None:
    """Count the request against the client's window; 429 when exhausted."""
    try:
        remaining = limiter.hit(_client_id(request))
    except RateLimitExceededError as e:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={"message": str(e), "retry_after": e.retry_after},
            headers={"Retry-After": str(e.retry_after)},
        )
    response.headers["X-RateLimit-Limit"] = str(limiter.max_requests)
    response.headers["X-RateLimit-Remaining"] = str(remaining)


router = APIRouter(
    prefix="/genai",
    tags=["GenAI Chat"],
    dependencies=[Depends(enforce_rate_limit)],
)

_SessionId = Path(..., min_length=1, max_length=36)


def _session_response(session: ChatSession) -> ChatSessionResponse:
    return ChatSessionResponse(
        session_id=session.session_id,
        user_id=session.user_id,
        message_count=session.message_count,
        total_tokens=session.total_tokens,
        metadata=session.metadata,
        messages=[
            SessionMessageResponse(
                role=m.role,
                content=m.content,
                tokens=m.tokens,
                timestamp=m.timestamp.isoformat() if m.timestamp else None,
            )
            for m in session.messages
        ],
        created_at=session.created_at.isoformat() if session.created_at else None,
        updated_at=session.updated_at.isoformat() if session.updated_at else None,
    )


def _event_data(event: StreamEvent) -> str:
    payload: dict = {"type": event.type}
    if event.type == "error":
        payload["error"] = event.error
    else:
        payload["content"] = event.content
    if event.usage is not None:
        payload["usage"] = {
            "prompt_tokens": event.usage.prompt_tokens,
            "completion_tokens": event.usage.completion_tokens,
            "total_tokens": event.usage.total_tokens,
        }
    return f"data: {json.dumps(payload)}\n\n"


@router.post("/chat", response_model=GenAIChatResponse)
async def genai_chat(
    request: GenAIChatRequest,
    service: GenAIChatService = Depends(get_genai_chat_service),
) -> GenAIChatResponse:
    """Generate a reply; without explicit context, database results are supplied."""
    try:
        result = await service.chat(
            request.message,
            session_id=request.session_id,
            history=[ChatMessage(role=m.role, content=m.content) for m in request.history],
            context=request.context,
        )
    except GenAIProviderError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"[{e.provider}] {e.message}",
        )

    return GenAIChatResponse(
        content=result.content,
        model=result.model,
        provider=result.provider,
        finish_reason=result.finish_reason,
        usage=TokenUsageResponse(
            prompt_tokens=result.usage.prompt_tokens,
            completion_tokens=result.usage.completion_tokens,
            total_tokens=result.usage.total_tokens,
        ),
        latency_ms=result.latency_ms,
        session_id=request.session_id,
    )


@router.get("/stream")
async def genai_stream(
    message: str = Query(..., min_length=1, max_length=10000),
    session_id: str | None = Query(default=None, alias="sessionId", max_length=36),
    provider: GenAIProvider = Depends(get_genai_provider),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> StreamingResponse:
    """Stream a reply via Server-Sent Events.

    Each event is a ``data: {...}`` line of type chunk, done or error.
    """
    if not message.strip():
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="message query parameter is required",
        )

    async def event_generator():
        async with open_genai_chat_service(provider, session_factory) as service:
            async for event in service.stream(message, session_id=session_id):
                yield _event_data(event)

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@router.post(
    "/sessions",
    response_model=ChatSessionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_session(
    request: CreateSessionRequest,
    service: GenAIChatService = Depends(get_genai_chat_service),
) -> ChatSessionResponse:
    session = await service.create_session(request.user_id, request.metadata)
    return _session_response(session)


@router.get("/sessions/{session_id}", response_model=ChatSessionResponse)
async def get_session(
    session_id: str = _SessionId,
    service: GenAIChatService = Depends(get_genai_chat_service),
) -> ChatSessionResponse:
    """A chat session with its full message history."""
    try:
        session = await service.get_session(session_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return _session_response(session)


@router.delete("/sessions/{session_id}")
async def delete_session(
    session_id: str = _SessionId,
    service: GenAIChatService = Depends(get_genai_chat_service),
) -> dict:
    try:
        await service.delete_session(session_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"message": "Session deleted successfully", "session_id": session_id}
