"""FastAPI dependency injection — wires infrastructure to application layer."""

import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from functools import lru_cache

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pharmagenie.application.interfaces.genai_provider import GenAIProvider
from pharmagenie.application.interfaces.grammatical_tagger import GrammaticalTagger
from pharmagenie.application.interfaces.record_store import RecordStore
from pharmagenie.application.nlp import QueryAnalyzer
from pharmagenie.application.services import GenAIChatService, QueryService, TrialService
from pharmagenie.config import get_settings
from pharmagenie.infrastructure.database.repositories import (
    SQLAlchemyChatSessionRepository,
    SQLAlchemyRecordStore,
)
from pharmagenie.infrastructure.database.session import async_session_factory, get_db_session
from pharmagenie.infrastructure.genai import create_provider
from pharmagenie.infrastructure.nlp import NullTagger, SpacyTagger
from pharmagenie.infrastructure.rate_limit import SlidingWindowRateLimiter

logger = logging.getLogger(__name__)


# ── Process-wide singletons ──────────────────────────────────────────


@lru_cache
def get_grammatical_tagger() -> GrammaticalTagger:
    """The tagger, built once; the lifespan warms it so the model loads at startup."""
    settings = get_settings()
    if settings.tagger_enabled:
        return SpacyTagger(settings.spacy_model)
    logger.info("Grammatical tagger disabled; place/number entities will be empty")
    return NullTagger()


@lru_cache
def get_query_analyzer() -> QueryAnalyzer:
    return QueryAnalyzer(tagger=get_grammatical_tagger())


@lru_cache
def get_rate_limiter() -> SlidingWindowRateLimiter:
    settings = get_settings()
    return SlidingWindowRateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
        max_clients=settings.rate_limit_max_clients,
    )


@lru_cache
def _fallback_provider() -> GenAIProvider:
    return create_provider(get_settings())


def get_genai_provider(request: Request) -> GenAIProvider:
    """The provider selected at startup, stored on ``app.state`` by the lifespan."""
    provider = getattr(request.app.state, "genai_provider", None)
    if provider is None:
        provider = _fallback_provider()
    return provider


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_session_factory


# ── Request-scoped services ──────────────────────────────────────────


async def get_record_store(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> AsyncGenerator[RecordStore, None]:
    """Provides the record store; it opens one session per collection read."""
    yield SQLAlchemyRecordStore(session_factory)


async def get_query_service(
    record_store: RecordStore = Depends(get_record_store),
    analyzer: QueryAnalyzer = Depends(get_query_analyzer),
) -> AsyncGenerator[QueryService, None]:
    """Provides a QueryService wired to the record store and analyzer."""
    yield QueryService(
        record_store,
        analyzer,
        page_size=get_settings().record_page_size,
    )


async def get_trial_service(
    record_store: RecordStore = Depends(get_record_store),
) -> AsyncGenerator[TrialService, None]:
    yield TrialService(record_store, page_size=get_settings().record_page_size)


async def get_chat_session_repository(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[SQLAlchemyChatSessionRepository, None]:
    yield SQLAlchemyChatSessionRepository(session)


async def get_genai_chat_service(
    provider: GenAIProvider = Depends(get_genai_provider),
    session_repository: SQLAlchemyChatSessionRepository = Depends(get_chat_session_repository),
    query_service: QueryService = Depends(get_query_service),
) -> AsyncGenerator[GenAIChatService, None]:
    """Provides a GenAIChatService with database context and session history."""
    yield GenAIChatService(
        provider=provider,
        session_repository=session_repository,
        query_service=query_service,
    )


@asynccontextmanager
async def open_genai_chat_service(
    provider: GenAIProvider,
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[GenAIChatService]:
    """A GenAIChatService bound to its own DB session.

    For work that outlives the request scope, such as an SSE stream whose
    body is produced after the endpoint returned.
    """
    async with session_factory() as session:
        try:
            yield GenAIChatService(
                provider=provider,
                session_repository=SQLAlchemyChatSessionRepository(session),
            )
            await session.commit()
        except Exception:
            await session.rollback()
            raise
