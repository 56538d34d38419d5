"""Query service — runs analyzed natural-language queries against the record store.

Two-stage flow:
  1. Analysis: the QueryAnalyzer turns the raw text into intent, entities,
     keywords, filters and target collections (pure, no I/O).
  2. Fetch: one read per targeted collection, issued concurrently, joined
     into a ConsolidatedResults.
"""

import asyncio
import logging
from typing import Any

from pharmagenie.application.interfaces.record_store import RecordStore
from pharmagenie.application.nlp.analyzer import QueryAnalyzer
from pharmagenie.application.services.collection_predicates import build_predicate
from pharmagenie.domain.entities.collections import SEARCHABLE_FIELDS
from pharmagenie.domain.entities.query import (
    ConsolidatedResults,
    QueryAnalysis,
    QueryResult,
    RecordPredicate,
)
from pharmagenie.domain.exceptions import StorageUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50


class QueryService:
    """Application service for natural-language record queries.

    Orchestrates analysis and per-collection storage reads. No read is
    retried on failure; failures are reported to the caller.
    """

    def __init__(
        self,
        record_store: RecordStore,
        analyzer: QueryAnalyzer | None = None,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        self._store = record_store
        self._analyzer = analyzer or QueryAnalyzer()
        self._page_size = page_size

    @property
    def page_size(self) -> int:
        return self._page_size

    def analyze(self, query: str) -> QueryAnalysis:
        """Stage 1: analyze raw query text."""
        analysis = self._analyzer.analyze(query)
        logger.info(
            "Query analyzed: intent=%s collections=%s filters=%s keywords=%s",
            analysis.intent,
            list(analysis.collections),
            dict(analysis.filters),
            list(analysis.keywords),
        )
        return analysis

    async def fetch(
        self,
        analysis: QueryAnalysis,
        *,
        allow_partial: bool = False,
    ) -> ConsolidatedResults:
        """Stage 2: read every targeted collection concurrently.

        Cancelling the awaiting task cancels all outstanding reads. When a
        read fails, raises ``StorageUnavailableError`` naming the first failed
        collection, unless ``allow_partial`` is set: the failed collection
        then keeps an empty list and is recorded in ``failures``.
        """
        collections = list(analysis.collections)
        outcomes = await asyncio.gather(
            *(self._read_collection(name, analysis) for name in collections),
            return_exceptions=True,
        )

        results = ConsolidatedResults()
        for name, outcome in zip(collections, outcomes):
            if isinstance(outcome, asyncio.CancelledError):
                raise outcome
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                logger.error("Storage read failed for %s: %s", name, outcome)
                results.records[name] = []
                results.failures[name] = outcome
            else:
                results.records[name] = outcome

        if results.failures and not allow_partial:
            failed = tuple(results.failures)
            first = failed[0]
            raise StorageUnavailableError(
                first, results.failures[first], failed_collections=failed
            )

        logger.info("Query fetch complete: %s", results.summary)
        return results

    async def count(self, analysis: QueryAnalysis) -> dict[str, int]:
        """True per-collection totals for the analysis predicates (unpaged)."""
        collections = list(analysis.collections)
        predicates = [build_predicate(name, analysis) for name in collections]
        outcomes = await asyncio.gather(
            *(self._store.count(name, p) for name, p in zip(collections, predicates)),
            return_exceptions=True,
        )
        totals: dict[str, int] = {}
        for name, outcome in zip(collections, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                raise StorageUnavailableError(name, outcome)
            totals[name] = outcome
        return totals

    async def query(self, text: str, *, allow_partial: bool = False) -> QueryResult:
        """Full flow: analyze → fetch."""
        analysis = self.analyze(text)
        results = await self.fetch(analysis, allow_partial=allow_partial)
        return QueryResult(analysis=analysis, results=results)

    # ── Private helpers ──────────────────────────────────────────────

    async def _read_collection(
        self, collection: str, analysis: QueryAnalysis
    ) -> list[dict[str, Any]]:
        predicate = build_predicate(collection, analysis)
        if not predicate.is_empty:
            return await self._store.find(collection, predicate, limit=self._page_size)

        text_search = " ".join(analysis.keywords)
        if not text_search or not SEARCHABLE_FIELDS.get(collection):
            return await self._store.find(collection, RecordPredicate(), limit=self._page_size)

        records = await self._store.find(
            collection,
            predicate,
            limit=self._page_size,
            text_search=text_search,
        )
        # A keyword search that matches nothing falls back to an unfiltered
        # read, so vague wording still returns the first page.
        if not records:
            logger.info(
                "Keyword search on %s returned nothing, retrying unfiltered. "
                "text_search=%r",
                collection,
                text_search,
            )
            records = await self._store.find(
                collection, RecordPredicate(), limit=self._page_size
            )
        return records
