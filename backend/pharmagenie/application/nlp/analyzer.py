"""Query analyzer — composes the NLP stages into one immutable analysis."""

import logging

from pharmagenie.application.interfaces.grammatical_tagger import GrammaticalTagger
from pharmagenie.application.nlp.entities import EntityExtractor
from pharmagenie.application.nlp.filters import FilterBuilder
from pharmagenie.application.nlp.intent import IntentClassifier
from pharmagenie.application.nlp.lexical import extract_keywords, tokenize
from pharmagenie.application.nlp.patterns import DEFAULT_LIBRARY, PatternLibrary
from pharmagenie.application.nlp.routing import CollectionRouter
from pharmagenie.domain.entities.query import QueryAnalysis
from pharmagenie.domain.exceptions import MalformedQueryError

logger = logging.getLogger(__name__)


class QueryAnalyzer:
    """Pure, synchronous text-to-analysis pipeline.

    Holds no mutable state beyond its collaborators, so one instance can be
    shared across concurrent requests.
    """

    def __init__(
        self,
        library: PatternLibrary = DEFAULT_LIBRARY,
        tagger: GrammaticalTagger | None = None,
    ):
        self._library = library
        self._intents = IntentClassifier(library)
        self._entities = EntityExtractor(library, tagger)
        self._router = CollectionRouter(library)
        self._filters = FilterBuilder(library)

    @property
    def library(self) -> PatternLibrary:
        return self._library

    def analyze(self, query: str) -> QueryAnalysis:
        """Analyze one raw query. Any string, including "", is valid input."""
        if not isinstance(query, str):
            raise MalformedQueryError(query)

        analysis = QueryAnalysis(
            query=query,
            intent=self._intents.detect_intent(query),
            entities=self._entities.extract_entities(query),
            keywords=tuple(extract_keywords(tokenize(query))),
            filters=self._filters.build_filters(query),
            export_format=self._intents.detect_export_format(query),
            collections=self._router.detect_collections(query),
        )
        logger.debug("Query analysis: %s", analysis.to_dict())
        return analysis
