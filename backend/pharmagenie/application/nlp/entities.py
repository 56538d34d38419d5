"""Entity extraction — pattern matches plus tagger-derived places and numbers."""

import logging

from pharmagenie.application.interfaces.grammatical_tagger import GrammaticalTagger
from pharmagenie.application.nlp.patterns import DEFAULT_LIBRARY, PatternLibrary
from pharmagenie.domain.exceptions import TaggerUnavailableError

logger = logging.getLogger(__name__)

# Reserved keys for tagger output.
PLACES_KEY = "sites"
NUMBERS_KEY = "numbers"


class EntityExtractor:
    """Builds the entity map of a query.

    Each entity rule contributes every non-overlapping match; rules with no
    match are left out of the map entirely. A failing tagger never fails the
    extraction, its buckets are simply omitted.
    """

    def __init__(
        self,
        library: PatternLibrary = DEFAULT_LIBRARY,
        tagger: GrammaticalTagger | None = None,
    ):
        self._library = library
        self._tagger = tagger

    def extract_entities(self, query: str) -> dict[str, tuple[str, ...]]:
        entities: dict[str, tuple[str, ...]] = {}

        for rule in self._library.entities:
            found = [value for value in rule.find_all(query) if value]
            if found:
                entities[rule.name] = tuple(found)

        if self._tagger is not None and query.strip():
            places = self._safe_tag(self._tagger.extract_places, query)
            if places:
                entities[PLACES_KEY] = places
            numbers = self._safe_tag(self._tagger.extract_numbers, query)
            if numbers:
                entities[NUMBERS_KEY] = numbers

        return entities

    @staticmethod
    def _safe_tag(extract, query: str) -> tuple[str, ...]:
        try:
            values = extract(query)
        except TaggerUnavailableError as exc:
            logger.warning("Grammatical tagger unavailable, skipping: %s", exc)
            return ()
        except Exception:
            logger.exception("Grammatical tagger failed, skipping")
            return ()
        return tuple(v.strip() for v in values if v and v.strip())
