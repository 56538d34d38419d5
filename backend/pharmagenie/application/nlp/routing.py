"""Collection routing — which record collections a query is about."""

from pharmagenie.application.nlp.patterns import DEFAULT_LIBRARY, PatternLibrary


class CollectionRouter:
    """Routes a query to the collections it is relevant to.

    Every collection rule is evaluated independently, so one query can
    target several collections. Output follows library order and falls back
    to the default collection when nothing matches.
    """

    def __init__(self, library: PatternLibrary = DEFAULT_LIBRARY):
        self._library = library

    def detect_collections(self, query: str) -> tuple[str, ...]:
        matched = tuple(
            rule.name for rule in self._library.collections if rule.matches(query)
        )
        return matched or (self._library.default_collection,)
