"""Intent classification over the pattern library."""

from pharmagenie.application.nlp.patterns import DEFAULT_LIBRARY, PatternLibrary


class IntentClassifier:
    """Resolves a query to exactly one intent name.

    Ties are broken by declaration order in the library: the first matching
    rule wins. Queries matching nothing resolve to the library default
    (``list``).
    """

    def __init__(self, library: PatternLibrary = DEFAULT_LIBRARY):
        self._library = library

    def matching_intents(self, query: str) -> list[str]:
        """All matching intent names, in library order."""
        return [rule.name for rule in self._library.intents if rule.matches(query)]

    def detect_intent(self, query: str) -> str:
        for rule in self._library.intents:
            if rule.matches(query):
                return rule.name
        return self._library.default_intent

    def detect_export_format(self, query: str) -> str:
        for rule in self._library.export_formats:
            if rule.matches(query):
                return rule.name
        return self._library.default_export_format
