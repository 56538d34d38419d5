"""spaCy-backed grammatical tagger for place names and numeric quantities."""

import logging
import threading
from typing import Any

from pharmagenie.application.interfaces.grammatical_tagger import GrammaticalTagger
from pharmagenie.domain.exceptions import TaggerUnavailableError

logger = logging.getLogger(__name__)

_PLACE_LABELS = frozenset({"GPE", "LOC", "FAC"})


class SpacyTagger(GrammaticalTagger):
    """Loads the spaCy pipeline lazily, on first use.

    Load failures are remembered so a missing model costs one attempt, not
    one per query. Every failure surfaces as ``TaggerUnavailableError``.
    """

    def __init__(self, model_name: str = "en_core_web_sm", *, nlp: Any = None):
        self._model_name = model_name
        self._nlp = nlp
        self._load_error: Exception | None = None
        self._lock = threading.Lock()

    def extract_places(self, text: str) -> list[str]:
        doc = self._parse(text)
        return [ent.text for ent in doc.ents if ent.label_ in _PLACE_LABELS]

    def extract_numbers(self, text: str) -> list[str]:
        doc = self._parse(text)
        return [token.text for token in doc if token.like_num]

    def warm_up(self) -> bool:
        """Load the pipeline now; a missing model is logged, not raised."""
        try:
            self._get_pipeline()
        except TaggerUnavailableError:
            return False
        return True

    def _parse(self, text: str) -> Any:
        nlp = self._get_pipeline()
        try:
            return nlp(text)
        except Exception as exc:
            raise TaggerUnavailableError(f"spaCy failed to process text: {exc}") from exc

    def _get_pipeline(self) -> Any:
        if self._nlp is not None:
            return self._nlp
        with self._lock:
            if self._nlp is None:
                if self._load_error is not None:
                    raise TaggerUnavailableError(
                        f"spaCy model '{self._model_name}' unavailable: {self._load_error}"
                    )
                try:
                    import spacy

                    self._nlp = spacy.load(self._model_name)
                    logger.info("Loaded spaCy model '%s'", self._model_name)
                except Exception as exc:
                    self._load_error = exc
                    logger.warning(
                        "Could not load spaCy model '%s': %s", self._model_name, exc
                    )
                    raise TaggerUnavailableError(
                        f"spaCy model '{self._model_name}' unavailable: {exc}"
                    ) from exc
        return self._nlp


class NullTagger(GrammaticalTagger):
    """Tagger used when grammatical extraction is disabled."""

    def extract_places(self, text: str) -> list[str]:
        return []

    def extract_numbers(self, text: str) -> list[str]:
        return []
