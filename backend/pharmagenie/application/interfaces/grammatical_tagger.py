"""Abstract interface for general-purpose grammatical taggers."""

from abc import ABC, abstractmethod


class GrammaticalTagger(ABC):
    """Port for free-form place and number extraction.

    Implementations raise ``TaggerUnavailableError`` when they cannot
    process text; callers degrade to empty results.
    """

    @abstractmethod
    def extract_places(self, text: str) -> list[str]:
        """Place names mentioned in ``text``, in order of appearance."""
        ...

    @abstractmethod
    def extract_numbers(self, text: str) -> list[str]:
        """Numeric quantities mentioned in ``text``, in order of appearance."""
        ...

    def warm_up(self) -> bool:
        """Load any model ahead of the first query. Returns True when ready."""
        return True
