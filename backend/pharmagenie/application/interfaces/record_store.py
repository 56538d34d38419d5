"""Abstract interface for reading the pharma record collections."""

from abc import ABC, abstractmethod
from typing import Any

from pharmagenie.domain.entities.query import RecordPredicate


class RecordStore(ABC):
    """Port for collection reads — implemented in the infrastructure layer.

    Records are plain dicts keyed by snake_case field names. Implementations
    must allow concurrent calls for different collections.
    """

    @abstractmethod
    async def find(
        self,
        collection: str,
        predicate: RecordPredicate,
        *,
        limit: int,
        text_search: str | None = None,
    ) -> list[dict[str, Any]]:
        """Records of ``collection`` matching ``predicate``, at most ``limit``.

        ``text_search`` is a whitespace-separated keyword string matched
        case-insensitively against the collection's searchable fields.
        """
        ...

    @abstractmethod
    async def count(self, collection: str, predicate: RecordPredicate) -> int:
        """Number of records of ``collection`` matching ``predicate``."""
        ...

    @abstractmethod
    async def get_trial(self, trial_id: str) -> dict[str, Any] | None:
        """A single trial with its sites, participants and adverse events."""
        ...
