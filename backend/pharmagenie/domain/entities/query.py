"""Domain entities for natural-language queries over the record collections."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from pharmagenie.domain.entities.collections import ALL_COLLECTIONS


@dataclass(frozen=True)
class FieldClause:
    """A single field-level constraint on a collection read."""

    field_name: str
    value: Any
    operator: str = "equals"  # "equals" | "contains"


@dataclass(frozen=True)
class RecordPredicate:
    """Conjunction of clauses plus an optional disjunction group.

    A record matches when every ``all_of`` clause holds and, if ``any_of``
    is non-empty, at least one of its clauses holds.
    """

    all_of: tuple[FieldClause, ...] = ()
    any_of: tuple[FieldClause, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.all_of and not self.any_of


@dataclass(frozen=True)
class QueryAnalysis:
    """Immutable analysis of one raw query.

    Computed once per query by the analyzer; never mutated afterwards.
    ``entities`` maps entity-type names to non-empty tuples of matches,
    ``filters`` holds only resolved (non-null) values and ``collections``
    is never empty.
    """

    query: str
    intent: str
    entities: Mapping[str, tuple[str, ...]]
    keywords: tuple[str, ...]
    filters: Mapping[str, str]
    export_format: str
    collections: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "entities", MappingProxyType(dict(self.entities)))
        object.__setattr__(self, "filters", MappingProxyType(dict(self.filters)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueryAnalysis):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash((self.query, self.intent, self.keywords, self.collections))

    def to_dict(self) -> dict[str, Any]:
        """Plain-JSON representation, used for logging and API responses."""
        return {
            "query": self.query,
            "intent": self.intent,
            "entities": {k: list(v) for k, v in self.entities.items()},
            "keywords": list(self.keywords),
            "filters": dict(self.filters),
            "export_format": self.export_format,
            "collections": list(self.collections),
        }


@dataclass
class ConsolidatedResults:
    """Per-collection records fetched for one analysis.

    Every targeted collection has a key in ``records``. A collection whose
    read failed keeps an empty list there and is listed in ``failures``.
    """

    records: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    failures: dict[str, BaseException] = field(default_factory=dict)

    @property
    def missing_collections(self) -> list[str]:
        return [name for name in self.records if name in self.failures]

    @property
    def is_partial(self) -> bool:
        return bool(self.failures)

    @property
    def total(self) -> int:
        return sum(len(rows) for rows in self.records.values())

    @property
    def summary(self) -> dict[str, int]:
        """Record counts per collection in canonical order, plus the total."""
        counts = {
            name: len(self.records[name])
            for name in ALL_COLLECTIONS
            if name in self.records
        }
        counts["total"] = self.total
        return counts

    def get(self, collection: str) -> list[dict[str, Any]]:
        return self.records.get(collection, [])


@dataclass
class QueryResult:
    """Complete query result: the analysis plus the records it matched."""

    analysis: QueryAnalysis
    results: ConsolidatedResults
