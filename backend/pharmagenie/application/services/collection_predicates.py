"""Per-collection predicate construction from a query analysis.

Each builder turns the analysis filters, entities and keywords into a
``RecordPredicate`` for one collection. An empty predicate means the
collection falls back to keyword search (or an unfiltered read).
"""

from collections.abc import Callable

from pharmagenie.application.nlp.entities import PLACES_KEY
from pharmagenie.domain.entities.collections import (
    ADVERSE_EVENTS,
    DRUGS,
    PARTICIPANTS,
    SITES,
    TRIALS,
)
from pharmagenie.domain.entities.query import FieldClause, QueryAnalysis, RecordPredicate

_SEVERITIES = {"mild": "Mild", "moderate": "Moderate", "severe": "Severe"}
_GENDERS = {"male": "Male", "female": "Female"}


def trial_predicate(analysis: QueryAnalysis) -> RecordPredicate:
    filters = analysis.filters
    clauses: list[FieldClause] = []
    if "trialId" in filters:
        clauses.append(FieldClause("trial_id", filters["trialId"]))
    if "status" in filters:
        clauses.append(FieldClause("status", filters["status"]))
    if "phase" in filters:
        clauses.append(FieldClause("phase", filters["phase"]))
    if "drug" in filters:
        clauses.append(FieldClause("drug", filters["drug"], "contains"))
    indications = analysis.entities.get("indication")
    if indications:
        clauses.append(FieldClause("indication", indications[0], "contains"))
    return RecordPredicate(all_of=tuple(clauses))


def drug_predicate(analysis: QueryAnalysis) -> RecordPredicate:
    code = analysis.filters.get("drug")
    if not code:
        return RecordPredicate()
    return RecordPredicate(
        any_of=(
            FieldClause("drug_id", code, "contains"),
            FieldClause("name", code, "contains"),
        )
    )


def site_predicate(analysis: QueryAnalysis) -> RecordPredicate:
    places = analysis.entities.get(PLACES_KEY, ())
    if not places:
        return RecordPredicate()
    return RecordPredicate(
        any_of=tuple(
            FieldClause(field_name, place, "contains")
            for place in places
            for field_name in ("city", "country")
        )
    )


def participant_predicate(analysis: QueryAnalysis) -> RecordPredicate:
    clauses: list[FieldClause] = []
    if "trialId" in analysis.filters:
        clauses.append(FieldClause("trial_id", analysis.filters["trialId"]))
    keywords = set(analysis.keywords)
    if "active" in keywords:
        clauses.append(FieldClause("enrollment_status", "Active"))
    # "female" is checked last so it wins when both words appear.
    for word, gender in _GENDERS.items():
        if word in keywords:
            clauses = [c for c in clauses if c.field_name != "gender"]
            clauses.append(FieldClause("gender", gender))
    return RecordPredicate(all_of=tuple(clauses))


def adverse_event_predicate(analysis: QueryAnalysis) -> RecordPredicate:
    clauses: list[FieldClause] = []
    if "trialId" in analysis.filters:
        clauses.append(FieldClause("trial_id", analysis.filters["trialId"]))
    keywords = set(analysis.keywords)
    if "serious" in keywords:
        clauses.append(FieldClause("is_serious", True))
    for word, severity in _SEVERITIES.items():
        if word in keywords:
            clauses = [c for c in clauses if c.field_name != "severity"]
            clauses.append(FieldClause("severity", severity))
    return RecordPredicate(all_of=tuple(clauses))


PREDICATE_BUILDERS: dict[str, Callable[[QueryAnalysis], RecordPredicate]] = {
    TRIALS: trial_predicate,
    DRUGS: drug_predicate,
    SITES: site_predicate,
    PARTICIPANTS: participant_predicate,
    ADVERSE_EVENTS: adverse_event_predicate,
}


def build_predicate(collection: str, analysis: QueryAnalysis) -> RecordPredicate:
    """Predicate for ``collection``; unknown collections get an empty one."""
    builder = PREDICATE_BUILDERS.get(collection)
    return builder(analysis) if builder else RecordPredicate()
