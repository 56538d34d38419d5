"""Pattern library — the fixed classification rules used by the query analyzer.

Every family is an ordered tuple of named rules. Order matters: intent
detection is first-match-wins and routing output follows declaration order,
so new rules are appended through the ``with_*`` builders rather than by
mutating a shared mapping.
"""

import re
from dataclasses import dataclass, replace
from re import Pattern

from pharmagenie.domain.entities.collections import (
    ADVERSE_EVENTS,
    DRUGS,
    PARTICIPANTS,
    SITES,
    TRIALS,
)

_I = re.IGNORECASE

TRIAL_ID_RE = re.compile(r"\bCT-\d{4}-\d{3}\b", _I)
_PHASE_TOKEN = r"(?:IV|I{1,3}|[1-4])"
# A range such as "II/III" or "1-2" is ambiguous and never matches.
PHASE_RE = re.compile(
    r"\bphase\s+(" + _PHASE_TOKEN + r")\b(?!\s*[/-]\s*" + _PHASE_TOKEN + r"\b)", _I
)
# Drug codes are upper-case by convention; lower-case words like "abc123" are not codes.
DRUG_CODE_RE = re.compile(r"\b[A-Z]{3}\d{3,4}\b")


@dataclass(frozen=True)
class NamedRule:
    """A semantic name bound to one or more patterns, matched as an OR."""

    name: str
    patterns: tuple[Pattern[str], ...]

    def matches(self, text: str) -> bool:
        return any(p.search(text) for p in self.patterns)


@dataclass(frozen=True)
class EntityRule:
    """An entity type and the pattern whose every match is collected."""

    name: str
    pattern: Pattern[str]

    def find_all(self, text: str) -> list[str]:
        return [m.group(0).strip() for m in self.pattern.finditer(text)]


@dataclass(frozen=True)
class ValueRule:
    """Maps a pattern hit to a canonical literal value (e.g. a status)."""

    value: str
    pattern: Pattern[str]


def _words(*alternatives: str) -> Pattern[str]:
    """Case-insensitive whole-word disjunction."""
    return re.compile(r"\b(?:" + "|".join(alternatives) + r")\b", _I)


def _listing(noun: str) -> Pattern[str]:
    """Generic "list/show/find/display/get [all] <noun>" template."""
    return re.compile(
        r"\b(?:list|show|find|display|get)\s+(?:all\s+)?(?:the\s+)?" + noun + r"\b",
        _I,
    )


@dataclass(frozen=True)
class PatternLibrary:
    """Immutable registry of intent, entity, collection and filter rules."""

    intents: tuple[NamedRule, ...]
    entities: tuple[EntityRule, ...]
    collections: tuple[NamedRule, ...]
    statuses: tuple[ValueRule, ...]
    export_formats: tuple[NamedRule, ...]
    default_intent: str = "list"
    default_collection: str = TRIALS
    default_export_format: str = "text"

    def with_intent(self, name: str, *patterns: Pattern[str]) -> "PatternLibrary":
        return replace(self, intents=self.intents + (NamedRule(name, patterns),))

    def with_entity(self, name: str, pattern: Pattern[str]) -> "PatternLibrary":
        return replace(self, entities=self.entities + (EntityRule(name, pattern),))

    def with_collection(self, name: str, *patterns: Pattern[str]) -> "PatternLibrary":
        return replace(
            self, collections=self.collections + (NamedRule(name, patterns),)
        )

    def with_status(self, value: str, pattern: Pattern[str]) -> "PatternLibrary":
        return replace(self, statuses=self.statuses + (ValueRule(value, pattern),))

    @property
    def intent_names(self) -> tuple[str, ...]:
        return tuple(rule.name for rule in self.intents)

    @property
    def collection_names(self) -> tuple[str, ...]:
        return tuple(rule.name for rule in self.collections)


def build_default_library() -> PatternLibrary:
    """Build the pharma-domain rule set."""
    intents = (
        NamedRule("list", (_words("show", "list", "display", "get", "find", "all", "view"),)),
        NamedRule("count", (_words(r"how\s+many", "count", r"number\s+of", "total"),)),
        NamedRule("status", (_words("status", "state", "condition"),)),
        NamedRule("filter", (_words("with", "having", "where", "that", "filter"),)),
        NamedRule("export", (_words("export", "download", "save", "extract"),)),
        NamedRule("specific", (TRIAL_ID_RE, _words("trial", "study"))),
        NamedRule("drug", (_words("drug", "medication", "compound", "pharmaceutical", "medicine"),)),
        NamedRule("site", (_words("site", "location", "facility", "center", "hospital"),)),
        NamedRule("participant", (_words("participant", "patient", "subject", "volunteer", "enrollment"),)),
        NamedRule("adverse", (_words("adverse", r"side\s+effect", "safety", "event", "reaction"),)),
    )

    entities = (
        EntityRule("trialId", TRIAL_ID_RE),
        EntityRule("phase", PHASE_RE),
        EntityRule("status", _words("active", "completed", "recruiting", "suspended", "terminated")),
        EntityRule("drug", DRUG_CODE_RE),
        EntityRule(
            "indication",
            _words(
                "hypertension", "diabetes", "cancer", "alzheimer", "arthritis",
                "depression", "covid", "migraine",
            ),
        ),
        # ISO date before bare year so "2024-03-01" is one match; digits glued
        # to hyphens (as inside trial ids) are not dates.
        EntityRule("date", re.compile(r"(?<![\w-])(?:\d{4}-\d{2}-\d{2}|\d{4})(?![\w-])")),
    )

    collections = (
        NamedRule(TRIALS, (
            _words(r"trials?", r"stud(?:y|ies)", "clinical", r"protocols?", r"sponsors?"),
            TRIAL_ID_RE,
            PHASE_RE,
            _listing(r"(?:trials?|studies)"),
        )),
        NamedRule(DRUGS, (
            _words(
                r"drugs?", r"medications?", r"medicines?", r"compounds?",
                r"pharmaceuticals?", "dosage", r"mechanism\s+of\s+action",
            ),
            DRUG_CODE_RE,
            _listing(r"(?:drugs|medications|medicines)"),
        )),
        NamedRule(SITES, (
            _words(
                r"sites?", r"locations?", r"facilit(?:y|ies)", r"cent(?:er|re)s?",
                r"hospitals?", r"clinics?",
            ),
            _listing(r"(?:sites|locations|hospitals)"),
        )),
        NamedRule(PARTICIPANTS, (
            _words(
                r"participants?", r"patients?", r"subjects?", r"volunteers?",
                r"enroll(?:ed|ment|ments)?", r"enrol(?:led|ment)?", r"demographics?",
            ),
            _listing(r"(?:participants|patients|subjects)"),
        )),
        NamedRule(ADVERSE_EVENTS, (
            _words(
                "adverse", r"side[\s-]effects?", "safety", r"reactions?",
                r"toxicit(?:y|ies)", r"events?",
            ),
            _listing(r"(?:adverse\s+events|side\s+effects)"),
        )),
    )

    statuses = (
        ValueRule("Active", _words("active")),
        ValueRule("Completed", _words("completed")),
        ValueRule("Recruiting", _words("recruiting")),
        ValueRule("Suspended", _words("suspended")),
    )

    export_formats = (
        NamedRule("csv", (_words("csv", r"comma.*separated"),)),
        NamedRule("excel", (_words("excel", "xlsx", "xls", "spreadsheet"),)),
        NamedRule("table", (_words("table", "tabular"),)),
    )

    return PatternLibrary(
        intents=intents,
        entities=entities,
        collections=collections,
        statuses=statuses,
        export_formats=export_formats,
    )


DEFAULT_LIBRARY = build_default_library()
