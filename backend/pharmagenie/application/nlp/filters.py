"""Filter building — literal field values resolved from query text."""

from pharmagenie.application.nlp.patterns import (
    DEFAULT_LIBRARY,
    DRUG_CODE_RE,
    PHASE_RE,
    TRIAL_ID_RE,
    PatternLibrary,
)


def normalize_phase(raw: str) -> str | None:
    """Canonical ``"Phase <Roman>"`` for a phase token, or None if malformed.

    ``4``/``IV`` map to ``Phase IV``; digits 1-3 become that many ``I``s;
    runs of one to three ``I`` are kept as is.
    """
    token = raw.strip().upper()
    if token in ("IV", "4"):
        return "Phase IV"
    if token in ("1", "2", "3"):
        return "Phase " + "I" * int(token)
    if token and len(token) <= 3 and set(token) == {"I"}:
        return f"Phase {token}"
    return None


class FilterBuilder:
    """Applies the literal-value rules in fixed order.

    Status rules run in library order and the last matching one wins. Phase,
    drug code and trial id each take their first occurrence. Only fields
    with a resolved value appear in the result.
    """

    def __init__(self, library: PatternLibrary = DEFAULT_LIBRARY):
        self._library = library

    def build_filters(self, query: str) -> dict[str, str]:
        filters: dict[str, str] = {}

        for rule in self._library.statuses:
            if rule.pattern.search(query):
                filters["status"] = rule.value

        phase_match = PHASE_RE.search(query)
        if phase_match:
            phase = normalize_phase(phase_match.group(1))
            if phase:
                filters["phase"] = phase

        drug_match = DRUG_CODE_RE.search(query)
        if drug_match:
            filters["drug"] = drug_match.group(0)

        trial_match = TRIAL_ID_RE.search(query)
        if trial_match:
            filters["trialId"] = trial_match.group(0).upper()

        return filters
