"""Names of the five record collections served by the chatbot."""

TRIALS = "trials"
DRUGS = "drugs"
SITES = "sites"
PARTICIPANTS = "participants"
ADVERSE_EVENTS = "adverseEvents"

# Canonical ordering used for routing output, summaries and exports.
ALL_COLLECTIONS: tuple[str, ...] = (
    TRIALS,
    DRUGS,
    SITES,
    PARTICIPANTS,
    ADVERSE_EVENTS,
)

# Fields matched by keyword (free-text) search, per collection.
SEARCHABLE_FIELDS: dict[str, tuple[str, ...]] = {
    TRIALS: ("title", "description", "indication"),
    DRUGS: ("name", "drug_class", "description", "mechanism_of_action"),
    SITES: ("name", "city", "country"),
    PARTICIPANTS: (),
    ADVERSE_EVENTS: (),
}
