"""Chat response formatting — projects fetched records into the chatbot payload."""

from collections import Counter
from typing import Any

from pharmagenie.domain.entities.collections import (
    ADVERSE_EVENTS,
    ALL_COLLECTIONS,
    DRUGS,
    PARTICIPANTS,
    SITES,
    TRIALS,
)
from pharmagenie.domain.entities.query import ConsolidatedResults, QueryAnalysis

_UNKNOWN = "Unknown"


def approval_text(value: Any) -> str:
    """Flatten a drug approval status (plain text or nested by authority)."""
    if isinstance(value, str) and value:
        return value
    if isinstance(value, dict):
        if isinstance(value.get("status"), str) and value["status"]:
            return value["status"]
        fda = value.get("fda") or value.get("FDA")
        if isinstance(fda, dict) and fda.get("approved"):
            return "FDA Approved"
        ema = value.get("ema") or value.get("EMA")
        if isinstance(ema, dict) and ema.get("approved"):
            return "EMA Approved"
    return _UNKNOWN


def _project_trial(t: dict[str, Any]) -> dict[str, Any]:
    current = t.get("current_enrollment")
    target = t.get("enrollment_target")
    return {
        "id": t.get("trial_id"),
        "trial_id": t.get("trial_id"),
        "title": t.get("title"),
        "drug": t.get("drug"),
        "phase": t.get("phase"),
        "status": t.get("status"),
        "indication": t.get("indication"),
        "sponsor": t.get("sponsor"),
        "start_date": t.get("start_date"),
        "end_date": t.get("end_date"),
        "current_enrollment": current,
        "enrollment_target": target,
        "enrollment_progress": f"{current if current is not None else 0}/{target if target is not None else 0}",
        "location": t.get("location"),
        "primary_endpoint": t.get("primary_endpoint"),
        "safety_data": t.get("safety_data"),
    }


def _project_drug(d: dict[str, Any]) -> dict[str, Any]:
    return {
        "drug_id": d.get("drug_id"),
        "name": d.get("name"),
        "drug_class": d.get("drug_class"),
        "approval_status": approval_text(d.get("approval_status")),
        "description": d.get("description"),
        "mechanism": d.get("mechanism_of_action"),
        "indications": d.get("indications"),
        "side_effects": d.get("side_effects"),
        "dosage": d.get("dosage"),
        "pharmacokinetics": d.get("pharmacokinetics"),
    }


def _project_site(s: dict[str, Any]) -> dict[str, Any]:
    return {
        "site_id": s.get("site_id"),
        "name": s.get("name"),
        "city": s.get("city"),
        "state": s.get("state"),
        "country": s.get("country"),
        "postal_code": s.get("postal_code"),
        "capacity": s.get("capacity"),
        "current_trials": s.get("current_trials"),
        "contact": s.get("contact"),
        "facilities": s.get("facilities"),
    }


def _project_participant(p: dict[str, Any]) -> dict[str, Any]:
    return {
        "participant_id": p.get("participant_id"),
        "age": p.get("age"),
        "age_group": p.get("age_group"),
        "gender": p.get("gender"),
        "ethnicity": p.get("ethnicity"),
        "enrollment_status": p.get("enrollment_status"),
        "enrollment_date": p.get("enrollment_date"),
        "trial_id": p.get("trial_id"),
        "site_id": p.get("site_id"),
    }


def _project_adverse_event(e: dict[str, Any]) -> dict[str, Any]:
    return {
        "event_id": e.get("event_id"),
        "term": e.get("term"),
        "severity": e.get("severity"),
        "is_serious": bool(e.get("is_serious")),
        "description": e.get("description"),
        "outcome": e.get("outcome_status"),
        "report_date": e.get("report_date"),
        "onset_date": e.get("onset_date"),
        "resolution_date": e.get("resolution_date"),
        "participant_id": e.get("participant_id"),
        "trial_id": e.get("trial_id"),
    }


_PROJECTIONS = {
    TRIALS: _project_trial,
    DRUGS: _project_drug,
    SITES: _project_site,
    PARTICIPANTS: _project_participant,
    ADVERSE_EVENTS: _project_adverse_event,
}

# Field whose values are tallied in each collection's breakdown.
_BREAKDOWN_KEYS = {
    TRIALS: lambda r: r.get("status"),
    DRUGS: lambda r: approval_text(r.get("approval_status")),
    SITES: lambda r: r.get("country"),
    PARTICIPANTS: lambda r: r.get("gender"),
    ADVERSE_EVENTS: lambda r: r.get("severity"),
}


def build_statistics(results: ConsolidatedResults) -> dict[str, dict[str, Any]]:
    """Per-collection counts and value breakdowns."""
    statistics: dict[str, dict[str, Any]] = {}
    for name in ALL_COLLECTIONS:
        records = results.get(name)
        breakdown = Counter(_BREAKDOWN_KEYS[name](r) or _UNKNOWN for r in records)
        statistics[name] = {"count": len(records), "breakdown": dict(breakdown)}

    events = results.get(ADVERSE_EVENTS)
    if events:
        serious = sum(1 for e in events if e.get("is_serious"))
        statistics[ADVERSE_EVENTS]["serious"] = serious
        statistics[ADVERSE_EVENTS]["non_serious"] = len(events) - serious
    return statistics


def format_chat_response(
    query: str,
    results: ConsolidatedResults,
    analysis: QueryAnalysis,
    totals: dict[str, int] | None = None,
) -> dict[str, Any]:
    """Build the chatbot payload for one analyzed and fetched query.

    ``type`` is ``error`` when nothing matched, ``count`` for counting
    queries, ``detail`` for a single trial looked up by id and ``list``
    otherwise. ``totals`` carries unpaged counts for counting queries.
    """
    total = results.total

    if total == 0:
        return {
            "type": "error",
            "content": f'No results found matching your query: "{query}". Try different search terms.',
            "export_format": analysis.export_format,
            **{name: [] for name in ALL_COLLECTIONS},
        }

    data = {
        name: [_PROJECTIONS[name](r) for r in results.get(name)]
        for name in ALL_COLLECTIONS
        if results.get(name)
    }
    summary = {"total_records": total}
    summary.update({name: len(results.get(name)) for name in ALL_COLLECTIONS})

    response: dict[str, Any] = {
        "content": "consolidated",
        "statistics": build_statistics(results),
        "summary": summary,
        "export_format": analysis.export_format,
    }

    trial_id = analysis.filters.get("trialId")
    if analysis.intent == "count":
        count = sum(totals.values()) if totals else total
        response.update(
            type="count",
            count=count,
            ai_insight=f"Found {count} total records across all collections.",
        )
        if totals:
            response["totals"] = dict(totals)
    elif trial_id and len(results.get(TRIALS)) == 1:
        response.update(
            type="detail",
            ai_insight=f"Detailed information for trial {trial_id}.",
        )
    else:
        response.update(
            type="list",
            ai_insight=f"Retrieved {total} records matching your query.",
        )

    response.update(data)
    return response
