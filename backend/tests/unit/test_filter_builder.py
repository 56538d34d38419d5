"""Unit tests for filter building and phase normalization."""

import pytest

from pharmagenie.application.nlp.filters import FilterBuilder, normalize_phase


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("1", "Phase I"),
        ("2", "Phase II"),
        ("3", "Phase III"),
        ("4", "Phase IV"),
        ("IV", "Phase IV"),
        ("iv", "Phase IV"),
        ("I", "Phase I"),
        ("ii", "Phase II"),
        ("III", "Phase III"),
    ],
)
def test_normalize_phase(raw, expected):
    assert normalize_phase(raw) == expected


@pytest.mark.parametrize("raw", ["", "5", "IIII", "V", "X", "0", "one"])
def test_normalize_phase_rejects_malformed_tokens(raw):
    assert normalize_phase(raw) is None


@pytest.mark.parametrize(
    ("query", "status"),
    [
        ("Show all active clinical trials", "Active"),
        ("completed studies", "Completed"),
        ("RECRUITING trials", "Recruiting"),
        ("which trials are suspended", "Suspended"),
    ],
)
def test_status_keyword_maps_to_canonical_value(query, status):
    assert FilterBuilder().build_filters(query)["status"] == status


def test_last_matching_status_rule_wins():
    filters = FilterBuilder().build_filters("active or suspended trials")
    assert filters["status"] == "Suspended"


def test_status_requires_whole_word():
    assert "status" not in FilterBuilder().build_filters("inactive trials")


def test_phase_filter_is_normalized():
    assert FilterBuilder().build_filters("Find Phase III diabetes studies")["phase"] == "Phase III"
    assert FilterBuilder().build_filters("phase 4 trials")["phase"] == "Phase IV"
    assert FilterBuilder().build_filters("phase 1 trials")["phase"] == "Phase I"


@pytest.mark.parametrize(
    "query",
    [
        "phase 5 trials",
        "phase IIII trials",
        "Find Phase II/III diabetes studies",
        "phase 1/2 trials",
        "phase I-II trials",
        "phase 2 - 3 oncology studies",
    ],
)
def test_ambiguous_phase_leaves_filter_absent(query):
    assert "phase" not in FilterBuilder().build_filters(query)


def test_drug_code_and_trial_id_filters():
    filters = FilterBuilder().build_filters("ABC123 in ct-2024-007")
    assert filters["drug"] == "ABC123"
    assert filters["trialId"] == "CT-2024-007"


def test_only_resolved_fields_are_present():
    assert FilterBuilder().build_filters("tell me something") == {}
