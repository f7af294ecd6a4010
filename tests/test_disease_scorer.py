import pytest

from tracker.disease_scorer import (
    DISEASE_PATTERNS,
    calculate_pattern_match,
    count_matches,
    detect_early_symptoms,
    determine_stage,
    predict_potential_conditions,
    round_half_up,
    score_patterns,
)
from tracker.schemas import DiseasePattern


def _pattern(symptoms, threshold=0.5, multiplier=90):
    return DiseasePattern(display_name="Test", symptoms=symptoms, threshold=threshold, confidence_multiplier=multiplier)


def test_flu_scored_with_confidence_and_stage():
    results = score_patterns(["fever", "headache", "fatigue", "cough"])
    assert [r["key"] for r in results] == ["flu"]
    flu = results[0]
    assert flu["score"] == pytest.approx(0.8)
    assert flu["confidence"] == 68
    assert flu["stage"].startswith("Active stage")


def test_gastroenteritis_developing_stage():
    results = {r["key"]: r for r in score_patterns(["nausea", "vomiting", "diarrhea"])}
    assert results["gastroenteritis"]["confidence"] == 51
    assert results["gastroenteritis"]["stage"].startswith("Developing stage")


def test_early_stage_when_few_symptoms_include_an_early_one():
    assert determine_stage(["fatigue", "fever"], DISEASE_PATTERNS["flu"]).startswith("Early stage")


def test_single_matched_symptom_never_emits():
    """The two-symptom floor suppresses single-symptom hits even at full score."""
    patterns = {"one": _pattern(["fever"], threshold=0.1)}
    assert score_patterns(["fever"], patterns) == []


def test_match_is_bidirectional_substring():
    patterns = {"throaty": _pattern(["sore-throat", "cough"])}
    results = score_patterns(["throat", "dry-cough-at-night"], patterns)
    assert len(results) == 1
    assert results[0]["matched"] == ["throat", "dry-cough-at-night"]


def test_duplicate_slugs_count_once():
    assert count_matches(["fever", "fever", "fever"], ["fever", "cough"]) == 1


def test_confidence_capped_at_95():
    patterns = {"big": _pattern(["fever", "cough"], multiplier=150)}
    assert score_patterns(["fever", "cough"], patterns)[0]["confidence"] == 95


@pytest.mark.parametrize(
    "base, extra",
    [
        (["fever"], "headache"),
        (["fever", "headache"], "cough"),
        (["nausea"], "unrelated"),
        ([], "runny-nose"),
    ],
)
def test_score_is_monotonic(base, extra):
    """Adding a slug never lowers any pattern's score."""
    for pattern in DISEASE_PATTERNS.values():
        before = calculate_pattern_match(base, pattern.symptoms)
        after = calculate_pattern_match(base + [extra], pattern.symptoms)
        assert after >= before


@pytest.mark.parametrize("value, expected", [(67.5, 68), (67.49, 67), (0.5, 1), (51.0, 51)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_early_warning_uses_last_three_days(make_record, now):
    records = [
        make_record("fatigue", days_ago=1),
        make_record("muscle-tension", days_ago=2),
        make_record("runny-nose", days_ago=5),
        make_record("mild-cough", days_ago=6),
    ]
    warnings = detect_early_symptoms(records, now)
    assert [w.id for w in warnings] == ["early_warning_stress_response"]
    assert warnings[0].priority == "medium"
    assert warnings[0].confidence == 70


def test_predictions_become_suggestions(make_record, now):
    records = [make_record(t) for t in ("fever", "headache", "fatigue", "cough")]
    suggestions = predict_potential_conditions(records, now)
    flu = [s for s in suggestions if s.id == "disease_prediction_flu"]
    assert len(flu) == 1
    assert flu[0].priority == "medium"
    assert flu[0].disease_info["stage"].startswith("Active stage")
