import pytest

from medical_rules import CRITICAL_SYMPTOMS
from tracker.schemas import Suggestion
from tracker.suggestion_engine import (
    SuggestionEngine,
    combine_records,
    prioritize_and_format,
    rule_based_suggestions,
)


@pytest.fixture
def engine(kb):
    return SuggestionEngine(kb)


def _suggestion(id_, priority, title="t"):
    return Suggestion(id=id_, title=title, description="d", priority=priority, category="c")


def test_fever_and_headache_suggest_infection(engine, make_record, now):
    records = [make_record("fever", severity=5), make_record("headache", severity=4)]
    suggestions = {s.id: s for s in engine.generate_suggestions(records, records, now)}
    infection = suggestions["infection_pattern"]
    assert infection.priority == "high"
    assert infection.confidence == 85
    assert "respiratory_pattern" not in suggestions


def test_chest_pain_gives_one_critical(engine, make_record, now):
    records = [make_record("chest-pain", severity=9)]
    suggestions = engine.generate_suggestions(records, records, now)
    critical = [s for s in suggestions if s.priority == "critical"]
    assert len(critical) == 1
    assert critical[0].id == "emergency_care"
    assert critical[0].confidence == 95
    assert suggestions[0] is critical[0]


def test_loading_placeholder_before_knowledge():
    [s] = SuggestionEngine().generate_suggestions([])
    assert s.id == "loading"
    assert s.priority == "low"
    assert s.category == "system"


def test_empty_input_yields_nothing(engine, now):
    assert engine.generate_suggestions([], [], now) == []


def test_generation_is_idempotent(engine, make_record, now):
    records = [make_record(t, severity=6) for t in ("fever", "cough", "headache", "fatigue")]
    first = [s.id for s in engine.generate_suggestions(records, records, now)]
    second = [s.id for s in engine.generate_suggestions(records, records, now)]
    assert first == second
    assert len(first) == len(set(first))


def test_output_sorted_by_priority(engine, make_record, now):
    records = [make_record(t, severity=9) for t in ("fever", "cough", "headache")]
    ranks = {"critical": 0, "high": 1, "medium": 2, "low": 3}
    priorities = [ranks[s.priority] for s in engine.generate_suggestions(records, records, now)]
    assert priorities == sorted(priorities)


def test_low_confidence_predictions_dropped(engine, make_record, now):
    """Gastroenteritis at 51% confidence stays out of the aggregate."""
    records = [make_record(t) for t in ("nausea", "vomiting", "diarrhea")]
    ids = [s.id for s in engine.generate_suggestions(records, records, now)]
    assert "disease_prediction_gastroenteritis" not in ids


def test_management_uses_todays_records_only(engine, make_record, now):
    today = [make_record("headache")]
    older = [make_record("cough", days_ago=3)]
    ids = [s.id for s in engine.generate_suggestions(today, older, now)]
    assert "manage_headache" in ids
    assert "manage_cough" not in ids
    assert "preventive_care" in ids


def test_prioritize_is_stable_and_dedupes():
    suggestions = [
        _suggestion("a", "medium"),
        _suggestion("b", "high"),
        _suggestion("c", "medium"),
        _suggestion("a", "critical", title="later duplicate"),
        _suggestion("d", "low"),
        _suggestion("e", "high"),
    ]
    result = prioritize_and_format(suggestions)
    assert [s.id for s in result] == ["b", "e", "a", "c", "d"]
    assert result[2].title == "t"


def test_combine_records_dedupes_by_id(make_record):
    a, b = make_record("fever"), make_record("cough")
    assert combine_records([a], [a, b]) == [a, b]


@pytest.mark.parametrize(
    "symptoms, expected",
    [
        ([], ["rule_wellness"]),
        ([("fever", 4, 1)], ["rule_fever"]),
        ([("headache", 3, 1), ("headache", 3, 2), ("headache", 3, 3)], ["rule_headache_pattern"]),
        ([("back-pain", 9, 1)], ["rule_emergency"]),
        ([("nausea", 3, 1), ("stomach-pain", 3, 2)], ["rule_digestive"]),
        ([("fatigue", 3, 0), ("fatigue", 3, 0), ("cough", 3, 0)], ["rule_fatigue", "rule_rest"]),
    ],
)
def test_rule_based_fallback(make_record, now, symptoms, expected):
    records = [make_record(t, severity=sev, days_ago=d) for t, sev, d in symptoms]
    assert [s.id for s in rule_based_suggestions(records, now)] == expected


@pytest.mark.parametrize("symptom_type", sorted(CRITICAL_SYMPTOMS))
def test_rule_based_flags_every_critical_symptom(make_record, now, symptom_type):
    records = [make_record(symptom_type, severity=3, days_ago=1)]
    assert [s.id for s in rule_based_suggestions(records, now)] == ["rule_emergency"]
