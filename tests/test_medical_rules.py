import pytest

from medical_rules import (
    categorize_severity,
    category_icon,
    expected_timeframe,
    format_duration,
    is_emergency,
    priority_class,
    priority_rank,
    severity_class,
)


@pytest.mark.parametrize(
    "severity, category, css",
    [
        (1, "mild", "severity-low"),
        (3, "mild", "severity-low"),
        (4, "moderate", "severity-medium"),
        (6, "moderate", "severity-medium"),
        (7, "severe", "severity-high"),
        (10, "severe", "severity-high"),
    ],
)
def test_severity_bands(severity, category, css):
    assert categorize_severity(severity) == category
    assert severity_class(severity) == css


def test_priority_rank_order():
    ordered = sorted(["low", "bogus", "critical", "medium", "high"], key=priority_rank)
    assert ordered == ["critical", "high", "medium", "low", "bogus"]


@pytest.mark.parametrize(
    "severity, symptom_type, expected",
    [(8, "headache", True), (7, "headache", False), (1, "shortness-of-breath", True), (1, "shortness-breath", False)],
)
def test_is_emergency(severity, symptom_type, expected):
    assert is_emergency(severity, symptom_type) is expected


def test_lookups_with_defaults():
    assert format_duration("less-than-hour") == "Less than 1 hour"
    assert format_duration("a-while") == "a-while"
    assert expected_timeframe("fever", "moderate") == "2-3 days"
    assert expected_timeframe("rash", "mild") == "1-3 days"
    assert priority_class("critical") == "priority-critical"
    assert priority_class("other") == "priority-medium"
    assert category_icon("emergency") == "🚨"
    assert category_icon("unknown") == "💡"
