EMERGENCY_SEVERITY = 8

# Canonical slugs; every engine checks critical symptoms against this set.
CRITICAL_SYMPTOMS = [
    "chest-pain",
    "shortness-of-breath",
    "difficulty-breathing",
    "severe-headache",
    "loss-of-consciousness",
    "severe-abdominal-pain",
    "high-fever",
]

PRIORITY_ORDER = {"critical": 0, "high": 1, "medium": 2, "low": 3}

DURATION_LABELS = {
    "less-than-hour": "Less than 1 hour",
    "1-6-hours": "1-6 hours",
    "6-24-hours": "6-24 hours",
    "1-3-days": "1-3 days",
    "more-than-3-days": "More than 3 days",
}

EXPECTED_TIMEFRAMES = {
    "headache": {"mild": "30-60 minutes", "moderate": "1-2 hours", "severe": "2-4 hours"},
    "fever": {"mild": "24-48 hours", "moderate": "2-3 days", "severe": "3-5 days"},
    "cough": {"mild": "3-5 days", "moderate": "1-2 weeks", "severe": "2-3 weeks"},
    "fatigue": {"mild": "1-2 days", "moderate": "3-5 days", "severe": "1-2 weeks"},
}

PRIORITY_CLASSES = {
    "critical": "priority-critical",
    "high": "priority-high",
    "medium": "priority-medium",
    "low": "priority-low",
}

CATEGORY_ICONS = {
    "emergency": "🚨",
    "prediction": "🔍",
    "early_warning": "⚠️",
    "diagnosis": "🩺",
    "treatment": "💊",
    "prevention": "🛡️",
    "medication": "💉",
    "lifestyle": "🏃",
    "system": "⚙️",
}


def categorize_severity(severity):
    if severity <= 3:
        return "mild"
    if severity <= 6:
        return "moderate"
    return "severe"


def severity_class(severity):
    if severity <= 3:
        return "severity-low"
    if severity <= 6:
        return "severity-medium"
    return "severity-high"


def is_emergency(severity, symptom_type):
    """True when a single symptom needs urgent care on its own."""
    return severity >= EMERGENCY_SEVERITY or symptom_type in CRITICAL_SYMPTOMS


def format_duration(duration):
    return DURATION_LABELS.get(duration, duration)


def expected_timeframe(symptom_type, severity_label):
    return EXPECTED_TIMEFRAMES.get(symptom_type, {}).get(severity_label, "1-3 days")


def priority_rank(priority):
    # unknown priorities sort after "low"
    return PRIORITY_ORDER.get(priority, len(PRIORITY_ORDER))


def priority_class(priority):
    return PRIORITY_CLASSES.get(priority, "priority-medium")


def category_icon(category):
    return CATEGORY_ICONS.get(category, "💡")
