# tracker/emergency_engine.py

from typing import List

from medical_rules import EMERGENCY_SEVERITY, is_emergency
from tracker.schemas import Suggestion

SYMPTOM_REASONS = {
    "chest-pain": "Chest pain can indicate serious cardiac or pulmonary conditions",
    "shortness-of-breath": "Breathing difficulties require immediate evaluation",
    "difficulty-breathing": "Breathing difficulties require immediate evaluation",
}
GENERIC_REASON = "High-risk symptom requiring professional assessment"


def emergency_symptoms(records) -> list:
    return [r for r in records if is_emergency(r.severity, r.type)]


def emergency_reason(record) -> str:
    if record.severity >= EMERGENCY_SEVERITY:
        return f"Severity level {record.severity}/10 indicates significant distress"
    return SYMPTOM_REASONS.get(record.type, GENERIC_REASON)


def assess_emergency_symptoms(records) -> List[Suggestion]:
    """One critical suggestion when any record is severe or a critical symptom."""
    flagged = emergency_symptoms(records)
    if not flagged:
        return []

    return [Suggestion(
        id="emergency_care",
        title="🚨 Seek Immediate Medical Attention",
        description="You have symptoms that may require urgent medical care.",
        reasoning=". ".join(emergency_reason(r) for r in flagged),
        priority="critical",
        category="emergency",
        actions=[
            "Call emergency services if severe",
            "Visit emergency room",
            "Contact your healthcare provider immediately",
        ],
        timeframe="Immediate",
        confidence=95,
    )]
