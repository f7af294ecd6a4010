# tracker/treatment_engine.py

from typing import List

from medical_rules import categorize_severity, expected_timeframe
from tracker.schemas import Suggestion
from tracker.symptom_matcher import format_symptom_name

# symptom type -> knowledge base medication keys
MEDICATION_MAP = {
    "headache": ["acetaminophen", "ibuprofen"],
    "fever": ["acetaminophen", "ibuprofen"],
    "cough": ["dextromethorphan"],
    "nausea": ["ginger", "ondansetron"],
}

# Shown alongside management suggestions
RELEVANT_MEDICATIONS = {
    "headache": ["Acetaminophen (Tylenol)", "Ibuprofen (Advil)"],
    "fever": ["Acetaminophen (Tylenol)", "Ibuprofen (Advil)"],
    "cough": ["Dextromethorphan (Robitussin)", "Honey"],
    "nausea": ["Ginger", "Dramamine"],
}

MECHANISMS = {
    "acetaminophen": {
        "headache": "blocks pain signals in the brain",
        "fever": "affects the brain's temperature control center",
    },
    "ibuprofen": {
        "headache": "reduces inflammation and blocks pain signals",
        "fever": "reduces inflammation and affects temperature regulation",
    },
}

LIFESTYLE_RECOMMENDATIONS = [
    "Maintain regular sleep schedule (7-9 hours)",
    "Stay hydrated (8-10 glasses water daily)",
    "Exercise regularly (30 minutes, 5 days/week)",
    "Manage stress through relaxation techniques",
    "Eat balanced, nutritious meals",
    "Avoid known triggers",
]


def medication_mechanism(medication, symptom_type):
    return MECHANISMS.get(medication, {}).get(symptom_type, "provides therapeutic benefit")


# ----------------------------------------------------------------------
# PER-SYMPTOM MANAGEMENT
# ----------------------------------------------------------------------
def management_reasoning(record, knowledge) -> str:
    severity = categorize_severity(record.severity)
    return (
        f"Your {severity} {record.type} ({knowledge.description.lower()}) can be managed with "
        "targeted interventions. The recommended treatments address the underlying causes "
        "and provide symptom relief."
    )


def generate_symptom_management(records, kb) -> List[Suggestion]:
    suggestions = []
    for record in records:
        knowledge = kb.symptoms.get(record.type)
        if knowledge is None:
            continue

        severity = categorize_severity(record.severity)
        suggestions.append(Suggestion(
            id=f"manage_{record.type}",
            title=f"💊 {format_symptom_name(record.type)} Management",
            description=f"Targeted treatment for your {severity} {record.type}.",
            reasoning=management_reasoning(record, knowledge),
            priority="high" if severity == "severe" else "medium",
            category="treatment",
            actions=list(knowledge.treatments.immediate),
            health_info={
                "description": knowledge.description,
                "common_causes": knowledge.common_causes,
                "prevention": knowledge.treatments.prevention,
            },
            medications=RELEVANT_MEDICATIONS.get(record.type, []),
            timeframe=expected_timeframe(record.type, severity),
            confidence=75,
        ))
    return suggestions


def is_noise(suggestion: Suggestion) -> bool:
    return suggestion.priority == "low" and suggestion.confidence < 70


# ----------------------------------------------------------------------
# PREVENTION
# ----------------------------------------------------------------------
def preventive_actions(symptom_types, kb) -> List[str]:
    actions = []
    for symptom_type in symptom_types:
        knowledge = kb.symptoms.get(symptom_type)
        if knowledge is None:
            continue
        for action in knowledge.treatments.prevention:
            if action not in actions:
                actions.append(action)
    return actions


def generate_preventive_care(records, kb) -> List[Suggestion]:
    symptom_types = list(dict.fromkeys(r.type for r in records))
    if not symptom_types:
        return []

    return [Suggestion(
        id="preventive_care",
        title="🛡️ Prevention Strategy",
        description="Prevent future occurrences of your symptoms.",
        reasoning=(
            "Based on your symptom history, these preventive measures can help reduce the "
            "likelihood of recurrence and improve your overall health."
        ),
        priority="low",
        category="prevention",
        actions=preventive_actions(symptom_types, kb),
        health_info={
            "benefits": "Reduces symptom frequency and severity",
            "timeline": "Benefits typically seen within 2-4 weeks",
            "lifestyle": LIFESTYLE_RECOMMENDATIONS,
        },
        timeframe="Ongoing",
        confidence=70,
    )]


# ----------------------------------------------------------------------
# MEDICATION
# ----------------------------------------------------------------------
def generate_medication_suggestions(records, kb) -> List[Suggestion]:
    suggestions = []
    for record in records:
        for med_name in MEDICATION_MAP.get(record.type, []):
            med = kb.medications.get(med_name)
            if med is None:
                continue

            suggestions.append(Suggestion(
                id=f"medication_{med_name}_{record.type}",
                title=f"💊 {med.brand_names[0]} ({med.generic_name})",
                description=f"Over-the-counter medication for {record.type} relief.",
                reasoning=(
                    f"{med.generic_name} is effective for {record.type} because it "
                    f"{medication_mechanism(med_name, record.type)}."
                ),
                priority="medium",
                category="medication",
                actions=[
                    f"Take {med.dosage}",
                    "Follow package instructions",
                    "Do not exceed recommended dose",
                ],
                health_info={
                    "uses": med.uses,
                    "side_effects": med.side_effects,
                    "contraindications": med.contraindications,
                    "brand_names": med.brand_names,
                },
                timeframe="30-60 minutes for effect",
                confidence=85,
            ))
    return suggestions
