# tracker/suggestion_engine.py

"""
Suggestion engine: runs the emergency, disease, pattern, management,
prevention and medication analyses over a symptom list and returns one
deduplicated list ordered critical -> high -> medium -> low.
"""

from datetime import datetime, timedelta
from typing import List, Optional

from loguru import logger

from medical_rules import is_emergency, priority_rank
from tracker.disease_scorer import predict_potential_conditions
from tracker.emergency_engine import assess_emergency_symptoms
from tracker.knowledge_base import KnowledgeBase, load_knowledge
from tracker.schemas import Suggestion
from tracker.treatment_engine import (
    generate_medication_suggestions,
    generate_preventive_care,
    generate_symptom_management,
    is_noise,
)

MIN_PREDICTION_CONFIDENCE = 60

LOADING_SUGGESTION = Suggestion(
    id="loading",
    title="Loading Health Knowledge...",
    description="Please wait while we load the health information database.",
    priority="low",
    category="system",
)

# (required slugs, suggestion)
SYMPTOM_COMBINATIONS = [
    (("fever", "headache"), Suggestion(
        id="infection_pattern",
        title="🦠 Possible Infection Detected",
        description="The combination of fever and headache suggests a possible infection.",
        reasoning=(
            "Fever with headache is commonly associated with viral or bacterial infections. "
            "Your immune system is responding to a potential pathogen."
        ),
        priority="high",
        category="diagnosis",
        actions=[
            "Monitor temperature regularly",
            "Stay hydrated and rest",
            "Consider seeing a healthcare provider if symptoms worsen",
        ],
        health_info={
            "common_causes": ["Viral infection", "Bacterial infection", "Flu", "Cold"],
            "expected_duration": "3-7 days for viral infections",
            "warning_signs": ["Temperature >103°F", "Severe headache", "Neck stiffness"],
        },
        timeframe="24-48 hours for improvement",
        confidence=85,
    )),
    (("cough", "fever"), Suggestion(
        id="respiratory_pattern",
        title="🫁 Respiratory Infection Likely",
        description="Cough with fever indicates a respiratory system infection.",
        reasoning=(
            "The respiratory system is showing signs of inflammation and infection. The cough "
            "is your body's way of clearing irritants while fever indicates immune response."
        ),
        priority="high",
        category="diagnosis",
        actions=[
            "Use humidifier or steam inhalation",
            "Drink warm liquids",
            "Avoid smoke and irritants",
            "Consider medical evaluation if persistent",
        ],
        health_info={
            "common_causes": ["Bronchitis", "Pneumonia", "Upper respiratory infection"],
            "expected_duration": "1-2 weeks",
            "warning_signs": ["Difficulty breathing", "Chest pain", "Blood in cough"],
        },
        timeframe="3-5 days for improvement",
        confidence=80,
    )),
]


def analyze_symptom_patterns(records) -> List[Suggestion]:
    types = {r.type for r in records}
    return [
        suggestion.model_copy(deep=True)
        for required, suggestion in SYMPTOM_COMBINATIONS
        if all(t in types for t in required)
    ]


def prioritize_and_format(suggestions) -> List[Suggestion]:
    """Keep the first suggestion per id, then stable-sort by priority."""
    unique, seen = [], set()
    for suggestion in suggestions:
        if suggestion.id not in seen:
            unique.append(suggestion)
            seen.add(suggestion.id)
    return sorted(unique, key=lambda s: priority_rank(s.priority))


def combine_records(symptoms, recent_symptoms=()):
    combined, seen = [], set()
    for record in list(symptoms) + list(recent_symptoms):
        if record.id not in seen:
            combined.append(record)
            seen.add(record.id)
    return combined


class SuggestionEngine:
    def __init__(self, knowledge: Optional[KnowledgeBase] = None):
        self.knowledge = knowledge

    @property
    def is_loaded(self) -> bool:
        return self.knowledge is not None

    def load_knowledge(self, path):
        self.knowledge = load_knowledge(path)
        return self.knowledge

    def generate_suggestions(self, symptoms, recent_symptoms=(), now=None) -> List[Suggestion]:
        """
        `symptoms` are today's records; `recent_symptoms` the wider window
        used for emergency, disease, pattern and prevention checks.
        """
        if self.knowledge is None:
            return [LOADING_SUGGESTION.model_copy()]

        symptoms = list(symptoms)
        all_records = combine_records(symptoms, recent_symptoms)

        suggestions = []
        suggestions.extend(assess_emergency_symptoms(all_records))
        suggestions.extend(
            s for s in predict_potential_conditions(all_records, now)
            if s.confidence >= MIN_PREDICTION_CONFIDENCE
        )
        suggestions.extend(analyze_symptom_patterns(all_records))
        suggestions.extend(
            s for s in generate_symptom_management(symptoms, self.knowledge) if not is_noise(s)
        )
        suggestions.extend(generate_preventive_care(all_records, self.knowledge))
        suggestions.extend(generate_medication_suggestions(symptoms, self.knowledge))

        result = prioritize_and_format(suggestions)
        logger.debug("Generated {} suggestions from {} records", len(result), len(all_records))
        return result


# ----------------------------------------------------------------------
# RULE-BASED FALLBACK (used when the engine has nothing to say)
# ----------------------------------------------------------------------
def _fallback(id_, title, content, priority, category):
    return Suggestion(id=id_, title=title, description=content, priority=priority, category=category)


def rule_based_suggestions(records, now=None) -> List[Suggestion]:
    now = now or datetime.now()
    cutoff = now - timedelta(days=7)
    recent = [r for r in records if r.timestamp >= cutoff]
    today = [r for r in records if r.date == now.date().isoformat()]
    suggestions = []

    if any(is_emergency(r.severity, r.type) for r in recent):
        suggestions.append(_fallback(
            "rule_emergency", "Seek Medical Attention",
            "You have logged high-severity symptoms or symptoms that may require immediate medical "
            "attention. Consider contacting your healthcare provider or visiting an emergency room.",
            "high", "emergency",
        ))

    if sum(1 for r in recent if r.type == "headache") >= 3:
        suggestions.append(_fallback(
            "rule_headache_pattern", "Headache Pattern Detected",
            "You've logged multiple headaches recently. Consider tracking triggers like stress, sleep, "
            "diet, or screen time. Stay hydrated and maintain regular sleep patterns.",
            "medium", "diagnosis",
        ))

    if any(r.type == "fever" for r in recent):
        suggestions.append(_fallback(
            "rule_fever", "Fever Management",
            "Monitor your temperature regularly, stay hydrated, get plenty of rest, and consider "
            "over-the-counter fever reducers if appropriate. Contact a healthcare provider if fever "
            "persists or worsens.",
            "medium", "treatment",
        ))

    if sum(1 for r in recent if r.type == "fatigue") >= 2:
        suggestions.append(_fallback(
            "rule_fatigue", "Combat Fatigue",
            "Persistent fatigue may indicate need for better sleep hygiene, stress management, or "
            "nutritional support. Ensure 7-9 hours of sleep, regular exercise, and balanced nutrition.",
            "low", "lifestyle",
        ))

    if len(today) > 2:
        suggestions.append(_fallback(
            "rule_rest", "Rest and Recovery",
            "You've logged multiple symptoms today. Consider taking it easy, staying hydrated, and "
            "monitoring your condition. If symptoms worsen or persist, consult a healthcare provider.",
            "medium", "lifestyle",
        ))

    if not recent:
        suggestions.append(_fallback(
            "rule_wellness", "Maintain Wellness",
            "Great job staying healthy! Continue with regular exercise, balanced nutrition, adequate "
            "sleep, and stress management to maintain your well-being.",
            "low", "lifestyle",
        ))

    if sum(1 for r in recent if r.type in ("nausea", "stomach-pain")) >= 2:
        suggestions.append(_fallback(
            "rule_digestive", "Digestive Health",
            "Consider dietary modifications: eat smaller, frequent meals, avoid spicy or fatty foods, "
            "stay hydrated, and consider probiotics. If symptoms persist, consult a healthcare provider.",
            "medium", "lifestyle",
        ))

    return suggestions
