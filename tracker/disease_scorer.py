# tracker/disease_scorer.py

"""
Disease scorer: compares the symptom slugs a user has logged against the
disease pattern table and reports the patterns that clear their threshold.

Slugs match in both directions ("throat" matches "sore-throat" and the
other way round), so near-synonyms still count.
"""

from datetime import datetime, timedelta
from typing import Iterable, List

from loguru import logger

from tracker.schemas import DiseasePattern, Suggestion

MIN_MATCHED_SYMPTOMS = 2
MAX_CONFIDENCE = 95
EARLY_WARNING_DAYS = 3

# ------------------------------
# DISEASE PATTERNS
# ------------------------------
DISEASE_PATTERNS = {
    "flu": DiseasePattern(
        display_name="Influenza (Flu)",
        symptoms=["fever", "headache", "muscle-aches", "fatigue", "cough"],
        threshold=0.6,
        confidence_multiplier=85,
        severity="medium",
        description="A viral infection that affects the respiratory system and causes systemic symptoms.",
        causes=["Influenza virus types A, B, or C"],
        early_symptoms=["fatigue", "mild-headache", "body-aches"],
        progression="Symptoms typically worsen over 1-2 days, peak around day 3-4, then gradually improve",
        prevention=["Annual flu vaccination", "Hand hygiene", "Avoid close contact with sick individuals"],
        warning_signs=["Difficulty breathing", "Persistent high fever", "Severe dehydration"],
        recommended_actions=[
            "Rest and stay hydrated",
            "Take antiviral medication if prescribed within 48 hours",
            "Monitor symptoms and seek care if worsening",
        ],
        timeframe="7-10 days",
        risk_factors=["Age >65 or <5", "Chronic conditions", "Pregnancy", "Immunocompromised"],
        complications=["Pneumonia", "Bronchitis", "Sinus infections"],
        prognosis="Most people recover completely within 1-2 weeks",
    ),
    "cold": DiseasePattern(
        display_name="Common Cold",
        symptoms=["runny-nose", "sneezing", "sore-throat", "mild-headache", "cough"],
        threshold=0.5,
        confidence_multiplier=80,
        severity="low",
        description="A viral upper respiratory tract infection causing mild symptoms.",
        causes=["Rhinovirus", "Coronavirus", "Adenovirus"],
        early_symptoms=["scratchy-throat", "sneezing", "runny-nose"],
        progression="Symptoms develop gradually over 1-3 days and peak around day 2-3",
        prevention=["Hand washing", "Avoid touching face", "Maintain distance from sick individuals"],
        warning_signs=["High fever", "Severe headache", "Difficulty swallowing"],
        recommended_actions=[
            "Rest and drink plenty of fluids",
            "Use saline nasal rinses",
            "Consider over-the-counter symptom relief",
        ],
        timeframe="7-10 days",
        risk_factors=["Stress", "Poor sleep", "Close contact with infected individuals"],
        complications=["Secondary bacterial infections", "Sinusitis", "Ear infections"],
        prognosis="Complete recovery expected within 1-2 weeks",
    ),
    "migraine": DiseasePattern(
        display_name="Migraine Headache",
        symptoms=["severe-headache", "nausea", "light-sensitivity", "sound-sensitivity"],
        threshold=0.7,
        confidence_multiplier=90,
        severity="medium",
        description="A neurological condition causing severe, recurring headaches with associated symptoms.",
        causes=["Genetic factors", "Hormonal changes", "Environmental triggers"],
        early_symptoms=["mild-headache", "mood-changes", "food-cravings", "neck-stiffness"],
        progression="May have prodrome phase, followed by severe headache phase lasting 4-72 hours",
        prevention=["Identify and avoid triggers", "Regular sleep schedule", "Stress management"],
        warning_signs=["Sudden severe headache", "Headache with fever", "Changes in vision"],
        recommended_actions=[
            "Rest in dark, quiet room",
            "Apply cold or warm compress",
            "Take prescribed migraine medication early",
        ],
        timeframe="4-72 hours per episode",
        risk_factors=["Family history", "Female gender", "Age 20-50", "Hormonal changes"],
        complications=["Chronic migraine", "Medication overuse headache", "Status migrainosus"],
        prognosis="Manageable with proper treatment and lifestyle modifications",
    ),
    "gastroenteritis": DiseasePattern(
        display_name="Gastroenteritis (Stomach Bug)",
        symptoms=["nausea", "vomiting", "diarrhea", "abdominal-pain", "fever"],
        threshold=0.6,
        confidence_multiplier=85,
        severity="medium",
        description="Inflammation of the stomach and intestines causing digestive symptoms.",
        causes=["Viral infection", "Bacterial infection", "Food poisoning", "Parasites"],
        early_symptoms=["mild-nausea", "loss-of-appetite", "mild-abdominal-discomfort"],
        progression="Symptoms typically develop rapidly and may worsen over 24-48 hours",
        prevention=["Hand hygiene", "Food safety", "Avoid contaminated water"],
        warning_signs=["Severe dehydration", "Blood in stool", "High fever", "Severe abdominal pain"],
        recommended_actions=[
            "Stay hydrated with clear fluids",
            "Follow BRAT diet when tolerated",
            "Rest and avoid dairy/fatty foods",
        ],
        timeframe="1-3 days for viral, longer for bacterial",
        risk_factors=["Travel", "Contaminated food/water", "Close contact with infected individuals"],
        complications=["Dehydration", "Electrolyte imbalance", "Secondary infections"],
        prognosis="Most cases resolve without treatment within a few days",
    ),
}

# Patterns checked against the last few days only
EARLY_PATTERNS = {
    "respiratory_infection": {
        "symptoms": ["scratchy-throat", "mild-cough", "runny-nose"],
        "warning": "Early signs of respiratory infection",
        "prevention": ["Increase fluid intake", "Get extra rest", "Consider zinc supplements"],
    },
    "digestive_issues": {
        "symptoms": ["mild-nausea", "loss-of-appetite", "mild-abdominal-discomfort"],
        "warning": "Early digestive system disturbance",
        "prevention": ["Eat bland foods", "Stay hydrated", "Avoid dairy and spicy foods"],
    },
    "stress_response": {
        "symptoms": ["mild-headache", "fatigue", "muscle-tension"],
        "warning": "Early stress-related symptoms",
        "prevention": ["Practice relaxation techniques", "Ensure adequate sleep", "Consider stress management"],
    },
}


# ----------------------------------------------------------------------
# MATCHING
# ----------------------------------------------------------------------
def slugs_overlap(a: str, b: str) -> bool:
    return a in b or b in a


def unique_slugs(slugs: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(slugs))


def matched_symptoms(user_slugs, pattern_slugs):
    return [s for s in unique_slugs(user_slugs) if any(slugs_overlap(s, p) for p in pattern_slugs)]


def count_matches(user_slugs, pattern_slugs) -> int:
    return len(matched_symptoms(user_slugs, pattern_slugs))


def calculate_pattern_match(user_slugs, pattern_slugs) -> float:
    if not pattern_slugs:
        return 0.0
    return count_matches(user_slugs, pattern_slugs) / len(pattern_slugs)


def determine_stage(user_slugs, pattern: DiseasePattern) -> str:
    user_slugs = unique_slugs(user_slugs)
    early = sum(1 for s in user_slugs if s in pattern.early_symptoms)
    total = sum(1 for s in user_slugs if s in pattern.symptoms)

    if early > 0 and total <= 2:
        return "Early stage - symptoms just beginning"
    if total >= len(pattern.symptoms) * 0.7:
        return "Active stage - full symptom presentation"
    return "Developing stage - symptoms progressing"


def round_half_up(value: float) -> int:
    return int(value + 0.5)


def score_patterns(user_slugs, patterns=None) -> List[dict]:
    """
    Every pattern that clears its threshold with at least two matched slugs.

    Each result: {"key", "pattern", "score", "matched", "confidence", "stage"}.
    """
    patterns = DISEASE_PATTERNS if patterns is None else patterns
    user_slugs = unique_slugs(user_slugs)
    results = []

    for key, pattern in patterns.items():
        matched = matched_symptoms(user_slugs, pattern.symptoms)
        score = len(matched) / len(pattern.symptoms) if pattern.symptoms else 0.0

        if score >= pattern.threshold and len(matched) >= MIN_MATCHED_SYMPTOMS:
            results.append({
                "key": key,
                "pattern": pattern,
                "score": score,
                "matched": matched,
                "confidence": round_half_up(min(MAX_CONFIDENCE, score * pattern.confidence_multiplier)),
                "stage": determine_stage(user_slugs, pattern),
            })

    logger.debug("Scored {} slugs against {} patterns: {} hits", len(user_slugs), len(patterns), len(results))
    return results


# ----------------------------------------------------------------------
# SUGGESTIONS
# ----------------------------------------------------------------------
def disease_reasoning(matched, pattern: DiseasePattern) -> str:
    return (
        f"Based on your symptoms ({', '.join(matched)}), there's a pattern consistent with "
        f"{pattern.display_name}. {pattern.description} This assessment is based on symptom "
        "correlation analysis and medical knowledge patterns."
    )


def prediction_to_suggestion(prediction) -> Suggestion:
    pattern = prediction["pattern"]
    return Suggestion(
        id=f"disease_prediction_{prediction['key']}",
        title=f"🔍 Potential Condition: {pattern.display_name}",
        description=f"Your symptoms suggest you may be experiencing {pattern.display_name.lower()}.",
        reasoning=disease_reasoning(prediction["matched"], pattern),
        priority="high" if pattern.severity == "high" else "medium",
        category="prediction",
        actions=list(pattern.recommended_actions),
        health_info={
            "description": pattern.description,
            "common_causes": pattern.causes,
            "early_symptoms": pattern.early_symptoms,
            "progression": pattern.progression,
            "prevention": pattern.prevention,
            "warning_signs": pattern.warning_signs,
        },
        disease_info={
            "stage": prediction["stage"],
            "risk_factors": pattern.risk_factors,
            "complications": pattern.complications,
            "prognosis": pattern.prognosis,
        },
        timeframe=pattern.timeframe,
        confidence=prediction["confidence"],
    )


def detect_early_symptoms(records, now=None) -> List[Suggestion]:
    now = now or datetime.now()
    cutoff = now - timedelta(days=EARLY_WARNING_DAYS)
    recent = [r for r in records if r.timestamp >= cutoff]
    suggestions = []

    for key, info in EARLY_PATTERNS.items():
        matches = [r for r in recent if any(slugs_overlap(r.type, early) for early in info["symptoms"])]
        if len(matches) < MIN_MATCHED_SYMPTOMS:
            continue

        suggestions.append(Suggestion(
            id=f"early_warning_{key}",
            title=f"⚠️ Early Warning: {info['warning']}",
            description="Your recent symptoms suggest the early stages of a developing condition.",
            reasoning=(
                f"The combination of {', '.join(r.type for r in matches)} in recent days suggests "
                f"{info['warning']}. Early intervention can help prevent progression."
            ),
            priority="medium",
            category="early_warning",
            actions=list(info["prevention"]),
            timeframe="Next 24-48 hours",
            confidence=70,
        ))

    return suggestions


def predict_potential_conditions(records, now=None, patterns=None) -> List[Suggestion]:
    predictions = score_patterns([r.type for r in records], patterns)
    suggestions = [prediction_to_suggestion(p) for p in predictions]
    suggestions.extend(detect_early_symptoms(records, now))
    return suggestions
