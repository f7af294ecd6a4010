# tracker/symptom_matcher.py

import re
from typing import Iterable, List, Optional

from tracker.schemas import SymptomDefinition

# ------------------------------
# SYMPTOM DATABASE (name, category, keywords)
# ------------------------------
# Order matters: the first definition that matches a phrase wins.
SYMPTOM_DATABASE = [
    # Pain & Discomfort
    SymptomDefinition(name="Headache", category="pain", icon="🤕", keywords=["head", "migraine", "tension"]),
    SymptomDefinition(name="Chest Pain", category="pain", icon="❤️", keywords=["chest", "heart", "cardiac"]),
    SymptomDefinition(name="Stomach Pain", category="pain", icon="🤢", keywords=["stomach", "abdominal", "belly"]),
    SymptomDefinition(name="Joint Pain", category="pain", icon="🦴", keywords=["joint", "arthritis", "knee", "elbow"]),
    SymptomDefinition(name="Back Pain", category="pain", icon="🦴", keywords=["back", "spine", "lower back"]),
    SymptomDefinition(name="Muscle Pain", category="pain", icon="💪", keywords=["muscle", "sore", "ache"]),
    SymptomDefinition(name="Neck Pain", category="pain", icon="🤕", keywords=["neck", "stiff neck"]),
    SymptomDefinition(name="Tooth Pain", category="pain", icon="🦷", keywords=["tooth", "dental", "toothache"]),

    # Respiratory
    SymptomDefinition(name="Cough", category="respiratory", icon="🫁", keywords=["cough", "dry cough", "wet cough"]),
    SymptomDefinition(name="Shortness of Breath", category="respiratory", icon="🌬️", keywords=["breath", "breathing", "dyspnea"]),
    SymptomDefinition(name="Sore Throat", category="respiratory", icon="🗣️", keywords=["throat", "sore", "scratchy"]),
    SymptomDefinition(name="Runny Nose", category="respiratory", icon="🤧", keywords=["nose", "runny", "congestion"]),
    SymptomDefinition(name="Sneezing", category="respiratory", icon="🤧", keywords=["sneeze", "sneezing"]),
    SymptomDefinition(name="Wheezing", category="respiratory", icon="🫁", keywords=["wheeze", "wheezing", "asthma"]),

    # General
    SymptomDefinition(name="Fever", category="general", icon="🌡️", keywords=["fever", "temperature", "hot"]),
    SymptomDefinition(name="Fatigue", category="general", icon="🛏️", keywords=["tired", "exhausted", "fatigue", "weakness"]),
    SymptomDefinition(name="Nausea", category="general", icon="😵", keywords=["nausea", "sick", "queasy"]),
    SymptomDefinition(name="Dizziness", category="general", icon="😵", keywords=["dizzy", "lightheaded", "vertigo"]),
    SymptomDefinition(name="Chills", category="general", icon="❄️", keywords=["chills", "cold", "shivering"]),
    SymptomDefinition(name="Sweating", category="general", icon="💧", keywords=["sweat", "sweating", "perspiration"]),
    SymptomDefinition(name="Loss of Appetite", category="general", icon="🍽️", keywords=["appetite", "hunger", "eating"]),
    SymptomDefinition(name="Weight Loss", category="general", icon="⚖️", keywords=["weight", "loss", "thin"]),

    # Mental Health
    SymptomDefinition(name="Anxiety", category="mental", icon="🧠", keywords=["anxiety", "worry", "nervous"]),
    SymptomDefinition(name="Depression", category="mental", icon="😢", keywords=["depression", "sad", "mood"]),
    SymptomDefinition(name="Insomnia", category="mental", icon="🌙", keywords=["sleep", "insomnia", "sleepless"]),
    SymptomDefinition(name="Stress", category="mental", icon="🧠", keywords=["stress", "pressure", "overwhelmed"]),
    SymptomDefinition(name="Confusion", category="mental", icon="❓", keywords=["confusion", "confused", "memory", "disoriented"]),
    SymptomDefinition(name="Mood Swings", category="mental", icon="🎭", keywords=["mood", "emotional", "irritable"]),

    # Digestive
    SymptomDefinition(name="Vomiting", category="digestive", icon="🤮", keywords=["vomit", "throwing up", "sick"]),
    SymptomDefinition(name="Diarrhea", category="digestive", icon="🚽", keywords=["diarrhea", "loose stool", "bowel"]),
    SymptomDefinition(name="Constipation", category="digestive", icon="🚽", keywords=["constipation", "blocked", "bowel"]),
    SymptomDefinition(name="Heartburn", category="digestive", icon="🔥", keywords=["heartburn", "acid", "reflux"]),
    SymptomDefinition(name="Bloating", category="digestive", icon="🎈", keywords=["bloating", "gas", "swollen"]),

    # Skin
    SymptomDefinition(name="Rash", category="skin", icon="🩹", keywords=["rash", "skin", "red"]),
    SymptomDefinition(name="Itching", category="skin", icon="✋", keywords=["itch", "itchy", "scratch"]),
    SymptomDefinition(name="Bruising", category="skin", icon="🩹", keywords=["bruise", "bruising", "purple"]),
    SymptomDefinition(name="Swelling", category="skin", icon="🎈", keywords=["swelling", "swollen", "inflammation"]),

    # Neurological
    SymptomDefinition(name="Severe Headache", category="neurological", icon="🤯", keywords=["worst headache", "thunderclap"]),
    SymptomDefinition(name="Migraine", category="neurological", icon="🤯", keywords=["migraine", "severe headache", "throbbing"]),
    SymptomDefinition(name="Numbness", category="neurological", icon="✋", keywords=["numbness", "numb", "tingling"]),
    SymptomDefinition(name="Tingling", category="neurological", icon="✋", keywords=["tingling", "pins needles", "sensation"]),
]

# Symptoms that commonly show up together, keyed by lowercase display name
SMART_COMBINATIONS = {
    "fever": ["headache", "fatigue", "chills", "muscle pain"],
    "headache": ["nausea", "dizziness", "fatigue"],
    "nausea": ["vomiting", "dizziness", "stomach pain"],
    "cough": ["sore throat", "runny nose", "fever"],
    "fatigue": ["headache", "muscle pain", "weakness"],
    "anxiety": ["insomnia", "stress", "heart palpitations"],
    "stomach pain": ["nausea", "bloating", "heartburn"],
}

STOP_WORDS = ["and", "or", "the", "a", "an", "with", "have", "has", "feel", "feeling"]

VALID_SYMPTOM_PATTERN = re.compile(r"^[a-zA-Z\s\-']+$")
MIN_SYMPTOM_LENGTH = 2
MAX_SYMPTOM_LENGTH = 50


def to_slug(name: str) -> str:
    return re.sub(r"\s+", "-", name.strip().lower())


def format_symptom_name(value: str) -> str:
    """'chest-pain' / 'chest pain' -> 'Chest Pain'."""
    words = re.split(r"[-\s]+", value.strip())
    return " ".join(w[:1].upper() + w[1:] for w in words if w)


def split_symptom_input(text: str) -> List[str]:
    return [part.strip() for part in re.split(r"[,;]+", text) if part.strip()]


def merge_selected(selected: Iterable[str], names: Iterable[str]) -> List[str]:
    """Append names to the selection, skipping case-insensitive duplicates."""
    merged = list(selected)
    seen = {s.lower() for s in merged}
    for name in names:
        if name.lower() not in seen:
            merged.append(name)
            seen.add(name.lower())
    return merged


class SymptomMatcher:
    def __init__(self, definitions=None, extra_stop_words=()):
        self.definitions = list(definitions if definitions is not None else SYMPTOM_DATABASE)
        self.stop_words = set(STOP_WORDS) | {w.lower() for w in extra_stop_words}

    def find_best_match(self, text: str) -> Optional[SymptomDefinition]:
        query = text.strip().lower()
        if not query:
            return None

        for symptom in self.definitions:
            if symptom.name.lower() == query:
                return symptom

        for symptom in self.definitions:
            name = symptom.name.lower()
            if query in name or name in query:
                return symptom

        for symptom in self.definitions:
            for keyword in symptom.keywords:
                keyword = keyword.lower()
                if query in keyword or keyword in query:
                    return symptom

        return None

    def is_valid_symptom_input(self, text: str) -> bool:
        text = text.strip()
        return (
            MIN_SYMPTOM_LENGTH <= len(text) <= MAX_SYMPTOM_LENGTH
            and VALID_SYMPTOM_PATTERN.match(text) is not None
            and text.lower() not in self.stop_words
        )

    def resolve(self, phrase: str) -> Optional[str]:
        """Canonical name for one phrase, a title-cased custom symptom, or None."""
        match = self.find_best_match(phrase)
        if match:
            return match.name
        if self.is_valid_symptom_input(phrase):
            return format_symptom_name(phrase)
        return None

    def resolve_input(self, text: str) -> List[str]:
        names = []
        for phrase in split_symptom_input(text):
            name = self.resolve(phrase)
            if name:
                names.append(name)
        return merge_selected([], names)

    def definition_for(self, name: str) -> Optional[SymptomDefinition]:
        for symptom in self.definitions:
            if symptom.name.lower() == name.lower():
                return symptom
        return None

    # ------------------------------
    # AUTOCOMPLETE
    # ------------------------------
    def smart_suggestions(self, query: str, selected: Iterable[str]) -> List[SymptomDefinition]:
        selected = list(selected)
        query = query.strip().lower()
        if not selected or len(query) < 2:
            return []

        chosen = {s.lower() for s in selected}
        results = []
        for sel in selected:
            for related in SMART_COMBINATIONS.get(sel.lower(), []):
                if query not in related or related in chosen:
                    continue
                known = self.definition_for(related)
                results.append(known or SymptomDefinition(
                    name=format_symptom_name(related), category="related", keywords=[related],
                ))

        unique, seen = [], set()
        for symptom in results:
            if symptom.name.lower() not in seen:
                unique.append(symptom)
                seen.add(symptom.name.lower())
        return unique

    def search(self, query: str, selected: Iterable[str] = (), limit: int = 8) -> List[SymptomDefinition]:
        """Known symptoms whose name, keyword or category contains the query."""
        selected = list(selected)
        query = query.strip().lower()
        if not query:
            return []

        chosen = {s.lower() for s in selected}
        hits = [
            s for s in self.definitions
            if s.name.lower() not in chosen and (
                query in s.name.lower()
                or any(query in k for k in s.keywords)
                or query in s.category.lower()
            )
        ]
        return (hits + self.smart_suggestions(query, selected))[:limit]

    def consider_adding(self, symptom: str, selected: Iterable[str], count: int = 2) -> List[str]:
        """Related symptoms not yet covered by the selection."""
        selected = [s.lower() for s in selected]
        related = SMART_COMBINATIONS.get(symptom.lower(), [])
        fresh = [r for r in related if not any(r in s for s in selected)]
        return fresh[:count]
