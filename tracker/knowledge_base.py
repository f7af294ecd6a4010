# tracker/knowledge_base.py

"""
Health knowledge: per-symptom descriptions/treatments and OTC medication
records, read from a JSON document and validated into pydantic models.
Bad entries are dropped one by one; an unreadable document falls back to
a small built-in default.
"""

import json
from pathlib import Path
from typing import Dict, List

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from tracker.errors import KnowledgeBaseError


class TreatmentPlan(BaseModel):
    immediate: List[str] = Field(default_factory=list)
    prevention: List[str] = Field(default_factory=list)


class SymptomKnowledge(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    description: str
    common_causes: List[str] = Field(default_factory=list, alias="commonCauses")
    treatments: TreatmentPlan = Field(default_factory=TreatmentPlan)


class MedicationInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    generic_name: str = Field(alias="genericName")
    brand_names: List[str] = Field(default_factory=list, alias="brandNames")
    uses: List[str] = Field(default_factory=list)
    dosage: str
    side_effects: List[str] = Field(default_factory=list, alias="sideEffects")
    contraindications: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _default_brand(self):
        # titles are built from the first brand name
        if not self.brand_names:
            self.brand_names = [self.generic_name]
        return self


class KnowledgeBase(BaseModel):
    symptoms: Dict[str, SymptomKnowledge] = Field(default_factory=dict)
    medications: Dict[str, MedicationInfo] = Field(default_factory=dict)


DEFAULT_KNOWLEDGE = {
    "symptoms": {
        "headache": {
            "description": "Pain in the head or neck area",
            "treatments": {
                "immediate": ["rest", "hydration", "pain reliever"],
                "prevention": ["regular sleep", "stress management"],
            },
        }
    },
    "medications": {
        "acetaminophen": {
            "genericName": "acetaminophen",
            "brandNames": ["Tylenol"],
            "uses": ["pain relief"],
            "dosage": "500mg every 4-6 hours",
        }
    },
}


def default_knowledge() -> KnowledgeBase:
    return parse_knowledge(DEFAULT_KNOWLEDGE)


def _parse_section(raw, section, model):
    entries = raw.get(section)
    if not isinstance(entries, dict):
        raise KnowledgeBaseError(f"'{section}' must be an object keyed by name")

    parsed = {}
    for key, entry in entries.items():
        try:
            parsed[key] = model.model_validate(entry)
        except ValidationError as e:
            logger.warning("Dropping malformed {} entry {!r} ({} errors)", section, key, e.error_count())
    return parsed


def parse_knowledge(raw) -> KnowledgeBase:
    if not isinstance(raw, dict):
        raise KnowledgeBaseError("health knowledge must be a JSON object")
    return KnowledgeBase(
        symptoms=_parse_section(raw, "symptoms", SymptomKnowledge),
        medications=_parse_section(raw, "medications", MedicationInfo),
    )


def load_knowledge(path) -> KnowledgeBase:
    """Single best-effort read of the knowledge file; never raises."""
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        kb = parse_knowledge(raw)
    except (OSError, ValueError, KnowledgeBaseError) as e:
        logger.warning("Health knowledge unavailable at {} ({}); using defaults", path, e)
        return default_knowledge()

    logger.debug("Loaded {} symptom and {} medication records", len(kb.symptoms), len(kb.medications))
    return kb
