# tracker/schemas.py

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Priority = Literal["critical", "high", "medium", "low"]

DURATIONS = ["less-than-hour", "1-6-hours", "6-24-hours", "1-3-days", "more-than-3-days"]


class SymptomRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    type: str  # canonical slug, e.g. "chest-pain"
    display_name: str = ""
    severity: int = Field(ge=1, le=10)
    duration: str = "less-than-hour"
    notes: str = ""
    timestamp: datetime
    date: str  # YYYY-MM-DD of timestamp
    group_id: Optional[int] = None  # shared by symptoms logged together

    @property
    def name(self) -> str:
        if self.display_name:
            return self.display_name
        return " ".join(w[:1].upper() + w[1:] for w in self.type.split("-") if w)


class SymptomDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    category: str
    keywords: List[str] = Field(default_factory=list)
    icon: str = "💡"


class DiseasePattern(BaseModel):
    model_config = ConfigDict(frozen=True)

    display_name: str
    symptoms: List[str]
    threshold: float  # fraction of `symptoms` that must match
    confidence_multiplier: float
    severity: Literal["high", "medium", "low"] = "medium"
    description: str = ""
    causes: List[str] = Field(default_factory=list)
    early_symptoms: List[str] = Field(default_factory=list)
    progression: str = ""
    prevention: List[str] = Field(default_factory=list)
    warning_signs: List[str] = Field(default_factory=list)
    recommended_actions: List[str] = Field(default_factory=list)
    timeframe: str = ""
    risk_factors: List[str] = Field(default_factory=list)
    complications: List[str] = Field(default_factory=list)
    prognosis: str = ""


class Suggestion(BaseModel):
    id: str
    title: str
    description: str
    reasoning: str = ""
    priority: Priority
    category: str
    actions: List[str] = Field(default_factory=list)
    health_info: Optional[Dict[str, Any]] = None
    disease_info: Optional[Dict[str, Any]] = None
    medications: List[str] = Field(default_factory=list)
    timeframe: str = ""
    confidence: int = Field(default=0, ge=0, le=100)


class UserProfile(BaseModel):
    name: str = "Healthcare User"
    whatsapp_number: str = ""
    setup_completed: bool = False
    setup_skipped: bool = False
    emergency_setup: bool = False
    last_updated: Optional[datetime] = None

    @property
    def needs_setup(self) -> bool:
        return not self.setup_skipped and not (self.name and self.whatsapp_number)
