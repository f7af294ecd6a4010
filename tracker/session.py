# tracker/session.py

"""
SessionContext: the tracker state one user session works on (logged
records, the symptom selection being built up, the profile). The UI keeps
one instance in st.session_state; every mutation is written through to
storage on a best-effort basis.
"""

from datetime import datetime
from typing import List, Optional

from loguru import logger

from medical_rules import is_emergency
from tracker.errors import ProfileValidationError, SymptomValidationError
from tracker.insights_engine import recent_records, today_records
from tracker.schemas import DURATIONS, SymptomRecord, UserProfile
from tracker.symptom_matcher import SymptomMatcher, merge_selected, to_slug
from tracker.whatsapp_engine import normalize_phone_number


class SessionContext:
    def __init__(self, storage=None, matcher: Optional[SymptomMatcher] = None, country_code="+91"):
        self.storage = storage
        self.matcher = matcher or SymptomMatcher()
        self.country_code = country_code
        self.selected: List[str] = []

        if storage is not None:
            self.symptoms: List[SymptomRecord] = storage.load_symptoms()
            self.profile = storage.load_profile()
        else:
            self.symptoms = []
            self.profile = UserProfile()

    def _persist_symptoms(self):
        if self.storage is not None and not self.storage.save_symptoms(self.symptoms):
            logger.warning("Symptoms kept in memory only; storage write failed")

    def _persist_profile(self):
        if self.storage is not None and not self.storage.save_profile(self.profile):
            logger.warning("Profile kept in memory only; storage write failed")

    # ------------------------------
    # SELECTION BUFFER
    # ------------------------------
    def process_symptom_input(self, text: str) -> List[str]:
        """Resolve free text and add the names to the selection. Returns the resolved names."""
        names = self.matcher.resolve_input(text or "")
        self.selected = merge_selected(self.selected, names)
        return names

    def select(self, name: str):
        self.selected = merge_selected(self.selected, [name])

    def deselect(self, name: str):
        self.selected = [s for s in self.selected if s.lower() != name.lower()]

    def clear_selection(self):
        self.selected = []

    # ------------------------------
    # RECORDS
    # ------------------------------
    def _next_base_id(self, now) -> int:
        base_id = int(now.timestamp() * 1000)
        if self.symptoms:
            base_id = max(base_id, max(r.id for r in self.symptoms) + 1)
        return base_id

    def log_symptoms(self, severity, duration, notes="", now=None) -> List[SymptomRecord]:
        if not self.selected:
            raise SymptomValidationError("Please select or enter at least one symptom")
        if isinstance(severity, bool) or not isinstance(severity, int) or not 1 <= severity <= 10:
            raise SymptomValidationError(f"Severity must be between 1 and 10, got {severity!r}")
        if duration not in DURATIONS:
            raise SymptomValidationError(f"Unknown duration: {duration!r}")

        now = now or datetime.now()
        base_id = self._next_base_id(now)
        grouped = len(self.selected) > 1

        records = [
            SymptomRecord(
                id=base_id + index,
                type=to_slug(name),
                display_name=name,
                severity=severity,
                duration=duration,
                notes=(notes or "").strip(),
                timestamp=now,
                date=now.date().isoformat(),
                group_id=base_id if grouped else None,
            )
            for index, name in enumerate(self.selected)
        ]

        self.symptoms.extend(records)
        self.clear_selection()
        self._persist_symptoms()
        logger.info("Logged {} symptom(s) at severity {}", len(records), severity)
        return records

    def remove_symptom(self, record_id) -> bool:
        before = len(self.symptoms)
        self.symptoms = [r for r in self.symptoms if r.id != record_id]
        if len(self.symptoms) == before:
            return False
        self._persist_symptoms()
        return True

    def reset(self):
        self.symptoms = []
        self.selected = []
        self._persist_symptoms()

    def recent(self, days, now=None) -> List[SymptomRecord]:
        return recent_records(self.symptoms, days, now)

    def today(self, now=None) -> List[SymptomRecord]:
        return today_records(self.symptoms, now)

    @staticmethod
    def emergencies(records) -> List[SymptomRecord]:
        return [r for r in records if is_emergency(r.severity, r.type)]

    # ------------------------------
    # PROFILE
    # ------------------------------
    def update_profile(self, name: str, whatsapp_number: str, now=None) -> UserProfile:
        name = (name or "").strip()
        if not name:
            raise ProfileValidationError("Please enter your name")

        phone = normalize_phone_number(whatsapp_number, self.country_code)
        if not phone["is_valid"]:
            raise ProfileValidationError(phone["error"])

        self.profile = self.profile.model_copy(update={
            "name": name,
            "whatsapp_number": phone["number"],
            "setup_completed": True,
            "setup_skipped": False,
            "emergency_setup": True,
            "last_updated": now or datetime.now(),
        })
        self._persist_profile()
        return self.profile

    def skip_setup(self, now=None) -> UserProfile:
        self.profile = self.profile.model_copy(update={
            "setup_skipped": True,
            "last_updated": now or datetime.now(),
        })
        self._persist_profile()
        return self.profile
