# tracker/storage.py

"""
Key/value persistence over a single sqlite table. Values are JSON
documents; keys carry the `healthtracker_` prefix.

Nothing here raises to the caller: failed writes log and return False,
failed or corrupt reads log and return the supplied default.
"""

import json
from contextlib import closing
import sqlite3
from datetime import datetime
from typing import List

from loguru import logger
from pydantic import ValidationError

from tracker.schemas import SymptomRecord, UserProfile

KEY_PREFIX = "healthtracker_"

SYMPTOMS_KEY = "symptoms"
PROFILE_KEY = "user_profile"
EMERGENCY_LOGS_KEY = "emergency_logs"
HELPFUL_KEY = "helpful_suggestions"
DISMISSED_KEY = "dismissed_suggestions"

ALL_KEYS = [SYMPTOMS_KEY, PROFILE_KEY, EMERGENCY_LOGS_KEY, HELPFUL_KEY, DISMISSED_KEY]


class Storage:
    def __init__(self, db_path="healthtracker.db"):
        self.db_path = str(db_path)
        self.init_db()

    def init_db(self):
        try:
            with closing(sqlite3.connect(self.db_path)) as conn:
                c = conn.cursor()
                c.execute("""
                    CREATE TABLE IF NOT EXISTS kv_store (
                        key TEXT PRIMARY KEY,
                        value TEXT
                    )
                """)
                conn.commit()
        except sqlite3.Error:
            logger.exception("Could not initialise storage at {}", self.db_path)

    # ------------------------------
    # RAW KEY/VALUE
    # ------------------------------
    def get(self, key, default=None):
        try:
            with closing(sqlite3.connect(self.db_path)) as conn:
                c = conn.cursor()
                c.execute("SELECT value FROM kv_store WHERE key=?", (KEY_PREFIX + key,))
                row = c.fetchone()
        except sqlite3.Error:
            logger.exception("Read failed for key {}", key)
            return default

        if row is None:
            return default
        try:
            return json.loads(row[0])
        except ValueError:
            logger.warning("Corrupt JSON stored under {}; using default", key)
            return default

    def get_list(self, key) -> list:
        """Like get, for keys that hold a JSON array. Anything else reads as empty."""
        value = self.get(key, [])
        if not isinstance(value, list):
            logger.warning("Expected a list under {}, found {}; using empty list", key, type(value).__name__)
            return []
        return value

    def set(self, key, value) -> bool:
        try:
            payload = json.dumps(value, default=str)
            with closing(sqlite3.connect(self.db_path)) as conn:
                c = conn.cursor()
                c.execute(
                    "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)",
                    (KEY_PREFIX + key, payload),
                )
                conn.commit()
            return True
        except (sqlite3.Error, TypeError, ValueError):
            logger.exception("Write failed for key {}", key)
            return False

    def delete(self, key) -> bool:
        try:
            with closing(sqlite3.connect(self.db_path)) as conn:
                c = conn.cursor()
                c.execute("DELETE FROM kv_store WHERE key=?", (KEY_PREFIX + key,))
                conn.commit()
            return True
        except sqlite3.Error:
            logger.exception("Delete failed for key {}", key)
            return False

    def clear_all(self) -> bool:
        return all([self.delete(key) for key in ALL_KEYS])

    # ------------------------------
    # SYMPTOMS
    # ------------------------------
    def load_symptoms(self) -> List[SymptomRecord]:
        records = []
        for raw in self.get_list(SYMPTOMS_KEY):
            try:
                records.append(SymptomRecord.model_validate(raw))
            except ValidationError:
                logger.warning("Skipping unreadable stored symptom: {}", raw)
        return records

    def save_symptoms(self, records) -> bool:
        return self.set(SYMPTOMS_KEY, [r.model_dump(mode="json") for r in records])

    # ------------------------------
    # PROFILE
    # ------------------------------
    def load_profile(self) -> UserProfile:
        raw = self.get(PROFILE_KEY)
        if not raw:
            return UserProfile()
        try:
            return UserProfile.model_validate(raw)
        except ValidationError:
            logger.warning("Stored user profile is invalid; starting fresh")
            return UserProfile()

    def save_profile(self, profile: UserProfile) -> bool:
        return self.set(PROFILE_KEY, profile.model_dump(mode="json"))

    # ------------------------------
    # EMERGENCY ALERT LOG
    # ------------------------------
    def emergency_logs(self) -> list:
        return [e for e in self.get_list(EMERGENCY_LOGS_KEY) if isinstance(e, dict)]

    def append_emergency_log(self, entry: dict) -> bool:
        logs = self.emergency_logs()
        logs.append(entry)
        return self.set(EMERGENCY_LOGS_KEY, logs)

    # ------------------------------
    # SUGGESTION FEEDBACK
    # ------------------------------
    def _append_feedback(self, key, suggestion_id) -> bool:
        entries = self.get_list(key)
        entries.append({"id": suggestion_id, "timestamp": datetime.now().isoformat()})
        return self.set(key, entries)

    def mark_helpful(self, suggestion_id) -> bool:
        return self._append_feedback(HELPFUL_KEY, suggestion_id)

    def dismiss_suggestion(self, suggestion_id) -> bool:
        return self._append_feedback(DISMISSED_KEY, suggestion_id)

    def helpful_ids(self) -> List[str]:
        return [e["id"] for e in self.get_list(HELPFUL_KEY) if isinstance(e, dict) and "id" in e]

    def dismissed_ids(self) -> List[str]:
        return [e["id"] for e in self.get_list(DISMISSED_KEY) if isinstance(e, dict) and "id" in e]
