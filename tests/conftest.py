from datetime import datetime, timedelta

import pytest

from tracker.config import DEFAULT_KNOWLEDGE_PATH
from tracker.knowledge_base import load_knowledge
from tracker.schemas import SymptomRecord
from tracker.storage import Storage


@pytest.fixture(scope="session")
def kb():
    """
    The bundled health knowledge document, parsed.
    """
    return load_knowledge(DEFAULT_KNOWLEDGE_PATH)


@pytest.fixture
def now() -> datetime:
    # a Friday in spring
    return datetime(2024, 3, 15, 10, 0, 0)


@pytest.fixture
def make_record(now):
    """
    Factory for SymptomRecord: make_record("fever", severity=5, days_ago=1).
    Ids increase with every call.
    """
    counter = {"id": 1000}

    def _make(symptom_type, severity=5, days_ago=0, minutes_ago=0, duration="1-6-hours", notes="", **extra):
        counter["id"] += 1
        ts = now - timedelta(days=days_ago, minutes=minutes_ago)
        return SymptomRecord(
            id=extra.pop("id", counter["id"]),
            type=symptom_type,
            severity=severity,
            duration=duration,
            notes=notes,
            timestamp=ts,
            date=ts.date().isoformat(),
            **extra,
        )

    return _make


@pytest.fixture
def storage(tmp_path) -> Storage:
    return Storage(tmp_path / "tracker.db")
