import sqlite3

from tracker.schemas import UserProfile
from tracker.session import SessionContext
from tracker.storage import KEY_PREFIX, Storage


def test_get_returns_default_when_missing(storage):
    assert storage.get("nothing", default=[]) == []


def test_set_then_get(storage):
    assert storage.set("settings", {"theme": "dark", "n": [1, 2]})
    assert storage.get("settings") == {"theme": "dark", "n": [1, 2]}


def test_keys_are_prefixed(storage):
    storage.set("symptoms", [])
    conn = sqlite3.connect(storage.db_path)
    keys = [row[0] for row in conn.execute("SELECT key FROM kv_store")]
    conn.close()
    assert keys == [KEY_PREFIX + "symptoms"]


def test_corrupt_json_returns_default(storage):
    conn = sqlite3.connect(storage.db_path)
    conn.execute("INSERT INTO kv_store (key, value) VALUES (?, ?)", (KEY_PREFIX + "symptoms", "{oops"))
    conn.commit()
    conn.close()
    assert storage.get("symptoms", default=[]) == []
    assert storage.load_symptoms() == []


def test_wrong_shape_reads_as_empty(storage):
    """Valid JSON of the wrong type is treated like corrupt data."""
    storage.set("symptoms", 5)
    storage.set("helpful_suggestions", "infection_pattern")
    assert storage.load_symptoms() == []
    assert storage.helpful_ids() == []
    assert SessionContext(storage=storage).symptoms == []


def test_wrong_shape_is_replaced_on_append(storage):
    storage.set("emergency_logs", {"a": 1})
    storage.set("dismissed_suggestions", 3)
    assert storage.append_emergency_log({"type": "emergency_alert"})
    assert storage.dismiss_suggestion("preventive_care")
    assert storage.emergency_logs() == [{"type": "emergency_alert"}]
    assert storage.dismissed_ids() == ["preventive_care"]


def test_missing_table_never_raises(storage):
    conn = sqlite3.connect(storage.db_path)
    conn.execute("DROP TABLE kv_store")
    conn.commit()
    conn.close()
    assert storage.get("symptoms", default="fallback") == "fallback"
    assert storage.set("symptoms", []) is False
    assert storage.delete("symptoms") is False


def test_unwritable_database_never_raises(tmp_path):
    """A directory is not a database: writes report False, reads give defaults."""
    broken = Storage(tmp_path)
    assert broken.set("symptoms", []) is False
    assert broken.get("symptoms", default="fallback") == "fallback"
    assert broken.load_profile() == UserProfile()


def test_symptoms_round_trip(storage, make_record):
    records = [make_record("fever", severity=7, notes="evening"), make_record("cough", group_id=5)]
    assert storage.save_symptoms(records)
    assert storage.load_symptoms() == records


def test_unreadable_symptom_is_skipped(storage, make_record):
    good = make_record("fever")
    storage.set("symptoms", [good.model_dump(mode="json"), {"id": "x", "severity": 99}])
    assert storage.load_symptoms() == [good]


def test_profile_round_trip(storage, now):
    assert storage.load_profile() == UserProfile()
    profile = UserProfile(name="Asha", whatsapp_number="+919876543210", setup_completed=True, last_updated=now)
    storage.save_profile(profile)
    assert storage.load_profile() == profile


def test_emergency_log_appends(storage):
    storage.append_emergency_log({"type": "emergency_alert", "n": 1})
    storage.append_emergency_log({"type": "emergency_alert", "n": 2})
    assert [e["n"] for e in storage.emergency_logs()] == [1, 2]


def test_feedback_ids(storage):
    storage.mark_helpful("infection_pattern")
    storage.dismiss_suggestion("preventive_care")
    storage.dismiss_suggestion("manage_headache")
    assert storage.helpful_ids() == ["infection_pattern"]
    assert storage.dismissed_ids() == ["preventive_care", "manage_headache"]


def test_clear_all(storage, make_record):
    storage.save_symptoms([make_record("fever")])
    storage.mark_helpful("x")
    assert storage.clear_all()
    assert storage.load_symptoms() == []
    assert storage.helpful_ids() == []
