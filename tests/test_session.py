from datetime import timedelta

import pytest

from tracker.errors import ProfileValidationError, SymptomValidationError
from tracker.session import SessionContext


@pytest.fixture
def session(storage):
    return SessionContext(storage=storage)


def test_process_symptom_input_builds_selection(session):
    assert session.process_symptom_input("headache, hiccups") == ["Headache", "Hiccups"]
    session.process_symptom_input("HEADACHE; cough")
    assert session.selected == ["Headache", "Hiccups", "Cough"]


def test_select_and_deselect(session):
    session.select("Fever")
    session.select("fever")
    session.select("Cough")
    session.deselect("FEVER")
    assert session.selected == ["Cough"]
    session.clear_selection()
    assert session.selected == []


def test_log_requires_a_symptom(session):
    with pytest.raises(SymptomValidationError):
        session.log_symptoms(5, "1-6-hours")


@pytest.mark.parametrize(
    "severity, duration",
    [(0, "1-6-hours"), (11, "1-6-hours"), (5, "forever"), ("5", "1-6-hours"), (True, "1-6-hours")],
)
def test_log_rejects_bad_values(session, severity, duration):
    session.select("Fever")
    with pytest.raises(SymptomValidationError):
        session.log_symptoms(severity, duration)
    assert session.symptoms == []


def test_log_groups_co_logged_symptoms(session, now):
    session.process_symptom_input("shortness of breath, hiccups")
    records = session.log_symptoms(6, "6-24-hours", "  after running ", now=now)

    base_id = int(now.timestamp() * 1000)
    assert [r.id for r in records] == [base_id, base_id + 1]
    assert [r.type for r in records] == ["shortness-of-breath", "hiccups"]
    assert [r.name for r in records] == ["Shortness of Breath", "Hiccups"]
    assert all(r.group_id == base_id for r in records)
    assert records[0].notes == "after running"
    assert records[0].date == now.date().isoformat()
    assert session.selected == []


def test_single_symptom_has_no_group(session, now):
    session.select("Fever")
    [record] = session.log_symptoms(4, "1-3-days", now=now)
    assert record.group_id is None


def test_ids_stay_unique_within_the_same_millisecond(session, now):
    session.select("Fever")
    session.select("Cough")
    first = session.log_symptoms(4, "1-3-days", now=now)
    session.select("Nausea")
    [second] = session.log_symptoms(4, "1-3-days", now=now)
    assert second.id == first[-1].id + 1


def test_records_persist(storage, session, now):
    session.select("Fever")
    session.log_symptoms(4, "1-3-days", now=now)
    assert [r.type for r in SessionContext(storage=storage).symptoms] == ["fever"]


def test_remove_and_reset(storage, session, now):
    session.select("Fever")
    session.select("Cough")
    fever, cough = session.log_symptoms(4, "1-3-days", now=now)
    assert session.remove_symptom(fever.id)
    assert not session.remove_symptom(fever.id)
    assert [r.id for r in storage.load_symptoms()] == [cough.id]
    session.reset()
    assert session.symptoms == []
    assert storage.load_symptoms() == []


def test_today_and_recent(session, now):
    session.select("Fever")
    session.log_symptoms(4, "1-3-days", now=now - timedelta(days=3))
    session.select("Cough")
    session.log_symptoms(4, "1-3-days", now=now)
    assert [r.type for r in session.today(now)] == ["cough"]
    assert [r.type for r in session.recent(7, now)] == ["fever", "cough"]
    assert [r.type for r in session.recent(1, now)] == ["cough"]


def test_emergencies(make_record):
    records = [make_record("chest-pain", severity=2), make_record("fever", severity=8), make_record("cough")]
    assert [r.type for r in SessionContext.emergencies(records)] == ["chest-pain", "fever"]


def test_works_without_storage(now):
    session = SessionContext()
    session.select("Fever")
    assert len(session.log_symptoms(3, "less-than-hour", now=now)) == 1


def test_profile_setup(storage, session, now):
    assert session.profile.needs_setup
    profile = session.update_profile(" Asha ", "98765 43210", now=now)
    assert profile.name == "Asha"
    assert profile.whatsapp_number == "+919876543210"
    assert profile.setup_completed and profile.emergency_setup
    assert not profile.needs_setup
    assert storage.load_profile() == profile


@pytest.mark.parametrize("name, number", [("", "9876543210"), ("Asha", "123")])
def test_profile_validation(session, name, number):
    with pytest.raises(ProfileValidationError):
        session.update_profile(name, number)


def test_skip_setup(storage, session, now):
    session.skip_setup(now=now)
    assert not session.profile.needs_setup
    assert storage.load_profile().setup_skipped
