from docx import Document

from tracker.reports import create_history_csv, create_history_docx, create_history_pdf
from tracker.schemas import UserProfile


def test_docx_lists_every_record(make_record, now):
    records = [make_record("fever", severity=7, notes="night sweats"), make_record("cough", days_ago=1)]
    buffer = create_history_docx(UserProfile(name="Asha"), records, now)
    text = [p.text for p in Document(buffer).paragraphs]
    assert text[0] == "Symptom History Report"
    assert "Name: Asha" in text
    assert any(t.startswith(f"{now:%Y-%m-%d %H:%M} - Fever: 7/10 (severe)") and "night sweats" in t for t in text)
    assert any("Cough" in t for t in text)


def test_docx_without_records(now):
    text = [p.text for p in Document(create_history_docx(UserProfile(), [], now)).paragraphs]
    assert "No symptoms logged yet." in text


def test_pdf_is_a_pdf(make_record, now):
    data = create_history_pdf(UserProfile(), [make_record("fever")] * 60, now).getvalue()
    assert data.startswith(b"%PDF")


def test_csv_has_header_and_rows(make_record):
    csv = create_history_csv([make_record("fever", notes="hot"), make_record("cough", days_ago=1)])
    lines = csv.decode("utf-8").splitlines()
    assert lines[0] == "Date,Time,Symptom,Severity,Duration,Notes"
    assert len(lines) == 3
    assert ",Fever,5,1-6 hours,hot" in lines[1]
