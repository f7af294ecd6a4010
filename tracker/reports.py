# tracker/reports.py

from datetime import datetime
from io import BytesIO

from docx import Document
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from medical_rules import categorize_severity, format_duration
from tracker.insights_engine import history_frame, real_time_stats

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PDF_MIME = "application/pdf"
CSV_MIME = "text/csv"


def _record_line(r):
    line = (
        f"{r.timestamp.strftime('%Y-%m-%d %H:%M')} - {r.name}: "
        f"{r.severity}/10 ({categorize_severity(r.severity)}), {format_duration(r.duration)}"
    )
    if r.notes:
        line += f' - "{r.notes}"'
    return line


def _summary_lines(profile, records, now):
    stats = real_time_stats(records, now)
    return [
        f"Generated on: {now.strftime('%Y-%m-%d %H:%M')}",
        f"Name: {profile.name}",
        f"Total records: {len(records)}",
        f"Last 7 days: {stats['week_count']} (average severity {stats['avg_severity_week']})",
        f"Most common (30 days): {stats['most_common_symptom']}",
    ]


def _ordered(records):
    return sorted(records, key=lambda r: r.timestamp, reverse=True)


# ------------------------------
# DOCX
# ------------------------------
def create_history_docx(profile, records, now=None):
    now = now or datetime.now()
    doc = Document()
    doc.add_heading("Symptom History Report", level=1)

    for line in _summary_lines(profile, records, now):
        doc.add_paragraph(line)
    doc.add_paragraph("")

    doc.add_heading("Logged Symptoms", level=2)
    if not records:
        doc.add_paragraph("No symptoms logged yet.")
    for r in _ordered(records):
        doc.add_paragraph(_record_line(r), style="List Bullet")

    buffer = BytesIO()
    doc.save(buffer)
    buffer.seek(0)
    return buffer


# ------------------------------
# PDF
# ------------------------------
def create_history_pdf(profile, records, now=None):
    now = now or datetime.now()
    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4

    y = height - 50
    c.setFont("Helvetica-Bold", 16)
    c.drawString(50, y, "Symptom History Report")
    y -= 40

    c.setFont("Helvetica", 11)
    lines = _summary_lines(profile, records, now) + [""]
    lines += [_record_line(r) for r in _ordered(records)] or ["No symptoms logged yet."]

    for line in lines:
        if y < 50:
            c.showPage()
            c.setFont("Helvetica", 11)
            y = height - 50
        c.drawString(50, y, line[:110])
        y -= 18

    c.showPage()
    c.save()
    buffer.seek(0)
    return buffer


# ------------------------------
# CSV
# ------------------------------
def create_history_csv(records) -> bytes:
    return history_frame(records).to_csv(index=False).encode("utf-8")
