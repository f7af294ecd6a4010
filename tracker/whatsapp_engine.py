# tracker/whatsapp_engine.py

import re
from datetime import datetime
from typing import Optional
from urllib.parse import quote

from loguru import logger

from medical_rules import EMERGENCY_SEVERITY

WHATSAPP_ENDPOINT = "https://api.whatsapp.com/send"
AMBULANCE_NUMBER = "108"
PHONE_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")


# ------------------------------
# PHONE NUMBERS
# ------------------------------
def clean_number(raw: str) -> str:
    return re.sub(r"[^\d+]", "", raw or "")


def normalize_phone_number(raw: str, country_code: str = "+91") -> dict:
    """
    Returns {"is_valid", "number", "error"}. Bare 10-digit numbers get the
    default country code; 12-15 digit numbers are assumed to carry one.
    """
    number = clean_number(raw)
    if not number.startswith("+"):
        if re.fullmatch(r"\d{10}", number):
            number = country_code + number
        elif re.fullmatch(r"\d{12,15}", number):
            number = "+" + number

    is_valid = PHONE_PATTERN.match(number) is not None
    error = ""
    if not is_valid:
        if len(number) < 10:
            error = "Phone number too short"
        elif len(number) > 16:
            error = "Phone number too long"
        else:
            error = "Invalid phone number format"
    return {"is_valid": is_valid, "number": number, "error": error}


# ------------------------------
# ALERT MESSAGE
# ------------------------------
def high_severity(records):
    return [r for r in records if r.severity >= EMERGENCY_SEVERITY]


def needs_emergency_alert(records) -> bool:
    # critical slugs below the threshold raise the banner, never a message
    return bool(high_severity(records))


def _symptom_lines(records):
    lines = []
    for r in records:
        lines.append(f"• {r.name} (Severity: {r.severity}/10)")
        if r.notes:
            lines.append(f"  Notes: {r.notes}")
    return lines


def compose_emergency_message(profile, records, now=None) -> str:
    now = now or datetime.now()
    critical = high_severity(records)
    others = [r for r in records if r.severity < EMERGENCY_SEVERITY]

    lines = [
        "🚨 *HEALTH EMERGENCY ALERT* 🚨",
        "",
        f"👤 *Patient:* {profile.name}",
        f"📅 *Time:* {now.strftime('%d/%m/%Y, %I:%M:%S %p')}",
        "",
    ]
    if critical:
        lines += ["⚠️ *Critical Symptoms:*"] + _symptom_lines(critical) + [""]
    if others:
        lines += ["📋 *Other Current Symptoms:*"] + _symptom_lines(others) + [""]

    lines += [
        "🏥 *Recommendation:* Immediate medical attention required",
        "📱 *Tracked via:* HealthTrack Pro",
        "",
        f"Please contact emergency services if needed: {AMBULANCE_NUMBER} (Ambulance)",
    ]
    return "\n".join(lines)


def build_whatsapp_link(phone_number: str, message: str) -> str:
    return f"{WHATSAPP_ENDPOINT}?phone={clean_number(phone_number)}&text={quote(message, safe='')}"


# ------------------------------
# SEND (deep link + alert log)
# ------------------------------
def prepare_emergency_alert(profile, records, storage=None, now=None) -> Optional[str]:
    """
    WhatsApp link for an emergency alert, or None when the profile has no
    number or no record reaches the emergency severity. Each prepared alert
    is appended to the storage alert log.
    """
    if not profile.whatsapp_number:
        logger.info("Emergency alert skipped: no WhatsApp number configured")
        return None
    if not needs_emergency_alert(records):
        return None

    now = now or datetime.now()
    message = compose_emergency_message(profile, records, now)
    link = build_whatsapp_link(profile.whatsapp_number, message)

    if storage is not None:
        storage.append_emergency_log({
            "timestamp": now.isoformat(),
            "phone_number": profile.whatsapp_number,
            "message": message,
            "type": "emergency_alert",
        })
    logger.warning("Emergency alert prepared for {} symptom(s)", len(records))
    return link
