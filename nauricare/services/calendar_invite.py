"""
Calendar invite (ICS) generation for booked appointments.

The layout below is what patients download from the booking screen and what
is attached to confirmation emails. Calendar clients already import these
files, so the line order, the LF separators and the absence of a trailing
newline are kept as-is.
"""
import base64
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from ..core.config import settings

ICS_DATE_FORMAT = "%Y%m%dT%H%M%SZ"
ICS_MEDIA_TYPE = "text/calendar;charset=utf-8"

TELEHEALTH_MODE = "telehealth"

def to_utc(value: datetime) -> datetime:
    """Naive datetimes are treated as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)

def format_ics_datetime(value: datetime) -> str:
    return to_utc(value).strftime(ICS_DATE_FORMAT)

def parse_ics_datetime(value: str) -> datetime:
    return datetime.strptime(value, ICS_DATE_FORMAT).replace(tzinfo=timezone.utc)

def escape_text(value: str) -> str:
    # Only line breaks are escaped; the rest of the text is written verbatim
    return value.replace("\r\n", "\\n").replace("\n", "\\n").replace("\r", "\\n")

def unescape_text(value: str) -> str:
    return value.replace("\\n", "\n")

def describe_mode(mode: str) -> str:
    return "Telehealth" if mode == TELEHEALTH_MODE else "In-person"

def location_for_mode(mode: str) -> str:
    return "Video Call via NauriCare" if mode == TELEHEALTH_MODE else "Clinic Location"

def patient_summary(specialist_name: str) -> str:
    return f"Appointment with {specialist_name}"

def email_summary(specialist_name: str, patient_name: str) -> str:
    return f"NauriCare Appointment - {specialist_name} & {patient_name}"

def build_invite(
    appointment_id: str,
    start: datetime,
    summary: str,
    mode: str,
    notes: Optional[str] = None,
    dtstamp: Optional[datetime] = None,
    duration: Optional[timedelta] = None,
) -> str:
    """Render the ICS text for one appointment."""
    if not appointment_id:
        raise ValueError("appointment_id is required")
    if not summary:
        raise ValueError("summary is required")

    if duration is None:
        duration = timedelta(minutes=settings.APPOINTMENT_DURATION_MINUTES)
    if dtstamp is None:
        dtstamp = datetime.now(timezone.utc)

    start = to_utc(start)
    end = start + duration

    description = f"{describe_mode(mode)} consultation"
    if notes:
        description += f"\\nNotes: {escape_text(notes)}"

    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{settings.CALENDAR_PRODID}",
        "BEGIN:VEVENT",
        f"UID:{appointment_id}@{settings.CALENDAR_UID_DOMAIN}",
        f"DTSTAMP:{format_ics_datetime(dtstamp)}",
        f"DTSTART:{format_ics_datetime(start)}",
        f"DTEND:{format_ics_datetime(end)}",
        f"SUMMARY:{escape_text(summary)}",
        f"DESCRIPTION:{description}",
        f"LOCATION:{location_for_mode(mode)}",
        "STATUS:CONFIRMED",
        "END:VEVENT",
        "END:VCALENDAR",
    ]
    return "\n".join(lines)

def parse_invite(text: str) -> Dict:
    """Read the VEVENT properties back out of an invite.

    ``DTSTART``, ``DTEND`` and ``DTSTAMP`` come back as aware UTC datetimes;
    every other property is returned as text with line breaks restored.
    """
    properties = {}
    in_event = False
    for raw_line in text.split("\n"):
        line = raw_line.rstrip("\r")
        if line == "BEGIN:VEVENT":
            in_event = True
            continue
        if line == "END:VEVENT":
            break
        if not in_event or ":" not in line:
            continue

        name, _, value = line.partition(":")
        if name in ("DTSTART", "DTEND", "DTSTAMP"):
            properties[name] = parse_ics_datetime(value)
        else:
            properties[name] = unescape_text(value)

    if "DTSTART" not in properties or "SUMMARY" not in properties:
        raise ValueError("Calendar invite has no event")
    return properties

def download_filename(start: datetime) -> str:
    return f"appointment-{to_utc(start).strftime('%Y-%m-%d')}.ics"

def attachment_filename(appointment_id: str) -> str:
    return f"appointment-{appointment_id}.ics"

def encode_attachment(ics_content: str) -> str:
    return base64.b64encode(ics_content.encode("utf-8")).decode("ascii")
