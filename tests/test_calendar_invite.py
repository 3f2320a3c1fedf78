import base64
from datetime import datetime, timedelta, timezone

import pytest

from nauricare.services.calendar_invite import (
    build_invite, parse_invite, patient_summary, email_summary,
    download_filename, attachment_filename, encode_attachment
)

START = datetime(2026, 3, 9, 8, 30, tzinfo=timezone.utc)
STAMP = datetime(2026, 3, 1, 12, 0, 5, tzinfo=timezone.utc)

class TestBuildInvite:
    def test_exact_layout(self):
        ics = build_invite(
            appointment_id="abc-123",
            start=START,
            summary=patient_summary("Dr. Grace Mukamana"),
            mode="in-person",
            dtstamp=STAMP
        )

        assert ics == "\n".join([
            "BEGIN:VCALENDAR",
            "VERSION:2.0",
            "PRODID:-//NauriCare//Appointment//EN",
            "BEGIN:VEVENT",
            "UID:abc-123@nauricare.app",
            "DTSTAMP:20260301T120005Z",
            "DTSTART:20260309T083000Z",
            "DTEND:20260309T093000Z",
            "SUMMARY:Appointment with Dr. Grace Mukamana",
            "DESCRIPTION:In-person consultation",
            "LOCATION:Clinic Location",
            "STATUS:CONFIRMED",
            "END:VEVENT",
            "END:VCALENDAR",
        ])
        assert not ics.endswith("\n")
        assert "\r" not in ics

    def test_telehealth_with_notes(self):
        ics = build_invite("abc-123", START, "Visit", "telehealth", notes="Irregular cycles\nsince June")

        assert "DESCRIPTION:Telehealth consultation\\nNotes: Irregular cycles\\nsince June" in ics.split("\n")
        assert "LOCATION:Video Call via NauriCare" in ics

    def test_local_time_converted_to_utc(self):
        kigali = timezone(timedelta(hours=2))
        ics = build_invite("abc-123", datetime(2026, 3, 9, 10, 30, tzinfo=kigali), "Visit", "in-person")
        assert "DTSTART:20260309T083000Z" in ics

    def test_naive_start_treated_as_utc(self):
        ics = build_invite("abc-123", datetime(2026, 3, 9, 8, 30), "Visit", "in-person")
        assert "DTSTART:20260309T083000Z" in ics

    def test_missing_id_rejected(self):
        with pytest.raises(ValueError):
            build_invite("", START, "Visit", "in-person")

class TestParseInvite:
    def test_round_trip(self):
        summary = email_summary("Dr. Grace Mukamana", "Amina Uwase")
        parsed = parse_invite(build_invite("abc-123", START, summary, "telehealth", dtstamp=STAMP))

        assert parsed["DTSTART"] == START
        assert parsed["DTEND"] == START + timedelta(hours=1)
        assert parsed["DTSTAMP"] == STAMP
        assert parsed["SUMMARY"] == "NauriCare Appointment - Dr. Grace Mukamana & Amina Uwase"
        assert parsed["UID"] == "abc-123@nauricare.app"

    def test_summary_whitespace_preserved(self):
        parsed = parse_invite(build_invite("abc-123", START, "Appointment with Dr. X  ", "in-person"))
        assert parsed["SUMMARY"] == "Appointment with Dr. X  "

    def test_line_breaks_restored(self):
        ics = build_invite("abc-123", START, "Follow-up\nwith Dr. X", "telehealth", notes="Bring scans\nand results")
        parsed = parse_invite(ics)

        assert parsed["SUMMARY"] == "Follow-up\nwith Dr. X"
        assert parsed["DESCRIPTION"] == "Telehealth consultation\nNotes: Bring scans\nand results"

    def test_crlf_input_accepted(self):
        ics = build_invite("abc-123", START, "Visit", "in-person").replace("\n", "\r\n")
        assert parse_invite(ics)["SUMMARY"] == "Visit"

    def test_text_without_event_rejected(self):
        with pytest.raises(ValueError):
            parse_invite("BEGIN:VCALENDAR\nEND:VCALENDAR")

class TestFileNames:
    def test_download_filename_uses_utc_date(self):
        assert download_filename(START) == "appointment-2026-03-09.ics"

    def test_attachment(self):
        ics = build_invite("abc-123", START, "Visit", "in-person")
        assert attachment_filename("abc-123") == "appointment-abc-123.ics"
        assert base64.b64decode(encode_attachment(ics)).decode("utf-8") == ics
