import uuid
from datetime import datetime, timedelta, timezone

from nauricare import models
from nauricare.api.deps import get_notification_transport
from nauricare.main import app
from nauricare.services.calendar_invite import parse_invite
from nauricare.services.notification_service import EmailTransport, NotificationService
from tests.conftest import auth_headers, next_slot

class BrokenTransport(EmailTransport):
    async def send(self, to, subject, html, attachments=None):
        raise RuntimeError("email service unreachable")

def booking(clinician_id, start=None, mode="in-person", notes=None):
    body = {
        "clinician_id": clinician_id,
        "appointment_datetime": (start or next_slot()).isoformat(),
        "mode": mode,
    }
    if notes:
        body["notes"] = notes
    return body

def add_appointment(db, patient_id, clinician_id, when, status="scheduled"):
    appointment = models.Appointment(
        patient_id=patient_id,
        clinician_id=clinician_id,
        appointment_datetime=when,
        mode="in-person",
        status=status
    )
    db.add(appointment)
    db.commit()
    db.refresh(appointment)
    return appointment

class TestBooking:
    def test_book_appointment_sends_confirmations(self, client, patient_headers, patient_profile,
                                                  clinician, email_transport):
        start = next_slot(slot="10:00")
        response = client.post(
            "/api/v1/appointments",
            json=booking(clinician.id, start, mode="telehealth", notes="Irregular cycles"),
            headers=patient_headers
        )

        assert response.status_code == 201
        data = response.json()
        assert data["appointment"]["status"] == "scheduled"
        assert data["appointment"]["mode"] == "telehealth"
        assert data["appointment"]["patient_id"] == patient_profile["id"]
        assert data["message"] == "Your appointment with Dr. Grace Mukamana is confirmed."
        assert data["notification"]["success"] is True

        stored = datetime.fromisoformat(data["appointment"]["appointment_datetime"])
        assert stored == start.astimezone(timezone.utc).replace(tzinfo=None)

        recipients = [mail["to"] for mail in email_transport.sent]
        assert recipients == ["amina@example.com", "grace@clinic.rw"]

    def test_booking_survives_notification_failure(self, client, patient_headers, patient_profile, clinician):
        app.dependency_overrides[get_notification_transport] = lambda: BrokenTransport()

        response = client.post("/api/v1/appointments", json=booking(clinician.id), headers=patient_headers)

        assert response.status_code == 201
        email_results = response.json()["notification"]["emailResults"]
        assert [r["success"] for r in email_results] == [False, False]
        assert "unreachable" in email_results[0]["error"]

        listing = client.get("/api/v1/appointments", headers=patient_headers).json()
        assert len(listing["upcoming"]) == 1

    def test_booking_survives_dispatch_error(self, client, patient_headers, patient_profile, clinician,
                                             monkeypatch):
        async def crash(self, request):
            raise RuntimeError("dispatch crashed")

        monkeypatch.setattr(NotificationService, "send_appointment_notification", crash)

        response = client.post("/api/v1/appointments", json=booking(clinician.id), headers=patient_headers)

        assert response.status_code == 201
        assert response.json()["notification"] == {"success": False, "error": "dispatch crashed"}

    def test_requires_patient_profile(self, client, patient_headers, clinician):
        response = client.post("/api/v1/appointments", json=booking(clinician.id), headers=patient_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Please complete your profile first."

    def test_requires_token(self, client, clinician):
        response = client.post("/api/v1/appointments", json=booking(clinician.id))
        assert response.status_code in (401, 403)

    def test_invalid_token(self, client, clinician):
        response = client.post(
            "/api/v1/appointments",
            json=booking(clinician.id),
            headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert response.status_code == 401

    def test_unknown_clinician(self, client, patient_headers, patient_profile):
        response = client.post("/api/v1/appointments", json=booking(str(uuid.uuid4())), headers=patient_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Specialist not found"

    def test_telehealth_requires_clinician_support(self, client, patient_headers, patient_profile,
                                                   clinician, db_session):
        clinician.telehealth_available = False
        db_session.commit()

        response = client.post(
            "/api/v1/appointments",
            json=booking(clinician.id, mode="telehealth"),
            headers=patient_headers
        )
        assert response.status_code == 400
        assert "telehealth" in response.json()["detail"]

    def test_sunday_rejected(self, client, patient_headers, patient_profile, clinician):
        response = client.post(
            "/api/v1/appointments",
            json=booking(clinician.id, next_slot(weekday=6)),
            headers=patient_headers
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Appointments are not available on Sundays."

    def test_time_outside_slots_rejected(self, client, patient_headers, patient_profile, clinician):
        response = client.post(
            "/api/v1/appointments",
            json=booking(clinician.id, next_slot(slot="12:00")),
            headers=patient_headers
        )
        assert response.status_code == 400

    def test_past_time_rejected(self, client, patient_headers, patient_profile, clinician):
        past = datetime.now(timezone.utc) - timedelta(days=2)
        response = client.post(
            "/api/v1/appointments",
            json=booking(clinician.id, past),
            headers=patient_headers
        )
        assert response.status_code == 400
        assert "future" in response.json()["detail"]

    def test_time_slots(self, client):
        response = client.get("/api/v1/appointments/time-slots")
        assert response.status_code == 200
        assert "09:00" in response.json()["time_slots"]
        assert response.json()["closed_days"] == ["Sunday"]

class TestListing:
    def test_buckets_and_display_status(self, client, patient_headers, patient_profile, clinician, db_session):
        now = datetime.utcnow()
        patient_id = patient_profile["id"]
        upcoming = add_appointment(db_session, patient_id, clinician.id, now + timedelta(days=3))
        past = add_appointment(db_session, patient_id, clinician.id, now - timedelta(days=3))
        completed = add_appointment(db_session, patient_id, clinician.id, now - timedelta(days=5), "completed")
        cancelled = add_appointment(db_session, patient_id, clinician.id, now + timedelta(days=4), "cancelled")

        response = client.get("/api/v1/appointments", headers=patient_headers)

        assert response.status_code == 200
        data = response.json()
        assert [a["id"] for a in data["upcoming"]] == [upcoming.id]
        assert [a["id"] for a in data["past"]] == [completed.id, past.id]
        assert [a["id"] for a in data["cancelled"]] == [cancelled.id]

        assert data["upcoming"][0]["display_status"] == "Upcoming"
        assert data["upcoming"][0]["can_cancel"] is True
        assert data["upcoming"][0]["clinician"]["full_name"] == "Dr. Grace Mukamana"
        assert {a["display_status"] for a in data["past"]} == {"Completed", "Past"}
        assert data["cancelled"][0]["display_status"] == "Cancelled"
        assert data["cancelled"][0]["can_cancel"] is False

    def test_other_patients_appointments_hidden(self, client, patient_headers, patient_profile,
                                                clinician, db_session):
        appointment = add_appointment(
            db_session, patient_profile["id"], clinician.id, datetime.utcnow() + timedelta(days=2)
        )

        other = auth_headers(email="other@example.com")
        client.post("/api/v1/profiles/patients", json={"full_name": "Other Patient"}, headers=other)

        assert client.get("/api/v1/appointments", headers=other).json()["upcoming"] == []
        assert client.get(f"/api/v1/appointments/{appointment.id}", headers=other).status_code == 404

class TestCancel:
    def test_cancel_upcoming(self, client, patient_headers, patient_profile, clinician, db_session):
        appointment = add_appointment(
            db_session, patient_profile["id"], clinician.id, datetime.utcnow() + timedelta(days=2)
        )

        response = client.post(f"/api/v1/appointments/{appointment.id}/cancel", headers=patient_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"

        again = client.post(f"/api/v1/appointments/{appointment.id}/cancel", headers=patient_headers)
        assert again.status_code == 400
        assert again.json()["detail"] == (
            "Could not cancel appointment. Only upcoming appointments can be cancelled."
        )

    def test_cannot_cancel_past(self, client, patient_headers, patient_profile, clinician, db_session):
        appointment = add_appointment(
            db_session, patient_profile["id"], clinician.id, datetime.utcnow() - timedelta(days=1)
        )
        response = client.post(f"/api/v1/appointments/{appointment.id}/cancel", headers=patient_headers)
        assert response.status_code == 400

    def test_cannot_cancel_completed(self, client, patient_headers, patient_profile, clinician, db_session):
        appointment = add_appointment(
            db_session, patient_profile["id"], clinician.id,
            datetime.utcnow() + timedelta(days=1), "completed"
        )
        response = client.post(f"/api/v1/appointments/{appointment.id}/cancel", headers=patient_headers)
        assert response.status_code == 400

class TestCalendarDownload:
    def test_download_invite(self, client, patient_headers, patient_profile, clinician):
        start = next_slot(slot="14:30")
        booked = client.post(
            "/api/v1/appointments",
            json=booking(clinician.id, start, notes="Bring previous scans"),
            headers=patient_headers
        ).json()["appointment"]

        response = client.get(f"/api/v1/appointments/{booked['id']}/calendar.ics", headers=patient_headers)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/calendar")
        start_utc = start.astimezone(timezone.utc)
        assert f"appointment-{start_utc.strftime('%Y-%m-%d')}.ics" in response.headers["content-disposition"]

        invite = parse_invite(response.text)
        assert invite["UID"] == f"{booked['id']}@nauricare.app"
        assert invite["SUMMARY"] == "Appointment with Dr. Grace Mukamana"
        assert invite["DTSTART"] == start_utc
        assert invite["DTEND"] == start_utc + timedelta(hours=1)
        assert invite["DESCRIPTION"] == "In-person consultation\nNotes: Bring previous scans"

    def test_unknown_appointment(self, client, patient_headers, patient_profile):
        response = client.get(f"/api/v1/appointments/{uuid.uuid4()}/calendar.ics", headers=patient_headers)
        assert response.status_code == 404
