from sqlalchemy.orm import Session
from datetime import datetime
from typing import Optional, List, Dict, Any
import logging
import httpx
from html import escape

from ..core.config import settings
from ..models.clinician import ClinicianProfile
from ..schemas.notification import AppointmentNotificationRequest
from . import calendar_invite

logger = logging.getLogger(__name__)

class EmailDeliveryError(Exception):
    """Raised when the email API rejects a message."""

class EmailTransport:
    async def send(
        self,
        to: str,
        subject: str,
        html: str,
        attachments: Optional[List[Dict[str, str]]] = None
    ) -> Dict[str, Any]:
        raise NotImplementedError

class ResendTransport(EmailTransport):
    """Posts messages to the transactional email HTTP API."""

    def __init__(self, api_key: str, api_url: str = None, sender: str = None):
        self.api_key = api_key
        self.api_url = api_url or settings.RESEND_API_URL
        self.sender = sender or settings.EMAIL_FROM

    async def send(self, to, subject, html, attachments=None):
        payload = {
            "from": self.sender,
            "to": [to],
            "subject": subject,
            "html": html,
        }
        if attachments:
            payload["attachments"] = attachments

        async with httpx.AsyncClient(timeout=settings.EMAIL_TIMEOUT_SECONDS) as client:
            response = await client.post(
                self.api_url,
                json=payload,
                headers={"Authorization": f"Bearer {self.api_key}"}
            )

        if response.status_code >= 400:
            raise EmailDeliveryError(f"Resend API error: {response.text}")

        return response.json()

class LoggingTransport(EmailTransport):
    """Log-only delivery, used when no email API key is configured."""

    def __init__(self):
        self.sent: List[Dict[str, Any]] = []

    async def send(self, to, subject, html, attachments=None):
        attachment_names = [a["filename"] for a in attachments or []]
        logger.info(f"Email (not sent) to={to} subject={subject!r} attachments={attachment_names}")
        self.sent.append({
            "to": to,
            "subject": subject,
            "html": html,
            "attachments": attachments or [],
        })
        return {"logged": True, "to": to}

def get_email_transport() -> EmailTransport:
    if settings.email_delivery_enabled:
        return ResendTransport(settings.RESEND_API_KEY)
    return LoggingTransport()

def parse_appointment_datetime(value: str) -> datetime:
    """Parse an ISO 8601 timestamp; a trailing Z means UTC."""
    if not value:
        raise ValueError("appointmentDateTime is required")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return calendar_invite.to_utc(datetime.fromisoformat(text))
    except ValueError:
        raise ValueError(f"Invalid appointmentDateTime: {value}")

def format_display_date(value: datetime) -> str:
    """e.g. Monday, January 5, 2026"""
    return f"{value.strftime('%A')}, {value.strftime('%B')} {value.day}, {value.year}"

def format_display_time(value: datetime) -> str:
    """e.g. 9:30 AM"""
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {suffix}"

_EMAIL_STYLE = """
            body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #333; }}
            .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
            .header {{ background: linear-gradient(135deg, {start} 0%, {end} 100%); color: white; padding: 30px; border-radius: 12px 12px 0 0; text-align: center; }}
            .content {{ background: #fff; padding: 30px; border: 1px solid #eee; border-top: none; border-radius: 0 0 12px 12px; }}
            .appointment-card {{ background: #f8f9fa; border-radius: 8px; padding: 20px; margin: 20px 0; }}
            .detail-row {{ display: flex; align-items: center; margin: 10px 0; }}
            .footer {{ text-align: center; margin-top: 30px; color: #888; font-size: 14px; }}
"""

def _mode_row(mode: str) -> str:
    icon = "📹" if mode == calendar_invite.TELEHEALTH_MODE else "📍"
    label = "Video Call" if mode == calendar_invite.TELEHEALTH_MODE else "In-person Visit"
    return f"""<div class="detail-row">
                  <span>{icon}</span>&nbsp;
                  <strong>{label}</strong>
                </div>"""

def build_patient_email(
    patient_name: str,
    specialist_name: str,
    formatted_date: str,
    formatted_time: str,
    mode: str,
    notes: Optional[str] = None
) -> str:
    patient_name, specialist_name = escape(patient_name), escape(specialist_name)
    notes = escape(notes) if notes else notes
    style = _EMAIL_STYLE.format(start="#f5a462", end="#e8916d")
    notes_row = f'<div class="detail-row"><span>📝</span>&nbsp;{notes}</div>' if notes else ""
    if mode == calendar_invite.TELEHEALTH_MODE:
        preparation = ("<p>You'll receive a video call link before your appointment. Make sure you're "
                       "in a quiet place with a stable internet connection.</p>")
    else:
        preparation = "<p>Please arrive 10 minutes before your scheduled time.</p>"

    return f"""
      <!DOCTYPE html>
      <html>
        <head>
          <style>{style}          </style>
        </head>
        <body>
          <div class="container">
            <div class="header">
              <h1>Appointment Confirmed!</h1>
            </div>
            <div class="content">
              <p>Dear {patient_name},</p>
              <p>Your appointment has been successfully booked with <strong>{specialist_name}</strong>.</p>

              <div class="appointment-card">
                <h3 style="margin-top: 0;">Appointment Details</h3>
                <div class="detail-row">
                  <span>📅</span>&nbsp;<strong>{formatted_date}</strong>
                </div>
                <div class="detail-row">
                  <span>🕐</span>&nbsp;<strong>{formatted_time}</strong>
                </div>
                {_mode_row(mode)}
                {notes_row}
              </div>

              {preparation}

              <p>If you need to reschedule or cancel, please do so at least 24 hours in advance.</p>

              <div class="footer">
                <p>Thank you for choosing NauriCare</p>
              </div>
            </div>
          </div>
        </body>
      </html>
    """

def build_clinician_email(
    patient_name: str,
    specialist_name: str,
    formatted_date: str,
    formatted_time: str,
    mode: str,
    notes: Optional[str] = None
) -> str:
    patient_name, specialist_name = escape(patient_name), escape(specialist_name)
    notes = escape(notes) if notes else notes
    style = _EMAIL_STYLE.format(start="#6b8a7a", end="#5a7a6a")
    notes_row = (
        f'<div class="detail-row"><span>📝</span>&nbsp;<strong>Patient Notes:</strong>&nbsp;{notes}</div>'
        if notes else ""
    )

    return f"""
      <!DOCTYPE html>
      <html>
        <head>
          <style>{style}          </style>
        </head>
        <body>
          <div class="container">
            <div class="header">
              <h1>New Appointment Scheduled</h1>
            </div>
            <div class="content">
              <p>Dear {specialist_name},</p>
              <p>You have a new appointment scheduled with <strong>{patient_name}</strong>.</p>

              <div class="appointment-card">
                <h3 style="margin-top: 0;">Appointment Details</h3>
                <div class="detail-row">
                  <span>👤</span>&nbsp;<strong>Patient:</strong>&nbsp;{patient_name}
                </div>
                <div class="detail-row">
                  <span>📅</span>&nbsp;<strong>{formatted_date}</strong>
                </div>
                <div class="detail-row">
                  <span>🕐</span>&nbsp;<strong>{formatted_time}</strong>
                </div>
                {_mode_row(mode)}
                {notes_row}
              </div>

              <div class="footer">
                <p>NauriCare Clinician Portal</p>
              </div>
            </div>
          </div>
        </body>
      </html>
    """

class NotificationService:
    def __init__(self, db: Session, transport: EmailTransport):
        self.db = db
        self.transport = transport

    def get_clinician_email(self, specialist_id: str) -> Optional[str]:
        """Look up the clinician's contact email, if one is on file."""
        clinician = self.db.query(ClinicianProfile).filter(
            ClinicianProfile.id == specialist_id
        ).first()

        if not clinician:
            return None
        return clinician.contact_email

    async def send_appointment_notification(
        self,
        request: AppointmentNotificationRequest
    ) -> Dict[str, Any]:
        """Email the booking confirmation to the patient and the clinician.

        Each recipient is attempted independently; a failed send is recorded
        in ``emailResults`` rather than raised.
        """
        logger.info(
            f"Processing appointment notification: appointment={request.appointment_id} "
            f"specialist={request.specialist_name} mode={request.mode}"
        )

        appointment_date = parse_appointment_datetime(request.appointment_datetime)
        formatted_date = format_display_date(appointment_date)
        formatted_time = format_display_time(appointment_date)

        clinician_email = self.get_clinician_email(request.specialist_id)

        ics_content = calendar_invite.build_invite(
            appointment_id=request.appointment_id,
            start=appointment_date,
            summary=calendar_invite.email_summary(request.specialist_name, request.patient_name),
            mode=request.mode,
            notes=request.notes,
        )
        attachments = [{
            "filename": calendar_invite.attachment_filename(request.appointment_id),
            "content": calendar_invite.encode_attachment(ics_content),
        }]

        email_results = []

        patient_html = build_patient_email(
            request.patient_name, request.specialist_name,
            formatted_date, formatted_time, request.mode, request.notes
        )
        email_results.append(await self._deliver(
            "patient",
            request.patient_email,
            f"✅ Appointment Confirmed with {request.specialist_name}",
            patient_html,
            attachments
        ))

        if clinician_email:
            clinician_html = build_clinician_email(
                request.patient_name, request.specialist_name,
                formatted_date, formatted_time, request.mode, request.notes
            )
            email_results.append(await self._deliver(
                "clinician",
                clinician_email,
                f"📅 New Appointment: {request.patient_name}",
                clinician_html,
                attachments
            ))

        return {
            "success": True,
            "message": "Notification emails processed",
            "emailResults": email_results,
            "appointment": {
                "id": request.appointment_id,
                "date": formatted_date,
                "time": formatted_time,
                "mode": request.mode,
            },
        }

    async def _deliver(self, recipient, to, subject, html, attachments) -> Dict[str, Any]:
        try:
            result = await self.transport.send(to, subject, html, attachments)
            logger.info(f"{recipient.capitalize()} email sent")
            return {"recipient": recipient, "success": True, "result": result}
        except EmailDeliveryError as e:
            logger.error(f"Failed to send {recipient} email: {str(e)}")
            return {"recipient": recipient, "success": False, "error": str(e)}
        except Exception as e:
            # Transport failures of any kind stay with this recipient
            logger.exception(f"Failed to send {recipient} email")
            return {"recipient": recipient, "success": False, "error": str(e)}
