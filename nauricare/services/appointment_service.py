from sqlalchemy.orm import Session, joinedload
from fastapi import HTTPException, status
from datetime import datetime, timedelta, timezone
from typing import Optional, List, Dict, Any
import logging

from ..core.config import settings
from ..core.security import AuthenticatedUser
from ..models.appointment import Appointment, AppointmentStatus, AppointmentMode
from ..models.patient import PatientProfile
from ..schemas.appointment import AppointmentCreate
from ..schemas.notification import AppointmentNotificationRequest
from .profile_service import ProfileService
from .notification_service import NotificationService
from . import calendar_invite

logger = logging.getLogger(__name__)

# Bookable start times in clinic local time
BOOKING_TIME_SLOTS = [
    "09:00", "09:30", "10:00", "10:30", "11:00", "11:30",
    "14:00", "14:30", "15:00", "15:30", "16:00", "16:30",
]

CLOSED_WEEKDAYS = {6}  # Sunday

def clinic_timezone() -> timezone:
    return timezone(timedelta(hours=settings.CLINIC_UTC_OFFSET_HOURS))

def utcnow() -> datetime:
    return datetime.utcnow()

def to_naive_utc(value: datetime) -> datetime:
    return calendar_invite.to_utc(value).replace(tzinfo=None)

def is_past(appointment: Appointment, now: datetime) -> bool:
    return appointment.appointment_datetime < now

def is_today(appointment: Appointment, now: datetime) -> bool:
    return appointment.appointment_datetime.date() == now.date()

def display_status(appointment: Appointment, now: datetime) -> str:
    """Badge shown next to an appointment in the patient's list."""
    if appointment.status == AppointmentStatus.CANCELLED.value:
        return "Cancelled"
    if appointment.status == AppointmentStatus.COMPLETED.value:
        return "Completed"
    if is_past(appointment, now) and not is_today(appointment, now):
        return "Past"
    if is_today(appointment, now):
        return "Today"
    return "Upcoming"

def can_cancel(appointment: Appointment, now: datetime) -> bool:
    return (
        appointment.status not in (AppointmentStatus.CANCELLED.value, AppointmentStatus.COMPLETED.value)
        and not is_past(appointment, now)
    )

def bucket_appointments(appointments: List[Appointment], now: datetime) -> Dict[str, List[Appointment]]:
    """Split into upcoming, past and cancelled the way the appointments screen tabs them."""
    cancelled_value = AppointmentStatus.CANCELLED.value
    completed_value = AppointmentStatus.COMPLETED.value

    upcoming = [
        a for a in appointments
        if a.status != cancelled_value and a.status != completed_value and not is_past(a, now)
    ]
    past = [
        a for a in appointments
        if a.status == completed_value or (a.status != cancelled_value and is_past(a, now))
    ]
    cancelled = [a for a in appointments if a.status == cancelled_value]

    return {"upcoming": upcoming, "past": past, "cancelled": cancelled}

class AppointmentService:
    def __init__(self, db: Session):
        self.db = db
        self.profiles = ProfileService(db)

    def validate_slot(self, appointment_datetime: datetime, now: Optional[datetime] = None) -> datetime:
        """Check the requested start against the booking calendar; returns naive UTC."""
        start = to_naive_utc(appointment_datetime)
        now = now or utcnow()

        if start <= now:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Please select a future date and time for your appointment."
            )

        local = calendar_invite.to_utc(appointment_datetime).astimezone(clinic_timezone())
        if local.weekday() in CLOSED_WEEKDAYS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Appointments are not available on Sundays."
            )

        if local.strftime("%H:%M") not in BOOKING_TIME_SLOTS or local.second or local.microsecond:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Please choose one of the available time slots: {', '.join(BOOKING_TIME_SLOTS)}"
            )

        return start

    def create_appointment(self, user: AuthenticatedUser, data: AppointmentCreate) -> Appointment:
        """Insert a scheduled appointment for the caller's patient profile."""
        patient = self.profiles.get_patient_profile(user.id)
        clinician = self.profiles.get_specialist(data.clinician_id)

        if data.mode == AppointmentMode.TELEHEALTH and not clinician.telehealth_available:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"{clinician.full_name} does not offer telehealth appointments."
            )

        start = self.validate_slot(data.appointment_datetime)

        appointment = Appointment(
            patient_id=patient.id,
            clinician_id=clinician.id,
            appointment_datetime=start,
            mode=data.mode.value,
            notes=data.notes or None,
            status=AppointmentStatus.SCHEDULED.value
        )

        self.db.add(appointment)
        self.db.commit()
        self.db.refresh(appointment)

        logger.info(f"Booked appointment {appointment.id} with clinician {clinician.id}")
        return appointment

    async def book_appointment(
        self,
        user: AuthenticatedUser,
        data: AppointmentCreate,
        notifier: NotificationService
    ) -> Dict[str, Any]:
        """Create the appointment, then send confirmations.

        The booking stands even when the notification step fails.
        """
        appointment = self.create_appointment(user, data)
        clinician = appointment.clinician
        patient = appointment.patient

        request = AppointmentNotificationRequest(
            appointment_id=appointment.id,
            patient_name=patient.full_name,
            patient_email=user.email or "",
            specialist_name=clinician.full_name,
            specialist_id=clinician.id,
            appointment_datetime=calendar_invite.to_utc(appointment.appointment_datetime).isoformat(),
            mode=appointment.mode,
            notes=appointment.notes,
        )

        try:
            notification = await notifier.send_appointment_notification(request)
        except Exception as e:
            logger.exception(f"Notification sending failed, but appointment {appointment.id} was created")
            notification = {"success": False, "error": str(e)}

        return {
            "appointment": appointment,
            "message": f"Your appointment with {clinician.full_name} is confirmed.",
            "notification": notification,
        }

    def list_for_patient(self, patient: PatientProfile) -> List[Appointment]:
        return self.db.query(Appointment).options(
            joinedload(Appointment.clinician)
        ).filter(
            Appointment.patient_id == patient.id
        ).order_by(Appointment.appointment_datetime.asc()).all()

    def get_for_patient(self, patient: PatientProfile, appointment_id: str) -> Appointment:
        appointment = self.db.query(Appointment).filter(
            Appointment.id == appointment_id,
            Appointment.patient_id == patient.id
        ).first()

        if not appointment:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Appointment not found"
            )
        return appointment

    def cancel(self, patient: PatientProfile, appointment_id: str, now: Optional[datetime] = None) -> Appointment:
        """Soft-cancel through the status field; rows are never deleted."""
        appointment = self.get_for_patient(patient, appointment_id)

        if not can_cancel(appointment, now or utcnow()):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Could not cancel appointment. Only upcoming appointments can be cancelled."
            )

        appointment.status = AppointmentStatus.CANCELLED.value
        self.db.commit()
        self.db.refresh(appointment)

        logger.info(f"Cancelled appointment {appointment.id}")
        return appointment

    def calendar_invite(self, patient: PatientProfile, appointment_id: str) -> Dict[str, str]:
        """Render the downloadable invite for one of the caller's appointments."""
        appointment = self.get_for_patient(patient, appointment_id)

        content = calendar_invite.build_invite(
            appointment_id=appointment.id,
            start=appointment.appointment_datetime,
            summary=calendar_invite.patient_summary(appointment.clinician.full_name),
            mode=appointment.mode,
            notes=appointment.notes,
        )
        return {
            "filename": calendar_invite.download_filename(appointment.appointment_datetime),
            "content": content,
        }
