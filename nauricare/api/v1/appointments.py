from fastapi import APIRouter, Depends, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.security import AuthenticatedUser
from ...api.deps import get_current_user, get_current_patient, get_notification_transport
from ...models.patient import PatientProfile
from ...services.appointment_service import (
    AppointmentService, BOOKING_TIME_SLOTS, bucket_appointments,
    display_status, can_cancel, utcnow
)
from ...services.notification_service import NotificationService, EmailTransport
from ...services.calendar_invite import ICS_MEDIA_TYPE
from ...schemas.appointment import (
    AppointmentCreate, AppointmentResponse, AppointmentListItem,
    AppointmentList, BookingResponse
)
from ...schemas.profile import ClinicianSummary

router = APIRouter(prefix="/appointments", tags=["Appointments"])

def _list_item(appointment, now) -> AppointmentListItem:
    base = AppointmentResponse.from_orm(appointment).model_dump()
    return AppointmentListItem(
        **base,
        clinician=ClinicianSummary.from_orm(appointment.clinician),
        display_status=display_status(appointment, now),
        can_cancel=can_cancel(appointment, now)
    )

@router.get("/time-slots")
async def get_time_slots():
    """Bookable start times (clinic local time); Sundays are closed."""
    return {"time_slots": BOOKING_TIME_SLOTS, "closed_days": ["Sunday"]}

@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def book_appointment(
    booking: AppointmentCreate,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    transport: EmailTransport = Depends(get_notification_transport)
):
    """Book an appointment and email confirmations to both parties."""
    service = AppointmentService(db)
    result = await service.book_appointment(
        current_user, booking, NotificationService(db, transport)
    )
    return BookingResponse(
        appointment=AppointmentResponse.from_orm(result["appointment"]),
        message=result["message"],
        notification=result["notification"]
    )

@router.get("", response_model=AppointmentList)
async def list_my_appointments(
    patient: PatientProfile = Depends(get_current_patient),
    db: Session = Depends(get_db)
):
    """The caller's appointments split into upcoming, past and cancelled."""
    now = utcnow()
    appointments = AppointmentService(db).list_for_patient(patient)
    buckets = bucket_appointments(appointments, now)
    return AppointmentList(**{
        name: [_list_item(a, now) for a in items] for name, items in buckets.items()
    })

@router.get("/{appointment_id}", response_model=AppointmentListItem)
async def get_appointment(
    appointment_id: str,
    patient: PatientProfile = Depends(get_current_patient),
    db: Session = Depends(get_db)
):
    appointment = AppointmentService(db).get_for_patient(patient, appointment_id)
    return _list_item(appointment, utcnow())

@router.post("/{appointment_id}/cancel", response_model=AppointmentResponse)
async def cancel_appointment(
    appointment_id: str,
    patient: PatientProfile = Depends(get_current_patient),
    db: Session = Depends(get_db)
):
    appointment = AppointmentService(db).cancel(patient, appointment_id)
    return AppointmentResponse.from_orm(appointment)

@router.get("/{appointment_id}/calendar.ics")
async def download_calendar_invite(
    appointment_id: str,
    patient: PatientProfile = Depends(get_current_patient),
    db: Session = Depends(get_db)
):
    """Calendar file for adding the appointment to a personal calendar."""
    invite = AppointmentService(db).calendar_invite(patient, appointment_id)
    return Response(
        content=invite["content"],
        media_type=ICS_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{invite["filename"]}"'}
    )
