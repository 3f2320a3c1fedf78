from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime

from ..models.appointment import AppointmentMode
from .profile import ClinicianSummary

class AppointmentCreate(BaseModel):
    clinician_id: str
    appointment_datetime: datetime
    mode: AppointmentMode = AppointmentMode.IN_PERSON
    notes: Optional[str] = Field(None, max_length=2000)

class AppointmentResponse(BaseModel):
    id: str
    patient_id: str
    clinician_id: str
    appointment_datetime: datetime
    mode: str
    notes: Optional[str] = None
    status: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class AppointmentListItem(AppointmentResponse):
    clinician: ClinicianSummary
    display_status: str
    can_cancel: bool

class AppointmentList(BaseModel):
    upcoming: List[AppointmentListItem]
    past: List[AppointmentListItem]
    cancelled: List[AppointmentListItem]

class BookingResponse(BaseModel):
    appointment: AppointmentResponse
    message: str
    notification: Dict[str, Any]
