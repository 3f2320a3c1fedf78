from pydantic import BaseModel, Field
from typing import Optional

class AppointmentNotificationRequest(BaseModel):
    """Body accepted by the notification dispatch function (camelCase on the wire)."""
    appointment_id: str = Field(..., alias="appointmentId")
    patient_name: str = Field(..., alias="patientName")
    patient_email: str = Field(..., alias="patientEmail")
    specialist_name: str = Field(..., alias="specialistName")
    specialist_id: str = Field(..., alias="specialistId")
    appointment_datetime: str = Field(..., alias="appointmentDateTime")
    mode: str
    notes: Optional[str] = None

    class Config:
        populate_by_name = True

class MapboxTokenResponse(BaseModel):
    token: str
