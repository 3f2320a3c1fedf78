from sqlalchemy import Column, String, ForeignKey, DateTime, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from ..core.database import Base, generate_uuid

class AppointmentStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class AppointmentMode(str, enum.Enum):
    IN_PERSON = "in-person"
    TELEHEALTH = "telehealth"

class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True, default=generate_uuid)

    # Relationships
    patient_id = Column(String(36), ForeignKey("patient_profiles.id"), nullable=False, index=True)
    clinician_id = Column(String(36), ForeignKey("clinician_profiles.id"), nullable=False, index=True)

    # Appointment details, stored as naive UTC
    appointment_datetime = Column(DateTime, nullable=False, index=True)
    mode = Column(String(20), nullable=False)
    status = Column(String(20), default=AppointmentStatus.SCHEDULED.value)
    notes = Column(Text, nullable=True)

    # Tracking
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    patient = relationship("PatientProfile", back_populates="appointments")
    clinician = relationship("ClinicianProfile", back_populates="appointments")

    def __repr__(self):
        return f"<Appointment(id={self.id}, patient_id={self.patient_id}, clinician_id={self.clinician_id}, date='{self.appointment_datetime}')>"
