from sqlalchemy import Column, String, Date, DateTime, Boolean
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base, generate_uuid

class PatientProfile(Base):
    __tablename__ = "patient_profiles"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), unique=True, index=True, nullable=False)

    # Personal information
    full_name = Column(String(200), nullable=False)
    date_of_birth = Column(Date, nullable=True)
    country = Column(String(100), nullable=True)
    language = Column(String(20), nullable=True)
    avatar_url = Column(String(500), nullable=True)

    # Health background collected during onboarding
    menstrual_status = Column(String(50), nullable=True)
    diagnosed_pcos = Column(Boolean, default=False)
    diagnosed_fibroids = Column(Boolean, default=False)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    appointments = relationship("Appointment", back_populates="patient")
    care_plans = relationship("CarePlan", back_populates="patient")
    symptom_checks = relationship("SymptomCheck", back_populates="patient")

    def __repr__(self):
        return f"<PatientProfile(id={self.id}, name='{self.full_name}')>"
