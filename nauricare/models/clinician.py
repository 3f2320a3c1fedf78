from sqlalchemy import Column, String, DateTime, Boolean, Text, Integer, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base, generate_uuid

class ClinicianProfile(Base):
    __tablename__ = "clinician_profiles"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), index=True, nullable=False)

    # Professional information
    full_name = Column(String(200), nullable=False)
    specialty = Column(String(100), nullable=False)
    bio = Column(Text, nullable=True)
    languages = Column(JSON, nullable=True)
    avatar_url = Column(String(500), nullable=True)

    # Practice information
    country = Column(String(100), nullable=True)
    location = Column(String(255), nullable=True)
    fee_range_min = Column(Integer, nullable=True)
    fee_range_max = Column(Integer, nullable=True)
    telehealth_available = Column(Boolean, default=False)

    # Mirrors the auth directory email so notifications can reach the clinician
    contact_email = Column(String(255), nullable=True)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    appointments = relationship("Appointment", back_populates="clinician")

    def __repr__(self):
        return f"<ClinicianProfile(id={self.id}, name='{self.full_name}', specialty='{self.specialty}')>"
