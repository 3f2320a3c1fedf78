from sqlalchemy import Column, String, ForeignKey, DateTime, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base, generate_uuid

class SymptomCheck(Base):
    __tablename__ = "symptom_checks"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    patient_id = Column(String(36), ForeignKey("patient_profiles.id"), nullable=False, index=True)

    # {"selected": [...], "duration": "...", "severity": "..."}
    symptoms = Column(JSON, nullable=False)
    risk_level = Column(String(20), nullable=False)

    created_at = Column(DateTime, server_default=func.now())

    patient = relationship("PatientProfile", back_populates="symptom_checks")

    def __repr__(self):
        return f"<SymptomCheck(id={self.id}, risk_level='{self.risk_level}')>"
