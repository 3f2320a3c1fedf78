from sqlalchemy import Column, String, ForeignKey, DateTime, Boolean, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base, generate_uuid

class CarePlan(Base):
    __tablename__ = "care_plans"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    patient_id = Column(String(36), ForeignKey("patient_profiles.id"), nullable=False, index=True)

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    created_by = Column(String(36), nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    patient = relationship("PatientProfile", back_populates="care_plans")
    items = relationship(
        "CarePlanItem",
        back_populates="care_plan",
        order_by="CarePlanItem.created_at"
    )

    def __repr__(self):
        return f"<CarePlan(id={self.id}, title='{self.title}')>"

class CarePlanItem(Base):
    __tablename__ = "care_plan_items"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    care_plan_id = Column(String(36), ForeignKey("care_plans.id"), nullable=False, index=True)

    # medication, exercise, lifestyle, appointment, ...
    item_type = Column(String(50), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    frequency = Column(String(100), nullable=True)
    completed_today = Column(Boolean, default=False)

    created_at = Column(DateTime, server_default=func.now())

    care_plan = relationship("CarePlan", back_populates="items")

    def __repr__(self):
        return f"<CarePlanItem(id={self.id}, type='{self.item_type}', title='{self.title}')>"
