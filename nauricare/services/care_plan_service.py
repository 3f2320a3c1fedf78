from sqlalchemy.orm import Session, selectinload
from fastapi import HTTPException, status
from typing import List

from ..models.care_plan import CarePlan, CarePlanItem
from ..models.patient import PatientProfile

class CarePlanService:
    def __init__(self, db: Session):
        self.db = db

    def list_for_patient(self, patient: PatientProfile) -> List[CarePlan]:
        """Care plans with their items, items oldest first."""
        return self.db.query(CarePlan).options(
            selectinload(CarePlan.items)
        ).filter(
            CarePlan.patient_id == patient.id
        ).order_by(CarePlan.created_at.asc()).all()

    def toggle_item(self, patient: PatientProfile, item_id: str) -> CarePlanItem:
        """Flip today's completion flag on an item from one of the caller's plans."""
        item = self.db.query(CarePlanItem).join(CarePlan).filter(
            CarePlanItem.id == item_id,
            CarePlan.patient_id == patient.id
        ).first()

        if not item:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Care plan item not found"
            )

        item.completed_today = not bool(item.completed_today)
        self.db.commit()
        self.db.refresh(item)
        return item
