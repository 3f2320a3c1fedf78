from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...api.deps import get_current_patient
from ...models.patient import PatientProfile
from ...services.care_plan_service import CarePlanService
from ...schemas.care_plan import CarePlanResponse, CarePlanItemResponse

router = APIRouter(prefix="/care-plans", tags=["Care Plans"])

@router.get("", response_model=List[CarePlanResponse])
async def list_my_care_plans(
    patient: PatientProfile = Depends(get_current_patient),
    db: Session = Depends(get_db)
):
    return CarePlanService(db).list_for_patient(patient)

@router.post("/items/{item_id}/toggle", response_model=CarePlanItemResponse)
async def toggle_care_plan_item(
    item_id: str,
    patient: PatientProfile = Depends(get_current_patient),
    db: Session = Depends(get_db)
):
    """Mark an item done for today, or undo it."""
    return CarePlanService(db).toggle_item(patient, item_id)
