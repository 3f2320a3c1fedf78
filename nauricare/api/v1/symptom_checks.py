from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...api.deps import get_current_patient
from ...models.patient import PatientProfile
from ...services import risk_scoring
from ...services.symptom_service import SymptomCheckService, assess
from ...schemas.symptom import (
    SymptomAssessmentRequest, SymptomAssessmentResponse, SymptomCheckResponse,
    SymptomCheckRecord, SymptomCatalogue
)

router = APIRouter(prefix="/symptom-checks", tags=["Symptom Checker"])

@router.get("/catalogue", response_model=SymptomCatalogue)
async def get_catalogue():
    """Symptoms and answer options offered by the checker."""
    return SymptomCatalogue(
        symptoms=risk_scoring.SYMPTOM_CATALOGUE,
        durations=[d.value for d in risk_scoring.Duration],
        severities=[s.value for s in risk_scoring.Severity]
    )

@router.post("/assess", response_model=SymptomAssessmentResponse)
async def assess_symptoms(request: SymptomAssessmentRequest):
    """Score answers without saving them."""
    try:
        return assess(request)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.post("", response_model=SymptomCheckResponse, status_code=status.HTTP_201_CREATED)
async def submit_symptom_check(
    request: SymptomAssessmentRequest,
    patient: PatientProfile = Depends(get_current_patient),
    db: Session = Depends(get_db)
):
    """Score, add insights, and save the check to the caller's history."""
    try:
        return await SymptomCheckService(db).submit(patient, request)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("", response_model=List[SymptomCheckRecord])
async def list_symptom_checks(
    patient: PatientProfile = Depends(get_current_patient),
    db: Session = Depends(get_db)
):
    return SymptomCheckService(db).history(patient)
