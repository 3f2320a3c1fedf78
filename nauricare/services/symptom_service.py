from sqlalchemy.orm import Session
from typing import List, Dict, Any
import logging

from ..models.patient import PatientProfile
from ..models.symptom_check import SymptomCheck
from ..schemas.symptom import SymptomAssessmentRequest
from . import risk_scoring
from .symptom_analysis import analyze_symptoms

logger = logging.getLogger(__name__)

def assess(request: SymptomAssessmentRequest) -> Dict[str, Any]:
    """Score a set of answers without saving anything."""
    selected = risk_scoring.normalize_symptoms(request.symptoms)
    score = risk_scoring.calculate_score(request.severity, len(selected), request.duration)
    level = risk_scoring.risk_level_for_score(score)

    return {
        "score": score,
        "risk_level": level,
        "title": risk_scoring.RISK_TITLES[level],
        "guidance": risk_scoring.RISK_GUIDANCE[level],
        "disclaimer": risk_scoring.MEDICAL_DISCLAIMER,
    }

class SymptomCheckService:
    def __init__(self, db: Session):
        self.db = db

    async def submit(self, patient: PatientProfile, request: SymptomAssessmentRequest) -> Dict[str, Any]:
        """Score, fetch insights, and record the check for the patient."""
        result = assess(request)
        selected = risk_scoring.normalize_symptoms(request.symptoms)

        analysis, available = await analyze_symptoms(
            selected, request.duration.value, request.severity.value
        )

        check = SymptomCheck(
            patient_id=patient.id,
            symptoms={
                "selected": selected,
                "duration": request.duration.value,
                "severity": request.severity.value,
            },
            risk_level=result["risk_level"].value,
        )
        self.db.add(check)
        self.db.commit()
        self.db.refresh(check)

        logger.info(f"Recorded symptom check {check.id} risk={check.risk_level}")
        return {
            **result,
            "id": check.id,
            "analysis": analysis,
            "analysis_available": available,
            "created_at": check.created_at,
        }

    def history(self, patient: PatientProfile) -> List[SymptomCheck]:
        return self.db.query(SymptomCheck).filter(
            SymptomCheck.patient_id == patient.id
        ).order_by(SymptomCheck.created_at.desc()).all()
