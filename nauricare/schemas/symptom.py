from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from ..services.risk_scoring import Severity, Duration, RiskLevel

class SymptomAssessmentRequest(BaseModel):
    symptoms: List[str] = Field(..., min_length=1)
    duration: Duration
    severity: Severity

class SymptomAssessmentResponse(BaseModel):
    score: int
    risk_level: RiskLevel
    title: str
    guidance: str
    disclaimer: str

class SymptomCheckResponse(SymptomAssessmentResponse):
    id: str
    analysis: str
    analysis_available: bool
    created_at: Optional[datetime] = None

class SymptomCheckRecord(BaseModel):
    id: str
    symptoms: dict
    risk_level: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class SymptomCatalogue(BaseModel):
    symptoms: List[str]
    durations: List[str]
    severities: List[str]
