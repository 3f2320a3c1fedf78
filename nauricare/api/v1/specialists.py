from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...services.profile_service import ProfileService
from ...schemas.profile import ClinicianResponse

router = APIRouter(prefix="/specialists", tags=["Specialists"])

@router.get("", response_model=List[ClinicianResponse])
async def list_specialists(db: Session = Depends(get_db)):
    """Clinician directory, newest first."""
    return ProfileService(db).list_specialists()

@router.get("/{clinician_id}", response_model=ClinicianResponse)
async def get_specialist(clinician_id: str, db: Session = Depends(get_db)):
    return ProfileService(db).get_specialist(clinician_id)
