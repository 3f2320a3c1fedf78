from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.security import AuthenticatedUser
from ...api.deps import get_current_user
from ...services.profile_service import ProfileService
from ...services.storage_service import StorageService
from ...schemas.profile import (
    PatientProfileCreate, PatientProfileUpdate, PatientProfileResponse,
    AvatarUploadResponse
)

router = APIRouter(prefix="/profiles", tags=["Profiles"])

@router.post("/patients", response_model=PatientProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_patient_profile(
    profile_data: PatientProfileCreate,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Complete onboarding for the caller."""
    profile = ProfileService(db).create_patient_profile(current_user.id, profile_data)
    return PatientProfileResponse.from_orm(profile)

@router.get("/patients/me", response_model=PatientProfileResponse)
async def get_my_profile(
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    profile = ProfileService(db).get_patient_profile(current_user.id)
    return PatientProfileResponse.from_orm(profile)

@router.patch("/patients/me", response_model=PatientProfileResponse)
async def update_my_profile(
    profile_data: PatientProfileUpdate,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    profile = ProfileService(db).update_patient_profile(current_user.id, profile_data)
    return PatientProfileResponse.from_orm(profile)

@router.post("/patients/me/avatar", response_model=AvatarUploadResponse)
async def upload_avatar(
    file: UploadFile = File(...),
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Upload a new profile picture and link it to the profile."""
    return await StorageService(db).upload_avatar(current_user.id, file)

@router.get("/me/roles")
async def get_my_roles(
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return {"user_id": current_user.id, "roles": ProfileService(db).get_roles(current_user.id)}
