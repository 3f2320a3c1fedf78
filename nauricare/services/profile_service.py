from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from typing import List
import logging

from ..models.patient import PatientProfile
from ..models.clinician import ClinicianProfile
from ..models.user import UserRoleAssignment
from ..core.security import UserRole
from ..schemas.profile import PatientProfileCreate, PatientProfileUpdate

logger = logging.getLogger(__name__)

class ProfileService:
    def __init__(self, db: Session):
        self.db = db

    def get_patient_profile(self, user_id: str) -> PatientProfile:
        """Return the caller's patient profile or ask them to finish onboarding."""
        profile = self.db.query(PatientProfile).filter(
            PatientProfile.user_id == user_id
        ).first()

        if not profile:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Please complete your profile first."
            )
        return profile

    def create_patient_profile(self, user_id: str, data: PatientProfileCreate) -> PatientProfile:
        """Onboarding: create the patient profile and grant the patient role."""
        existing = self.db.query(PatientProfile).filter(
            PatientProfile.user_id == user_id
        ).first()

        if existing:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Profile already exists"
            )

        profile = PatientProfile(user_id=user_id, **data.model_dump())
        self.db.add(profile)
        self.grant_role(user_id, UserRole.PATIENT)

        self.db.commit()
        self.db.refresh(profile)

        logger.info(f"Created patient profile {profile.id} for user {user_id}")
        return profile

    def update_patient_profile(self, user_id: str, data: PatientProfileUpdate) -> PatientProfile:
        profile = self.get_patient_profile(user_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(profile, field, value)

        self.db.commit()
        self.db.refresh(profile)
        return profile

    def grant_role(self, user_id: str, role: UserRole) -> None:
        """Add a role row unless the user already has it. Caller commits."""
        exists = self.db.query(UserRoleAssignment).filter(
            UserRoleAssignment.user_id == user_id,
            UserRoleAssignment.role == role.value
        ).first()

        if not exists:
            self.db.add(UserRoleAssignment(user_id=user_id, role=role.value))

    def get_roles(self, user_id: str) -> List[str]:
        rows = self.db.query(UserRoleAssignment).filter(
            UserRoleAssignment.user_id == user_id
        ).all()
        return [row.role for row in rows]

    def has_role(self, user_id: str, role: UserRole) -> bool:
        return role.value in self.get_roles(user_id)

    def list_specialists(self) -> List[ClinicianProfile]:
        return self.db.query(ClinicianProfile).order_by(
            ClinicianProfile.created_at.desc()
        ).all()

    def get_specialist(self, clinician_id: str) -> ClinicianProfile:
        clinician = self.db.query(ClinicianProfile).filter(
            ClinicianProfile.id == clinician_id
        ).first()

        if not clinician:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Specialist not found"
            )
        return clinician
