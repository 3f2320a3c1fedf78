from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime

class PatientProfileCreate(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=200)
    date_of_birth: Optional[date] = None
    country: Optional[str] = None
    language: Optional[str] = "en"
    menstrual_status: Optional[str] = None
    diagnosed_pcos: bool = False
    diagnosed_fibroids: bool = False

class PatientProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=200)
    date_of_birth: Optional[date] = None
    country: Optional[str] = None
    language: Optional[str] = None
    menstrual_status: Optional[str] = None
    diagnosed_pcos: Optional[bool] = None
    diagnosed_fibroids: Optional[bool] = None

class PatientProfileResponse(BaseModel):
    id: str
    user_id: str
    full_name: str
    date_of_birth: Optional[date] = None
    country: Optional[str] = None
    language: Optional[str] = None
    menstrual_status: Optional[str] = None
    diagnosed_pcos: Optional[bool] = None
    diagnosed_fibroids: Optional[bool] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class AvatarUploadResponse(BaseModel):
    avatar_url: str
    path: str

class ClinicianResponse(BaseModel):
    id: str
    full_name: str
    specialty: str
    bio: Optional[str] = None
    country: Optional[str] = None
    location: Optional[str] = None
    languages: Optional[List[str]] = None
    fee_range_min: Optional[int] = None
    fee_range_max: Optional[int] = None
    telehealth_available: Optional[bool] = None
    avatar_url: Optional[str] = None

    class Config:
        from_attributes = True

class ClinicianSummary(BaseModel):
    id: str
    full_name: str
    specialty: str
    telehealth_available: Optional[bool] = None

    class Config:
        from_attributes = True
