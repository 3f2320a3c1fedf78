from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

class CarePlanItemResponse(BaseModel):
    id: str
    care_plan_id: str
    item_type: str
    title: str
    description: Optional[str] = None
    frequency: Optional[str] = None
    completed_today: Optional[bool] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class CarePlanResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    items: List[CarePlanItemResponse] = []

    class Config:
        from_attributes = True
