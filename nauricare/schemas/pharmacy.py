from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

class PharmacyResponse(BaseModel):
    id: str
    name: str
    location: str
    phone: str
    hours: str
    latitude: float
    longitude: float

    class Config:
        from_attributes = True

class PharmacySearchResult(BaseModel):
    pharmacy: PharmacyResponse
    matching_drugs: List[str]

class PharmacySearchResponse(BaseModel):
    query: str
    count: int
    results: List[PharmacySearchResult]

class InventoryLineResponse(BaseModel):
    id: str
    pharmacy_id: str
    drug_id: str
    drug_name: str
    quantity: int
    in_stock: Optional[bool] = None
    price_rwf: Optional[int] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class InventoryUpdate(BaseModel):
    quantity: Optional[int] = Field(None, ge=0)
    in_stock: Optional[bool] = None
    price_rwf: Optional[int] = Field(None, ge=0)

class InventoryCreate(BaseModel):
    pharmacy_id: str
    drug_id: str
    quantity: int = Field(0, ge=0)
    in_stock: bool = True
    price_rwf: Optional[int] = Field(None, ge=0)
