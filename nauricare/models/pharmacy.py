from sqlalchemy import Column, String, ForeignKey, DateTime, Boolean, Text, Integer, Float, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base, generate_uuid

class Drug(Base):
    __tablename__ = "drugs"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(200), nullable=False, unique=True, index=True)
    category = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())

    inventory = relationship("PharmacyInventory", back_populates="drug")

    def __repr__(self):
        return f"<Drug(id={self.id}, name='{self.name}')>"

class Pharmacy(Base):
    __tablename__ = "pharmacies"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(200), nullable=False)
    location = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    hours = Column(String(100), nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    inventory = relationship("PharmacyInventory", back_populates="pharmacy")

    def __repr__(self):
        return f"<Pharmacy(id={self.id}, name='{self.name}')>"

class PharmacyInventory(Base):
    __tablename__ = "pharmacy_inventory"
    __table_args__ = (UniqueConstraint("pharmacy_id", "drug_id", name="uq_inventory_pharmacy_drug"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    pharmacy_id = Column(String(36), ForeignKey("pharmacies.id"), nullable=False, index=True)
    drug_id = Column(String(36), ForeignKey("drugs.id"), nullable=False, index=True)

    quantity = Column(Integer, nullable=False, default=0)
    in_stock = Column(Boolean, default=True)
    price_rwf = Column(Integer, nullable=True)

    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    pharmacy = relationship("Pharmacy", back_populates="inventory")
    drug = relationship("Drug", back_populates="inventory")

    @property
    def drug_name(self) -> str:
        return self.drug.name if self.drug else ""

    def __repr__(self):
        return f"<PharmacyInventory(pharmacy_id={self.pharmacy_id}, drug_id={self.drug_id}, in_stock={self.in_stock})>"
