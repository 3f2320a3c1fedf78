from sqlalchemy.orm import Session, selectinload, joinedload
from fastapi import HTTPException, status
from typing import Optional, List, Dict, Any
import logging

from ..models.pharmacy import Drug, Pharmacy, PharmacyInventory
from ..schemas.pharmacy import InventoryCreate, InventoryUpdate
from .inventory_search import search_inventory, pharmacies_stocking, suggest_drugs
from .realtime import ChangeBroadcaster

logger = logging.getLogger(__name__)

class PharmacyService:
    def __init__(self, db: Session, broadcaster: Optional[ChangeBroadcaster] = None):
        self.db = db
        self.broadcaster = broadcaster

    def list_pharmacies(self) -> List[Pharmacy]:
        return self.db.query(Pharmacy).options(
            selectinload(Pharmacy.inventory).joinedload(PharmacyInventory.drug)
        ).order_by(Pharmacy.name.asc()).all()

    def inventory_lines(self) -> List[PharmacyInventory]:
        return self.db.query(PharmacyInventory).options(
            joinedload(PharmacyInventory.drug)
        ).all()

    def search_pharmacies(self, query: Optional[str]) -> List[Dict[str, Any]]:
        """Pharmacies holding an in-stock drug whose name contains the query."""
        return pharmacies_stocking(self.list_pharmacies(), query)

    def search_inventory(self, query: Optional[str]) -> List[PharmacyInventory]:
        lines = search_inventory(self.inventory_lines(), query)
        return sorted(lines, key=lambda line: (line.drug_name.lower(), line.pharmacy_id))

    def drug_suggestions(self, query: Optional[str], limit: int = 5) -> List[str]:
        names = [name for (name,) in self.db.query(Drug.name).all()]
        return suggest_drugs(names, query, limit=limit)

    def create_inventory_line(self, data: InventoryCreate) -> PharmacyInventory:
        if not self.db.query(Pharmacy).filter(Pharmacy.id == data.pharmacy_id).first():
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pharmacy not found")
        if not self.db.query(Drug).filter(Drug.id == data.drug_id).first():
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Drug not found")

        existing = self.db.query(PharmacyInventory).filter(
            PharmacyInventory.pharmacy_id == data.pharmacy_id,
            PharmacyInventory.drug_id == data.drug_id
        ).first()
        if existing:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Inventory line already exists for this pharmacy and drug"
            )

        line = PharmacyInventory(**data.model_dump())
        self.db.add(line)
        self.db.commit()
        self.db.refresh(line)

        self._publish("INSERT", line)
        return line

    def update_inventory_line(self, line_id: str, data: InventoryUpdate) -> PharmacyInventory:
        line = self.db.query(PharmacyInventory).filter(
            PharmacyInventory.id == line_id
        ).first()

        if not line:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Inventory line not found"
            )

        changes = data.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(line, field, value)

        # A zero count means nothing is on the shelf
        if changes.get("quantity") == 0 and "in_stock" not in changes:
            line.in_stock = False

        self.db.commit()
        self.db.refresh(line)

        self._publish("UPDATE", line)
        return line

    def _publish(self, event_type: str, line: PharmacyInventory) -> None:
        if self.broadcaster is None:
            return
        self.broadcaster.publish({
            "type": event_type,
            "table": PharmacyInventory.__tablename__,
            "id": line.id,
            "pharmacy_id": line.pharmacy_id,
        })
