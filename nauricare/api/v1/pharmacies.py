from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from sqlalchemy.orm import Session
from typing import List, Optional
import asyncio
import logging

from ...core.database import get_db
from ...core.security import AuthenticatedUser
from ...api.deps import get_admin_user, get_broadcaster
from ...services.pharmacy_service import PharmacyService
from ...services.realtime import ChangeBroadcaster
from ...schemas.pharmacy import (
    PharmacyResponse, PharmacySearchResponse, PharmacySearchResult,
    InventoryLineResponse, InventoryUpdate, InventoryCreate
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pharmacies", tags=["Pharmacies"])

def _search_response(service: PharmacyService, q: Optional[str]) -> PharmacySearchResponse:
    results = [
        PharmacySearchResult(
            pharmacy=PharmacyResponse.from_orm(entry["pharmacy"]),
            matching_drugs=entry["matching_drugs"]
        )
        for entry in service.search_pharmacies(q)
    ]
    return PharmacySearchResponse(query=q or "", count=len(results), results=results)

@router.get("", response_model=PharmacySearchResponse)
async def search_pharmacies(
    q: Optional[str] = Query(None, description="Drug name, matched case-insensitively"),
    db: Session = Depends(get_db)
):
    """Partner pharmacies, narrowed to those with the drug in stock when q is given."""
    return _search_response(PharmacyService(db), q)

@router.get("/drugs/suggestions", response_model=List[str])
async def drug_suggestions(
    q: Optional[str] = Query(None),
    limit: int = Query(5, ge=1, le=20),
    db: Session = Depends(get_db)
):
    return PharmacyService(db).drug_suggestions(q, limit=limit)

@router.get("/inventory", response_model=List[InventoryLineResponse])
async def search_inventory(
    q: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """Inventory lines in stock whose drug name contains q."""
    return PharmacyService(db).search_inventory(q)

@router.post("/inventory", response_model=InventoryLineResponse, status_code=status.HTTP_201_CREATED)
async def create_inventory_line(
    data: InventoryCreate,
    db: Session = Depends(get_db),
    broadcaster: ChangeBroadcaster = Depends(get_broadcaster),
    _: AuthenticatedUser = Depends(get_admin_user)
):
    return PharmacyService(db, broadcaster).create_inventory_line(data)

@router.patch("/inventory/{line_id}", response_model=InventoryLineResponse)
async def update_inventory_line(
    line_id: str,
    data: InventoryUpdate,
    db: Session = Depends(get_db),
    broadcaster: ChangeBroadcaster = Depends(get_broadcaster),
    _: AuthenticatedUser = Depends(get_admin_user)
):
    """Update stock for one line and notify live subscribers."""
    return PharmacyService(db, broadcaster).update_inventory_line(line_id, data)

@router.websocket("/live")
async def live_pharmacy_search(
    websocket: WebSocket,
    q: Optional[str] = None,
    db: Session = Depends(get_db),
    broadcaster: ChangeBroadcaster = Depends(get_broadcaster)
):
    """Push search results now and again after every inventory change.

    The client may send ``{"q": "..."}`` at any time to change the query;
    it gets a fresh snapshot in reply.
    """
    queue = broadcaster.subscribe()
    service = PharmacyService(db)
    listener = None
    change = None
    try:
        await websocket.accept()
        await websocket.send_json({
            "event": "snapshot",
            "data": _search_response(service, q).model_dump()
        })

        listener = asyncio.ensure_future(websocket.receive_json())
        while True:
            if change is None:
                change = asyncio.ensure_future(queue.get())
            done, _ = await asyncio.wait({listener, change}, return_when=asyncio.FIRST_COMPLETED)

            if listener in done:
                try:
                    message = listener.result()
                except ValueError:
                    message = {}
                if isinstance(message, dict) and "q" in message:
                    q = message["q"]
                    await websocket.send_json({
                        "event": "snapshot",
                        "data": _search_response(service, q).model_dump()
                    })
                listener = asyncio.ensure_future(websocket.receive_json())

            if change in done:
                event = change.result()
                change = None
                # Re-read from the database; the latest fetch wins
                db.expire_all()
                await websocket.send_json({
                    "event": "refresh",
                    "change": event,
                    "data": _search_response(service, q).model_dump()
                })
    except WebSocketDisconnect:
        logger.info("Live pharmacy search client disconnected")
    finally:
        for task in (listener, change):
            if task is not None and not task.done():
                task.cancel()
        broadcaster.unsubscribe(queue)
