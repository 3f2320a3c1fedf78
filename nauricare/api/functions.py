"""
HTTP functions the client calls directly, outside the versioned REST API:
appointment notification dispatch and mapping token retrieval.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
import logging

from ..core.config import settings
from ..core.database import get_db
from ..api.deps import get_notification_transport, rate_limit_check
from ..services.notification_service import NotificationService, EmailTransport
from ..schemas.notification import AppointmentNotificationRequest, MapboxTokenResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions/v1", tags=["Functions"])

@router.post("/send-appointment-notification")
async def send_appointment_notification(
    request: AppointmentNotificationRequest,
    db: Session = Depends(get_db),
    transport: EmailTransport = Depends(get_notification_transport),
    _: None = Depends(rate_limit_check)
):
    """Email booking confirmations with the calendar invite attached."""
    try:
        return await NotificationService(db, transport).send_appointment_notification(request)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.exception("Error in send-appointment-notification")
        return JSONResponse(status_code=500, content={"error": str(e)})

@router.get("/get-mapbox-token", response_model=MapboxTokenResponse)
async def get_mapbox_token():
    """Public map token for the pharmacy finder."""
    if not settings.MAPBOX_TOKEN:
        logger.error("MAPBOX_TOKEN is not configured")
        return JSONResponse(status_code=500, content={"error": "Mapbox token not configured"})
    return MapboxTokenResponse(token=settings.MAPBOX_TOKEN)
