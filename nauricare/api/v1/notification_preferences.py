from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.security import AuthenticatedUser
from ...api.deps import get_current_user
from ...services.preference_service import PreferenceService
from ...schemas.preference import NotificationPreferences, NotificationPreferencesUpdate

router = APIRouter(prefix="/notification-preferences", tags=["Notification Preferences"])

@router.get("", response_model=NotificationPreferences)
async def get_preferences(
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return PreferenceService(db).get(current_user.id)

@router.patch("", response_model=NotificationPreferences)
async def update_preferences(
    update: NotificationPreferencesUpdate,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Save changed switches; unspecified ones keep their current value."""
    return PreferenceService(db).upsert(current_user.id, update)
