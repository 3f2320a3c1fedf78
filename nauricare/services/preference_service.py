from sqlalchemy.orm import Session
from datetime import datetime

from ..models.notification_preference import NotificationPreference
from ..schemas.preference import NotificationPreferences, NotificationPreferencesUpdate

PREFERENCE_FIELDS = list(NotificationPreferences.model_fields.keys())

class PreferenceService:
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> NotificationPreferences:
        """Stored preferences, with defaults for a missing row or null columns."""
        row = self.db.query(NotificationPreference).filter(
            NotificationPreference.user_id == user_id
        ).first()

        defaults = NotificationPreferences()
        if not row:
            return defaults

        values = {}
        for field in PREFERENCE_FIELDS:
            stored = getattr(row, field)
            values[field] = getattr(defaults, field) if stored is None else stored
        return NotificationPreferences(**values)

    def upsert(self, user_id: str, update: NotificationPreferencesUpdate) -> NotificationPreferences:
        """Merge the changed flags onto the current values and save by user_id."""
        merged = self.get(user_id).model_dump()
        merged.update(update.model_dump(exclude_unset=True, exclude_none=True))

        row = self.db.query(NotificationPreference).filter(
            NotificationPreference.user_id == user_id
        ).first()

        if not row:
            row = NotificationPreference(user_id=user_id)
            self.db.add(row)

        for field, value in merged.items():
            setattr(row, field, value)
        row.updated_at = datetime.utcnow()

        self.db.commit()
        return NotificationPreferences(**merged)
