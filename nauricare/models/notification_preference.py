from sqlalchemy import Column, String, DateTime, Boolean
from sqlalchemy.sql import func

from ..core.database import Base, generate_uuid

class NotificationPreference(Base):
    __tablename__ = "notification_preferences"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), unique=True, index=True, nullable=False)

    # Email channel
    email_appointments = Column(Boolean, default=True)
    email_care_plan_reminders = Column(Boolean, default=True)
    email_health_tips = Column(Boolean, default=True)
    email_newsletter = Column(Boolean, default=False)

    # In-app channel
    in_app_appointments = Column(Boolean, default=True)
    in_app_care_plan_reminders = Column(Boolean, default=True)
    in_app_symptom_alerts = Column(Boolean, default=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<NotificationPreference(user_id={self.user_id})>"
