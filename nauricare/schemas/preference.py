from pydantic import BaseModel
from typing import Optional

class NotificationPreferences(BaseModel):
    email_appointments: bool = True
    email_care_plan_reminders: bool = True
    email_health_tips: bool = True
    email_newsletter: bool = False
    in_app_appointments: bool = True
    in_app_care_plan_reminders: bool = True
    in_app_symptom_alerts: bool = True

class NotificationPreferencesUpdate(BaseModel):
    email_appointments: Optional[bool] = None
    email_care_plan_reminders: Optional[bool] = None
    email_health_tips: Optional[bool] = None
    email_newsletter: Optional[bool] = None
    in_app_appointments: Optional[bool] = None
    in_app_care_plan_reminders: Optional[bool] = None
    in_app_symptom_alerts: Optional[bool] = None
