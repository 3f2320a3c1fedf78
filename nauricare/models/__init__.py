from .patient import PatientProfile
from .clinician import ClinicianProfile
from .appointment import Appointment, AppointmentStatus, AppointmentMode
from .care_plan import CarePlan, CarePlanItem
from .symptom_check import SymptomCheck
from .pharmacy import Drug, Pharmacy, PharmacyInventory
from .notification_preference import NotificationPreference
from .article import Article
from .user import UserRoleAssignment

__all__ = [
    "PatientProfile",
    "ClinicianProfile",
    "Appointment",
    "AppointmentStatus",
    "AppointmentMode",
    "CarePlan",
    "CarePlanItem",
    "SymptomCheck",
    "Drug",
    "Pharmacy",
    "PharmacyInventory",
    "NotificationPreference",
    "Article",
    "UserRoleAssignment",
]
