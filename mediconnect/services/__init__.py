"""
Services layer for MediConnect.
"""

from .auth import AuthService
from .booking import BookingService
from .doctor_notes import DoctorNotesService
from .email import EmailService
from .metrics import HealthMetricsService
from .records import InMemoryRecordStore, RecordStore, RestRecordStore
from .subscription import SubscriptionService

__all__ = [
    "AuthService",
    "BookingService",
    "DoctorNotesService",
    "EmailService",
    "HealthMetricsService",
    "InMemoryRecordStore",
    "RecordStore",
    "RestRecordStore",
    "SubscriptionService",
]
