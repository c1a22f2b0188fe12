"""
Data models for MediConnect.
"""

from .account import (
    AuthResult,
    AuthSession,
    EmailResult,
    SubscriptionResult,
    SubscriptionStatus,
    UserIdentity,
)
from .booking import (
    Appointment,
    BookingConfirmation,
    BookingResult,
    BookingStep,
    TimeSlot,
)
from .catalog import (
    Doctor,
    DoctorFilters,
    LabTest,
    LabTestFilters,
    Medicine,
    MedicineFilters,
    Specialty,
)
from .health import (
    DoctorNote,
    DoctorNoteInput,
    HealthAlert,
    HealthMetricsInput,
    HealthMetricsReading,
    SubmissionResult,
)
from .patient import Patient, PatientDetails

__all__ = [
    "Appointment",
    "AuthResult",
    "AuthSession",
    "BookingConfirmation",
    "BookingResult",
    "BookingStep",
    "Doctor",
    "DoctorFilters",
    "DoctorNote",
    "DoctorNoteInput",
    "EmailResult",
    "HealthAlert",
    "HealthMetricsInput",
    "HealthMetricsReading",
    "LabTest",
    "LabTestFilters",
    "Medicine",
    "MedicineFilters",
    "Patient",
    "PatientDetails",
    "Specialty",
    "SubmissionResult",
    "SubscriptionResult",
    "SubscriptionStatus",
    "TimeSlot",
    "UserIdentity",
]
