"""
MediConnect flows - the state behind each patient- and doctor-facing screen.
"""

from .base import BaseFlow
from .booking_wizard import BookingWizard
from .catalog_view import (
    CatalogView,
    DoctorSearchView,
    LabTestCatalogView,
    MedicineCatalogView,
)
from .doctor_dashboard import DoctorDashboard
from .health_recorder import HealthMetricsRecorder

__all__ = [
    "BaseFlow",
    "BookingWizard",
    "CatalogView",
    "DoctorDashboard",
    "DoctorSearchView",
    "HealthMetricsRecorder",
    "LabTestCatalogView",
    "MedicineCatalogView",
]
