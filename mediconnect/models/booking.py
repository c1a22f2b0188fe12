"""
Booking-related data models.
"""

from datetime import date, datetime
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field


class BookingStep(str, Enum):
    """Steps of the booking wizard, in the only order they can be walked forward."""

    SLOT_SELECTION = "slots"
    PATIENT_DETAILS = "details"
    CONFIRMATION = "confirmation"
    SUCCESS = "success"


# Fixed forward order of the wizard
BOOKING_STEP_ORDER = [
    BookingStep.SLOT_SELECTION,
    BookingStep.PATIENT_DETAILS,
    BookingStep.CONFIRMATION,
    BookingStep.SUCCESS,
]


class TimeSlot(BaseModel):
    """
    A bookable time of day.
    """

    id: str = Field(description="Slot identifier")
    time: str = Field(description="Display label, e.g. '10:30 AM'")
    available: bool = Field(default=True, description="Whether the slot can be chosen")


class BookingConfirmation(BaseModel):
    """
    Record produced when a booking goes through.
    """

    booking_id: str = Field(description="Time-derived booking token, e.g. BK1700000000000")
    doctor_id: str
    doctor_name: str
    appointment_date: date
    appointment_time: str
    patient_name: str
    patient_phone: str = Field(description="Phone number reduced to digits")
    fees: int = Field(ge=0)
    booked_at: datetime = Field(default_factory=datetime.now)

    @property
    def formatted_date(self) -> str:
        """Get human-readable appointment date, e.g. 'Mon, 05 Feb 2024'."""
        return self.appointment_date.strftime("%a, %d %b %Y")


class BookingResult(BaseModel):
    """
    Result of a booking attempt.
    """

    success: bool = Field(description="Whether booking was successful")
    booking: Optional[BookingConfirmation] = Field(default=None, description="Confirmation record")
    message: str = Field(description="Human-readable result message")
    error_code: Optional[str] = Field(default=None, description="Error code if failed")

    @property
    def booking_id(self) -> Optional[str]:
        return self.booking.booking_id if self.booking else None


class Appointment(BaseModel):
    """
    An appointment as listed on the patient dashboard.
    """

    id: str
    doctor_id: str
    patient_name: str
    patient_phone: str
    appointment_date: date
    appointment_time: str
    status: Literal["upcoming", "completed", "cancelled"] = "upcoming"
    fees: int = Field(ge=0)
    booking_date: date

    @classmethod
    def from_confirmation(cls, confirmation: BookingConfirmation) -> "Appointment":
        """Build the dashboard entry for a freshly confirmed booking."""
        return cls(
            id=confirmation.booking_id,
            doctor_id=confirmation.doctor_id,
            patient_name=confirmation.patient_name,
            patient_phone=confirmation.patient_phone,
            appointment_date=confirmation.appointment_date,
            appointment_time=confirmation.appointment_time,
            fees=confirmation.fees,
            booking_date=confirmation.booked_at.date(),
        )
