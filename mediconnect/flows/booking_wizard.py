"""
Booking Wizard - Turns a slot choice and patient details into a booking.

The wizard walks four steps in a fixed order:

    SLOT_SELECTION -> PATIENT_DETAILS -> CONFIRMATION -> SUCCESS

It only moves forward when the current step's fields are valid. Moving
back is always allowed (except out of SUCCESS) and never clears what the
patient already entered.
"""

from datetime import date, timedelta
from typing import List, Optional

from mediconnect.catalog_data import get_doctor
from mediconnect.config import BOOKING_WINDOW_DAYS, get_available_time_slots
from mediconnect.exceptions import DoctorNotFoundError
from mediconnect.flows.base import BaseFlow
from mediconnect.models.booking import (
    BOOKING_STEP_ORDER,
    BookingConfirmation,
    BookingResult,
    BookingStep,
    TimeSlot,
)
from mediconnect.models.patient import PatientDetails
from mediconnect.services.booking import BookingService, get_booking_service
from mediconnect.validation import missing_fields

# User-facing validation messages
SELECT_TIME_SLOT = "Please select a time slot"
MISSING_INFORMATION = "Missing information"
INVALID_PHONE = "Invalid phone number"
INVALID_DATE = "Please select a date within the next 7 days"
UNAVAILABLE_SLOT = "Selected time slot is not available"
BOOKING_FAILED = "Booking failed"
BOOKING_COMPLETED = "Booking already completed"
GO_BACK_TO_EDIT = "Go back to change this"


class BookingWizard(BaseFlow):
    """
    State machine behind the booking page for one doctor.
    """

    def __init__(
        self,
        doctor_id: str,
        booking_service: Optional[BookingService] = None,
        today: Optional[date] = None,
    ):
        super().__init__()
        doctor = get_doctor(doctor_id)
        if doctor is None:
            raise DoctorNotFoundError(doctor_id)

        self.doctor = doctor
        self._booking_service = booking_service or get_booking_service()
        self._today = today or date.today()

        self.current_step = BookingStep.SLOT_SELECTION
        self.selected_date = self._today
        self.selected_time = ""
        self.patient = PatientDetails()
        self.confirmation: Optional[BookingConfirmation] = None

    # ==================== Read-only state ====================

    @property
    def booking_id(self) -> Optional[str]:
        """Assigned once the booking succeeds."""
        return self.confirmation.booking_id if self.confirmation else None

    @property
    def is_loading(self) -> bool:
        return "submit_booking" in self._busy

    @property
    def available_dates(self) -> List[date]:
        """Today and the following six days."""
        return [self._today + timedelta(days=offset) for offset in range(BOOKING_WINDOW_DAYS)]

    @property
    def available_slots(self) -> List[TimeSlot]:
        return [TimeSlot(**slot) for slot in get_available_time_slots()]

    @property
    def patient_name(self) -> str:
        return self.patient.name

    @property
    def patient_phone(self) -> str:
        return self.patient.phone

    @property
    def step_number(self) -> int:
        """1-based position of the current step."""
        return BOOKING_STEP_ORDER.index(self.current_step) + 1

    # ==================== Field setters ====================

    def select_date(self, selected: date) -> bool:
        """Choose the appointment day; must fall inside the booking window."""
        if not self._editable(BookingStep.SLOT_SELECTION):
            return False
        if selected not in self.available_dates:
            return self.fail(INVALID_DATE)
        self.selected_date = selected
        self.log_action("date_selected", {"date": selected.isoformat()})
        return True

    def select_time(self, time_label: str) -> bool:
        """Choose one of the available time slot labels."""
        if not self._editable(BookingStep.SLOT_SELECTION):
            return False
        if time_label not in {slot.time for slot in self.available_slots}:
            return self.fail(UNAVAILABLE_SLOT)
        self.selected_time = time_label
        self.log_action("time_selected", {"time": time_label})
        return True

    def set_patient_name(self, name: str) -> bool:
        if not self._editable(BookingStep.SLOT_SELECTION, BookingStep.PATIENT_DETAILS):
            return False
        self.patient.name = name
        return True

    def set_patient_phone(self, phone: str) -> bool:
        if not self._editable(BookingStep.SLOT_SELECTION, BookingStep.PATIENT_DETAILS):
            return False
        self.patient.phone = phone
        return True

    def _editable(self, *steps: BookingStep) -> bool:
        if self.current_step is BookingStep.SUCCESS:
            return self.fail(BOOKING_COMPLETED)
        if self.current_step not in steps:
            return self.fail(GO_BACK_TO_EDIT)
        return True

    # ==================== Navigation ====================

    async def advance(self) -> BookingStep:
        """
        Submit the current step.

        Moves to the next step when the step's fields are valid; otherwise
        records the validation message in `errors` and stays put. From
        CONFIRMATION this submits the booking.

        Returns:
            The step the wizard is on afterwards
        """
        self.clear_errors()

        if self.current_step is BookingStep.SLOT_SELECTION:
            if not self.selected_time:
                self.fail(SELECT_TIME_SLOT)
            else:
                self._go_to(BookingStep.PATIENT_DETAILS)

        elif self.current_step is BookingStep.PATIENT_DETAILS:
            if missing_fields({"name": self.patient.name, "phone": self.patient.phone}):
                self.fail(MISSING_INFORMATION)
            elif not self.patient.has_valid_phone:
                self.fail(INVALID_PHONE)
            else:
                self._go_to(BookingStep.CONFIRMATION)

        elif self.current_step is BookingStep.CONFIRMATION:
            await self.submit_booking()

        return self.current_step

    def back(self) -> BookingStep:
        """
        Return to the previous step, keeping all entered data.

        Ignored on the first step, on the terminal step, and while a
        booking is being submitted.
        """
        if self.is_loading:
            self.log_action("back_ignored", {"reason": "booking in progress"})
            return self.current_step

        if self.current_step is BookingStep.PATIENT_DETAILS:
            self._go_to(BookingStep.SLOT_SELECTION)
        elif self.current_step is BookingStep.CONFIRMATION:
            self._go_to(BookingStep.PATIENT_DETAILS)
        return self.current_step

    async def submit_booking(self) -> Optional[BookingResult]:
        """
        Create the booking from the confirmed details.

        On success the wizard enters SUCCESS with a booking ID. On failure it
        returns to PATIENT_DETAILS with the error recorded. A second call
        while one is in flight is ignored.

        Returns:
            The BookingResult, or None if the call was not made
        """
        if self.current_step is not BookingStep.CONFIRMATION:
            self.fail("Please confirm your details first")
            return None
        if not self._begin("submit_booking"):
            return None

        try:
            self.log_action("submitting_booking", {
                "doctor_id": self.doctor.id,
                "date": self.selected_date.isoformat(),
                "time": self.selected_time,
            })
            try:
                result = await self._booking_service.create_booking(
                    doctor=self.doctor,
                    appointment_date=self.selected_date,
                    appointment_time=self.selected_time,
                    patient=self.patient.model_copy(),
                )
            except Exception as e:
                self.log_action("booking_error", {"error": str(e)})
                result = BookingResult(
                    success=False,
                    message="Unable to book appointment. Please try again.",
                    error_code="BOOKING_ERROR",
                )
        finally:
            self._end("submit_booking")

        if self.is_closed:
            return result

        if result.success and result.booking:
            self.confirmation = result.booking
            self._go_to(BookingStep.SUCCESS)
            self.notify(f"Appointment booked successfully! {result.message}")
        else:
            self.fail(BOOKING_FAILED)
            self._go_to(BookingStep.PATIENT_DETAILS)
        return result

    def reset(self) -> None:
        """Start a new booking with the same doctor."""
        self.current_step = BookingStep.SLOT_SELECTION
        self.selected_date = self._today
        self.selected_time = ""
        self.patient = PatientDetails()
        self.confirmation = None
        self.clear_errors()
        self.log_action("reset")

    def _go_to(self, step: BookingStep) -> None:
        self.log_action("step_changed", {"from": self.current_step.value, "to": step.value})
        self.current_step = step
