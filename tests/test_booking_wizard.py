"""
Tests for the booking wizard state machine.
"""

import asyncio
import random
from datetime import date, timedelta

import pytest

from mediconnect.catalog_data import get_doctor
from mediconnect.exceptions import DoctorNotFoundError
from mediconnect.flows.booking_wizard import (
    BOOKING_FAILED,
    INVALID_DATE,
    INVALID_PHONE,
    MISSING_INFORMATION,
    SELECT_TIME_SLOT,
    UNAVAILABLE_SLOT,
    BookingWizard,
)
from mediconnect.models.booking import BookingResult, BookingStep
from mediconnect.models.patient import PatientDetails
from mediconnect.services.booking import BookingService, generate_booking_id

TODAY = date(2024, 2, 5)


class RejectingBookingService(BookingService):
    """Booking backend that always declines."""

    async def create_booking(self, doctor, appointment_date, appointment_time, patient):
        return BookingResult(success=False, message="Slot taken", error_code="SLOT_TAKEN")


class CrashingBookingService(BookingService):
    async def create_booking(self, doctor, appointment_date, appointment_time, patient):
        raise RuntimeError("connection reset")


@pytest.fixture
def booking_service():
    return BookingService(latency_seconds=0)


@pytest.fixture
def wizard(booking_service):
    return BookingWizard("1", booking_service=booking_service, today=TODAY)


async def walk_to_confirmation(wizard: BookingWizard) -> None:
    wizard.select_time("10:30 AM")
    await wizard.advance()
    wizard.set_patient_name("Asha Verma")
    wizard.set_patient_phone("98765 43210")
    await wizard.advance()
    assert wizard.current_step is BookingStep.CONFIRMATION


class TestInitialState:
    """Test a freshly opened wizard."""

    def test_starts_on_slot_selection(self, wizard):
        assert wizard.current_step is BookingStep.SLOT_SELECTION
        assert wizard.step_number == 1
        assert wizard.selected_date == TODAY
        assert wizard.selected_time == ""
        assert wizard.booking_id is None
        assert wizard.is_loading is False

    def test_booking_window_is_seven_days(self, wizard):
        assert wizard.available_dates == [TODAY + timedelta(days=n) for n in range(7)]

    def test_only_available_slots_offered(self, wizard):
        labels = [slot.time for slot in wizard.available_slots]
        assert len(labels) == 9
        assert "10:00 AM" not in labels
        assert all(slot.available for slot in wizard.available_slots)

    def test_unknown_doctor(self, booking_service):
        with pytest.raises(DoctorNotFoundError):
            BookingWizard("999", booking_service=booking_service)


class TestSlotSelection:
    """Test the slot selection step."""

    @pytest.mark.asyncio
    async def test_advance_requires_time(self, wizard):
        step = await wizard.advance()
        assert step is BookingStep.SLOT_SELECTION
        assert wizard.errors == [SELECT_TIME_SLOT]

    def test_unavailable_slot_rejected(self, wizard):
        assert wizard.select_time("10:00 AM") is False
        assert wizard.selected_time == ""
        assert wizard.errors == [UNAVAILABLE_SLOT]

    def test_last_day_of_window_accepted(self, wizard):
        assert wizard.select_date(TODAY + timedelta(days=6)) is True
        assert wizard.selected_date == TODAY + timedelta(days=6)

    @pytest.mark.parametrize("offset", [-1, 7, 30])
    def test_date_outside_window_keeps_previous(self, wizard, offset):
        assert wizard.select_date(TODAY + timedelta(days=offset)) is False
        assert wizard.selected_date == TODAY
        assert wizard.errors == [INVALID_DATE]

    @pytest.mark.asyncio
    async def test_valid_time_advances(self, wizard):
        wizard.select_time("02:00 PM")
        assert await wizard.advance() is BookingStep.PATIENT_DETAILS
        assert wizard.errors == []


class TestPatientDetails:
    """Test the patient details step."""

    @pytest.fixture
    async def on_details(self, wizard):
        wizard.select_time("10:30 AM")
        await wizard.advance()
        return wizard

    @pytest.mark.asyncio
    async def test_missing_information(self, on_details):
        assert await on_details.advance() is BookingStep.PATIENT_DETAILS
        assert on_details.errors == [MISSING_INFORMATION]

    @pytest.mark.asyncio
    async def test_blank_name_is_missing(self, on_details):
        on_details.set_patient_name("   ")
        on_details.set_patient_phone("9876543210")
        await on_details.advance()
        assert on_details.errors == [MISSING_INFORMATION]

    @pytest.mark.asyncio
    async def test_invalid_phone(self, on_details):
        on_details.set_patient_name("Asha")
        on_details.set_patient_phone("12345")
        assert await on_details.advance() is BookingStep.PATIENT_DETAILS
        assert on_details.errors == [INVALID_PHONE]

    @pytest.mark.asyncio
    async def test_valid_details_reach_confirmation(self, on_details):
        on_details.set_patient_name("Asha")
        on_details.set_patient_phone("9876543210")
        assert await on_details.advance() is BookingStep.CONFIRMATION

    @pytest.mark.asyncio
    async def test_slot_locked_outside_slot_step(self, on_details):
        assert on_details.select_time("02:00 PM") is False
        assert on_details.selected_time == "10:30 AM"


class TestNavigation:
    """Test moving back through the wizard."""

    def test_back_on_first_step_is_noop(self, wizard):
        assert wizard.back() is BookingStep.SLOT_SELECTION

    @pytest.mark.asyncio
    async def test_back_keeps_entered_data(self, wizard):
        await walk_to_confirmation(wizard)

        assert wizard.back() is BookingStep.PATIENT_DETAILS
        assert wizard.patient_name == "Asha Verma"
        assert wizard.patient_phone == "98765 43210"

        assert wizard.back() is BookingStep.SLOT_SELECTION
        assert wizard.selected_time == "10:30 AM"

        # Walking forward again needs no re-entry
        await wizard.advance()
        assert await wizard.advance() is BookingStep.CONFIRMATION

    @pytest.mark.asyncio
    async def test_details_locked_on_confirmation(self, wizard):
        await walk_to_confirmation(wizard)
        assert wizard.set_patient_phone("123") is False
        assert wizard.patient.has_valid_phone is True


class TestSubmission:
    """Test booking submission."""

    @pytest.mark.asyncio
    async def test_successful_booking(self, wizard, booking_service):
        await walk_to_confirmation(wizard)

        assert await wizard.advance() is BookingStep.SUCCESS
        assert wizard.booking_id.startswith("BK")
        assert wizard.booking_id[2:].isdigit()
        assert wizard.confirmation.doctor_id == "1"
        assert wizard.confirmation.appointment_time == "10:30 AM"
        assert wizard.confirmation.patient_phone == "9876543210"
        assert wizard.confirmation.fees == 800
        assert wizard.is_loading is False
        assert len(booking_service.appointments) == 1
        assert any(wizard.booking_id in note for note in wizard.notifications)

    @pytest.mark.asyncio
    async def test_success_is_terminal(self, wizard):
        await walk_to_confirmation(wizard)
        await wizard.advance()
        booking_id = wizard.booking_id

        assert wizard.back() is BookingStep.SUCCESS
        assert await wizard.advance() is BookingStep.SUCCESS
        assert wizard.booking_id == booking_id

    @pytest.mark.asyncio
    async def test_submit_outside_confirmation(self, wizard):
        assert await wizard.submit_booking() is None
        assert wizard.current_step is BookingStep.SLOT_SELECTION

    @pytest.mark.asyncio
    async def test_rejected_booking_returns_to_details(self):
        wizard = BookingWizard("1", booking_service=RejectingBookingService(latency_seconds=0), today=TODAY)
        await walk_to_confirmation(wizard)

        result = await wizard.advance()

        assert result is BookingStep.PATIENT_DETAILS
        assert wizard.errors == [BOOKING_FAILED]
        assert wizard.booking_id is None
        assert wizard.patient_name == "Asha Verma"

    @pytest.mark.asyncio
    async def test_crashing_service_returns_to_details(self):
        wizard = BookingWizard("1", booking_service=CrashingBookingService(latency_seconds=0), today=TODAY)
        await walk_to_confirmation(wizard)

        result = await wizard.submit_booking()

        assert result.success is False
        assert result.error_code == "BOOKING_ERROR"
        assert wizard.current_step is BookingStep.PATIENT_DETAILS
        assert wizard.is_loading is False

    @pytest.mark.asyncio
    async def test_concurrent_submit_ignored(self):
        service = BookingService(latency_seconds=0.05)
        wizard = BookingWizard("1", booking_service=service, today=TODAY)
        await walk_to_confirmation(wizard)

        first, second = await asyncio.gather(wizard.submit_booking(), wizard.submit_booking())

        assert first.success is True
        assert second is None
        assert len(service.appointments) == 1

    @pytest.mark.asyncio
    async def test_back_ignored_while_loading(self):
        wizard = BookingWizard("1", booking_service=BookingService(latency_seconds=0.05), today=TODAY)
        await walk_to_confirmation(wizard)

        task = asyncio.create_task(wizard.submit_booking())
        await asyncio.sleep(0)
        assert wizard.is_loading is True
        assert wizard.back() is BookingStep.CONFIRMATION
        await task

        assert wizard.current_step is BookingStep.SUCCESS

    @pytest.mark.asyncio
    async def test_result_after_close_is_discarded(self):
        wizard = BookingWizard("1", booking_service=BookingService(latency_seconds=0.05), today=TODAY)
        await walk_to_confirmation(wizard)

        task = asyncio.create_task(wizard.submit_booking())
        await asyncio.sleep(0)
        wizard.close()
        result = await task

        assert result.success is True
        assert wizard.current_step is BookingStep.CONFIRMATION
        assert wizard.booking_id is None

    @pytest.mark.asyncio
    async def test_reset_starts_over(self, wizard):
        await walk_to_confirmation(wizard)
        await wizard.advance()

        wizard.reset()

        assert wizard.current_step is BookingStep.SLOT_SELECTION
        assert wizard.selected_time == ""
        assert wizard.patient_name == ""
        assert wizard.booking_id is None


class TestForwardGuard:
    """Confirmation is never reached without a time and valid details."""

    @pytest.mark.asyncio
    async def test_random_operation_sequences(self):
        rng = random.Random(42)
        names = ["", "  ", "Asha", "Ravi Kumar"]
        phones = ["", "12345", "5123456789", "9876543210", "+91 9876543210"]
        times = ["", "10:00 AM", "10:30 AM", "05:00 PM", "13:00"]

        for _ in range(50):
            wizard = BookingWizard("2", booking_service=BookingService(latency_seconds=0), today=TODAY)
            for _ in range(25):
                op = rng.choice(["time", "name", "phone", "advance", "back"])
                if op == "time":
                    wizard.select_time(rng.choice(times))
                elif op == "name":
                    wizard.set_patient_name(rng.choice(names))
                elif op == "phone":
                    wizard.set_patient_phone(rng.choice(phones))
                elif op == "advance":
                    await wizard.advance()
                else:
                    wizard.back()

                if wizard.current_step in (BookingStep.CONFIRMATION, BookingStep.SUCCESS):
                    assert wizard.selected_time
                    assert wizard.patient.is_complete
                if wizard.current_step is BookingStep.SUCCESS:
                    assert wizard.booking_id is not None
                else:
                    assert wizard.booking_id is None


class TestBookingService:
    """Test the booking backend behind the wizard."""

    def test_ids_unique_within_one_millisecond(self, monkeypatch):
        monkeypatch.setattr("mediconnect.services.booking.time.time", lambda: 1_700_000_000.0)

        ids = [generate_booking_id() for _ in range(3)]

        assert len(set(ids)) == 3
        assert ids == sorted(ids)
        assert all(booking_id.startswith("BK") for booking_id in ids)

    @pytest.mark.asyncio
    async def test_appointment_log_keeps_most_recent(self):
        service = BookingService(latency_seconds=0, log_size=2)
        patient = PatientDetails(name="Asha Verma", phone="98765 43210")

        results = [
            await service.create_booking(get_doctor("1"), TODAY, "09:00 AM", patient)
            for _ in range(3)
        ]

        assert [a.id for a in service.appointments] == [r.booking_id for r in results[1:]]
