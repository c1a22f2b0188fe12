"""
Booking Service - Creates appointment bookings.

There is no appointments backend yet: a booking is confirmed locally
after a simulated round trip, and the action and arguments are logged.
Callers still treat the call as fallible and branch on the result.
"""

import asyncio
import time
from collections import deque
from datetime import date
from typing import Deque, List, Optional

from loguru import logger

from mediconnect.config import BOOKING_ID_PREFIX, get_settings
from mediconnect.models.booking import Appointment, BookingConfirmation, BookingResult
from mediconnect.models.catalog import Doctor
from mediconnect.models.patient import PatientDetails


_last_booking_ms = 0


def generate_booking_id() -> str:
    """
    Time-derived booking token: prefix plus epoch milliseconds.

    Bookings issued within the same millisecond get consecutive values,
    so tokens are unique within the process.
    """
    global _last_booking_ms
    _last_booking_ms = max(int(time.time() * 1000), _last_booking_ms + 1)
    return f"{BOOKING_ID_PREFIX}{_last_booking_ms}"


class BookingService:
    """
    Service for creating appointment bookings.
    """

    def __init__(
        self,
        latency_seconds: Optional[float] = None,
        log_size: Optional[int] = None,
    ):
        self.settings = get_settings()
        self._latency_seconds = (
            self.settings.booking_latency_seconds if latency_seconds is None else latency_seconds
        )
        # Most recent confirmations only; older ones fall off the front
        self._appointments: Deque[Appointment] = deque(
            maxlen=log_size or self.settings.appointment_log_size
        )

    @property
    def appointments(self) -> List[Appointment]:
        """Most recent appointments confirmed through this service, oldest first."""
        return list(self._appointments)

    async def create_booking(
        self,
        doctor: Doctor,
        appointment_date: date,
        appointment_time: str,
        patient: PatientDetails,
    ) -> BookingResult:
        """
        Book an appointment and log it.

        Args:
            doctor: The doctor being booked
            appointment_date: Day of the appointment
            appointment_time: Time slot label
            patient: Validated patient details

        Returns:
            BookingResult with success status
        """
        try:
            booking_id = generate_booking_id()

            await self._simulate_round_trip()

            confirmation = BookingConfirmation(
                booking_id=booking_id,
                doctor_id=doctor.id,
                doctor_name=doctor.name,
                appointment_date=appointment_date,
                appointment_time=appointment_time,
                patient_name=patient.name,
                patient_phone=patient.normalized_phone,
                fees=doctor.fees,
            )
            self._appointments.append(Appointment.from_confirmation(confirmation))

            logger.info("=" * 60)
            logger.info("APPOINTMENT BOOKING LOG")
            logger.info("=" * 60)
            logger.info(f"Booking ID: {booking_id}")
            logger.info(f"Patient: {patient.name} ({patient.normalized_phone})")
            logger.info(f"Date/Time: {confirmation.formatted_date} at {appointment_time}")
            logger.info(f"Doctor: Dr. {doctor.name} ({doctor.specialty})")
            logger.info(f"Clinic: {doctor.clinic_name}, {doctor.city}")
            logger.info(f"Fees: ₹{doctor.fees}")
            logger.info("=" * 60)

            return BookingResult(
                success=True,
                booking=confirmation,
                message=f"Your booking ID is {booking_id}",
            )

        except Exception as e:
            logger.error(f"Booking error: {e}")
            return BookingResult(
                success=False,
                message="Unable to book appointment. Please try again.",
                error_code="BOOKING_ERROR",
            )

    async def _simulate_round_trip(self) -> None:
        if self._latency_seconds > 0:
            await asyncio.sleep(self._latency_seconds)


# Singleton instance
_booking_service: Optional[BookingService] = None


def get_booking_service() -> BookingService:
    """Get the singleton booking service instance."""
    global _booking_service
    if _booking_service is None:
        _booking_service = BookingService()
    return _booking_service
