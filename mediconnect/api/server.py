"""
MediConnect API Server.

A FastAPI service exposing the catalog, booking and health-monitoring
flows over HTTP. Services are injected as FastAPI dependencies so they
can be swapped (e.g. for an in-memory record store) per deployment.
"""

from contextlib import asynccontextmanager
from datetime import date, datetime
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel, Field

from mediconnect.catalog_data import DOCTORS, LAB_TESTS, MEDICINES, get_doctor
from mediconnect.config import SUBSCRIPTION_PLANS, get_settings
from mediconnect.exceptions import BackendError, DoctorNotFoundError
from mediconnect.flows.booking_wizard import BOOKING_FAILED, BookingWizard
from mediconnect.models.booking import BookingConfirmation, BookingStep, TimeSlot
from mediconnect.models.catalog import (
    Doctor,
    DoctorFilters,
    LabTest,
    LabTestFilters,
    Medicine,
    MedicineFilters,
)
from mediconnect.models.health import (
    DoctorNote,
    DoctorNoteInput,
    HealthAlert,
    HealthMetricsInput,
    HealthMetricsReading,
    SubmissionResult,
)
from mediconnect.models.patient import Patient
from mediconnect.services.booking import BookingService, get_booking_service
from mediconnect.services.catalog import search_doctors, search_lab_tests, search_medicines
from mediconnect.services.doctor_notes import DoctorNotesService, get_doctor_notes_service
from mediconnect.services.metrics import HealthMetricsService, get_metrics_service

# ============================================================================
# Request / Response Models
# ============================================================================


class DoctorListResponse(BaseModel):
    doctors: List[Doctor]
    total: int


class DoctorSlotsResponse(BaseModel):
    """Bookable days and time slots for one doctor."""

    doctor_id: str
    dates: List[date]
    slots: List[TimeSlot]


class MedicineListResponse(BaseModel):
    medicines: List[Medicine]
    total: int


class LabTestListResponse(BaseModel):
    lab_tests: List[LabTest]
    total: int


class BookingRequest(BaseModel):
    """Everything the booking wizard collects, submitted at once."""

    doctor_id: str
    appointment_date: date
    appointment_time: str
    patient_name: str = ""
    patient_phone: str = ""


class ReadingListResponse(BaseModel):
    readings: List[HealthMetricsReading]
    total: int


class AlertListResponse(BaseModel):
    alerts: List[HealthAlert]
    total: int


class PatientListResponse(BaseModel):
    patients: List[Patient]
    total: int


class NoteRequest(DoctorNoteInput):
    """A doctor note plus its author."""

    doctor_id: str = Field(min_length=1)


class NoteListResponse(BaseModel):
    notes: List[DoctorNote]
    total: int


# ============================================================================
# FastAPI Application
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} API Server (record store: {settings.record_store})")
    yield
    logger.info(f"Shutting down {settings.app_name} API Server")


app = FastAPI(
    title="MediConnect API",
    description="Doctor booking, pharmacy and health monitoring API",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware for cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DoctorNotFoundError)
async def doctor_not_found_handler(request: Request, exc: DoctorNotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(BackendError)
async def backend_error_handler(request: Request, exc: BackendError):
    logger.error(f"Backend error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": "Backend unavailable. Please try again."},
    )


def _bad_request(detail) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


# ============================================================================
# Catalog Endpoints
# ============================================================================


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


@app.get("/api/v1/doctors", response_model=DoctorListResponse)
async def list_doctors(
    query: str = Query(default="", description="Matches name, specialty or city"),
    city: Optional[str] = Query(default=None),
    specialty_id: Optional[str] = Query(default=None, description="Specialty ID or 'all'"),
    min_fee: int = Query(default=0, ge=0),
    max_fee: int = Query(default=2000, ge=0),
    min_rating: float = Query(default=0, ge=0, le=5),
    availability: str = Query(default="any", description="any, today or tomorrow"),
    sort_by: str = Query(default="rating", description="rating, fees or experience"),
):
    """Search doctors with conjunctive filters and a single sort key."""
    try:
        filters = DoctorFilters(
            query=query,
            city=city,
            specialty_id=specialty_id,
            min_fee=min_fee,
            max_fee=max_fee,
            min_rating=min_rating,
            availability=availability,
        )
        doctors = search_doctors(DOCTORS, filters, sort_by)
    except ValueError as e:
        raise _bad_request(str(e))

    return DoctorListResponse(doctors=doctors, total=len(doctors))


@app.get("/api/v1/doctors/{doctor_id}", response_model=Doctor)
async def get_doctor_profile(doctor_id: str):
    """Get a doctor's profile."""
    doctor = get_doctor(doctor_id)
    if doctor is None:
        raise DoctorNotFoundError(doctor_id)
    return doctor


@app.get("/api/v1/doctors/{doctor_id}/slots", response_model=DoctorSlotsResponse)
async def get_doctor_slots(doctor_id: str):
    """Days and time slots that can be booked with a doctor."""
    wizard = BookingWizard(doctor_id)
    return DoctorSlotsResponse(
        doctor_id=doctor_id,
        dates=wizard.available_dates,
        slots=wizard.available_slots,
    )


@app.get("/api/v1/medicines", response_model=MedicineListResponse)
async def list_medicines(
    query: str = Query(default=""),
    category: Optional[str] = Query(default=None),
    prescription: str = Query(default="all", description="all, otc or rx"),
    sort_by: str = Query(default="popularity"),
):
    """List pharmacy medicines."""
    try:
        filters = MedicineFilters(query=query, category=category, prescription=prescription)
        medicines = search_medicines(MEDICINES, filters, sort_by)
    except ValueError as e:
        raise _bad_request(str(e))

    return MedicineListResponse(medicines=medicines, total=len(medicines))


@app.get("/api/v1/lab-tests", response_model=LabTestListResponse)
async def list_lab_tests(
    query: str = Query(default=""),
    category: Optional[str] = Query(default=None),
    sort_by: str = Query(default="popularity"),
):
    """List lab tests."""
    try:
        filters = LabTestFilters(query=query, category=category)
        tests = search_lab_tests(LAB_TESTS, filters, sort_by)
    except ValueError as e:
        raise _bad_request(str(e))

    return LabTestListResponse(lab_tests=tests, total=len(tests))


@app.get("/api/v1/plans")
async def list_plans():
    """List wearable band subscription plans."""
    return {"plans": SUBSCRIPTION_PLANS}


# ============================================================================
# Booking Endpoints
# ============================================================================


@app.post(
    "/api/v1/bookings",
    response_model=BookingConfirmation,
    status_code=status.HTTP_201_CREATED,
)
async def create_booking(
    request: BookingRequest,
    booking_service: BookingService = Depends(get_booking_service),
):
    """
    Book an appointment.

    Runs the submitted fields through the booking wizard, so the same
    validation applies as on the booking page.
    """
    wizard = BookingWizard(request.doctor_id, booking_service=booking_service)

    if not wizard.select_date(request.appointment_date):
        raise _bad_request(wizard.errors[-1])
    if not wizard.select_time(request.appointment_time):
        raise _bad_request(wizard.errors[-1])
    await wizard.advance()

    wizard.set_patient_name(request.patient_name)
    wizard.set_patient_phone(request.patient_phone)
    if await wizard.advance() is not BookingStep.CONFIRMATION:
        raise _bad_request(wizard.errors[-1])

    if await wizard.advance() is not BookingStep.SUCCESS:
        if BOOKING_FAILED in wizard.errors:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Unable to book appointment. Please try again.",
            )
        raise _bad_request(wizard.errors[-1])

    return wizard.confirmation


# ============================================================================
# Health Monitoring Endpoints
# ============================================================================


@app.post(
    "/api/v1/patients/{patient_id}/metrics",
    response_model=SubmissionResult,
    status_code=status.HTTP_201_CREATED,
)
async def record_metrics(
    patient_id: str,
    metrics: HealthMetricsInput,
    service: HealthMetricsService = Depends(get_metrics_service),
):
    """Record a reading; the response carries any alerts it raised."""
    try:
        return await service.submit_reading(patient_id, metrics)
    except BackendError as e:
        logger.error(f"Recording metrics for patient {patient_id} failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to save health metrics",
        )


@app.get("/api/v1/patients/{patient_id}/metrics", response_model=ReadingListResponse)
async def list_metrics(
    patient_id: str,
    limit: Optional[int] = Query(default=None, ge=1, le=100),
    service: HealthMetricsService = Depends(get_metrics_service),
):
    """Most recent readings first."""
    readings = await service.recent_readings(patient_id, limit)
    return ReadingListResponse(readings=readings, total=len(readings))


@app.get("/api/v1/patients/{patient_id}/alerts", response_model=AlertListResponse)
async def list_alerts(
    patient_id: str,
    include_resolved: bool = Query(default=False),
    service: HealthMetricsService = Depends(get_metrics_service),
):
    """Alerts for a patient, newest first; unresolved only by default."""
    alerts = await service.alerts(patient_id, unresolved_only=not include_resolved)
    return AlertListResponse(alerts=alerts, total=len(alerts))


@app.post("/api/v1/alerts/{alert_id}/resolve", response_model=HealthAlert)
async def resolve_alert(
    alert_id: str,
    service: HealthMetricsService = Depends(get_metrics_service),
):
    """Mark an alert resolved. Resolving twice is not an error."""
    try:
        alert = await service.resolve_alert(alert_id)
    except BackendError as e:
        logger.error(f"Resolving alert {alert_id} failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to resolve alert",
        )
    if alert is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Alert not found",
        )
    return alert


# ============================================================================
# Doctor Dashboard Endpoints
# ============================================================================


@app.get("/api/v1/patients", response_model=PatientListResponse)
async def list_patients(
    search: str = Query(default="", description="Matches name or medical conditions"),
    service: DoctorNotesService = Depends(get_doctor_notes_service),
):
    """Patient roster for the doctor dashboard."""
    patients = await service.list_patients(search)
    return PatientListResponse(patients=patients, total=len(patients))


@app.get("/api/v1/patients/{patient_id}/notes", response_model=NoteListResponse)
async def list_notes(
    patient_id: str,
    service: DoctorNotesService = Depends(get_doctor_notes_service),
):
    """Doctor notes on a patient, newest first."""
    notes = await service.list_notes(patient_id)
    return NoteListResponse(notes=notes, total=len(notes))


@app.post(
    "/api/v1/patients/{patient_id}/notes",
    response_model=DoctorNote,
    status_code=status.HTTP_201_CREATED,
)
async def add_note(
    patient_id: str,
    request: NoteRequest,
    service: DoctorNotesService = Depends(get_doctor_notes_service),
):
    """Add a doctor note to a patient's chart."""
    note = DoctorNoteInput(**request.model_dump(exclude={"doctor_id"}))
    return await service.add_note(patient_id, request.doctor_id, note)


# ============================================================================
# Run Server
# ============================================================================


def run_server(host: str = "0.0.0.0", port: int = 8080):
    """Run the MediConnect API server."""
    import uvicorn

    uvicorn.run(
        "mediconnect.api.server:app",
        host=host,
        port=port,
        reload=False,
        log_level=get_settings().log_level.lower(),
    )


if __name__ == "__main__":
    run_server()
