"""
Health monitoring data models.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from mediconnect.config import ALERT_METRIC_TYPE, ALERT_TYPE_WARNING


class HealthMetricsInput(BaseModel):
    """
    Vital-sign readings as entered on the dashboard form.

    Every field is optional; a submission may carry any subset.
    """

    blood_pressure_systolic: Optional[int] = Field(default=None, ge=0, description="mmHg")
    blood_pressure_diastolic: Optional[int] = Field(default=None, ge=0, description="mmHg")
    heart_rate: Optional[int] = Field(default=None, ge=0, description="Beats per minute")
    body_temperature: Optional[float] = Field(default=None, ge=0, description="Degrees Fahrenheit")
    blood_oxygen: Optional[float] = Field(default=None, ge=0, le=100, description="SpO2 percentage")
    stress_level: Optional[int] = Field(default=None, ge=1, le=10, description="1 (calm) to 10")
    sleep_hours: Optional[float] = Field(default=None, ge=0, le=24)
    sleep_quality_rating: Optional[int] = Field(default=None, ge=1, le=5, description="1 to 5 stars")

    model_config = {"extra": "forbid"}

    @property
    def is_empty(self) -> bool:
        return not self.to_record()

    def to_record(self) -> dict:
        """Fields that were actually provided, ready for insertion."""
        return self.model_dump(exclude_none=True)


class HealthMetricsReading(HealthMetricsInput):
    """
    A persisted reading. Never modified after it is stored.
    """

    id: str
    patient_id: str
    recorded_at: datetime
    created_at: Optional[datetime] = None

    model_config = {"extra": "ignore", "frozen": True}


class HealthAlert(BaseModel):
    """
    Warning derived from a reading that crossed a clinical threshold.
    """

    id: str
    patient_id: str
    metric_type: str = ALERT_METRIC_TYPE
    alert_type: Literal["warning", "critical", "info"] = ALERT_TYPE_WARNING
    message: str
    value: Optional[str] = None
    is_resolved: bool = False
    created_at: Optional[datetime] = None


class SubmissionResult(BaseModel):
    """
    Outcome of recording one reading: the stored row and the alerts it raised.
    """

    reading: HealthMetricsReading
    alerts: List[HealthAlert] = Field(default_factory=list)

    @property
    def alert_messages(self) -> List[str]:
        return [alert.message for alert in self.alerts]


class DoctorNoteInput(BaseModel):
    """Fields a doctor fills in on a patient's chart."""

    diagnosis: Optional[str] = None
    prescription: Optional[str] = None
    notes: Optional[str] = None


class DoctorNote(DoctorNoteInput):
    """A stored doctor note."""

    id: str
    patient_id: str
    doctor_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
