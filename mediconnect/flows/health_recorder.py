"""
Health Metrics Recorder - Patient-facing vitals dashboard.

Loads the patient's recent readings and unresolved alerts, records new
readings, and lets the patient mark alerts resolved. Lists are re-fetched
from the backend after every successful write rather than patched locally.
"""

from typing import List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from mediconnect.exceptions import BackendError
from mediconnect.flows.base import BaseFlow
from mediconnect.models.account import AuthSession
from mediconnect.models.health import (
    HealthAlert,
    HealthMetricsInput,
    HealthMetricsReading,
    SubmissionResult,
)
from mediconnect.models.patient import Patient
from mediconnect.services.metrics import HealthMetricsService
from mediconnect.services.records import get_record_store

SAVE_FAILED = "Failed to save health metrics"
RESOLVE_FAILED = "Failed to resolve alert"
INVALID_METRICS = "Invalid health metrics"


class HealthMetricsRecorder(BaseFlow):
    """
    State behind the health dashboard for the signed-in patient.
    """

    def __init__(self, session: AuthSession, service: Optional[HealthMetricsService] = None):
        super().__init__()
        self.session = session
        # Writes go out with the patient's token so row-level security applies
        self._service = service or HealthMetricsService(get_record_store(session))

        self.patient: Optional[Patient] = None
        self.recent_readings: List[HealthMetricsReading] = []
        self.active_alerts: List[HealthAlert] = []
        self.last_alerts: List[HealthAlert] = []

    @property
    def is_submitting(self) -> bool:
        return "submit_reading" in self._busy

    @property
    def latest_reading(self) -> Optional[HealthMetricsReading]:
        return self.recent_readings[0] if self.recent_readings else None

    async def load(self) -> bool:
        """
        Resolve the patient record (creating it if needed) and fetch lists.

        Returns:
            True if the patient record is available
        """
        try:
            patient = await self._service.ensure_patient(self.session.user)
        except BackendError as e:
            self.log_action("load_failed", {"error": str(e)})
            return self.fail("Failed to load patient record")

        if self.is_closed:
            return False
        self.patient = patient
        self.log_action("loaded", {"patient_id": patient.id})
        await self.refresh()
        return True

    async def refresh(self) -> None:
        """Re-fetch recent readings and unresolved alerts."""
        if self.patient is None:
            return
        await self._refresh_readings()
        await self._refresh_alerts()

    async def _refresh_readings(self) -> None:
        try:
            readings = await self._service.recent_readings(self.patient.id)
        except BackendError as e:
            self.log_action("fetch_readings_failed", {"error": str(e)})
            return
        if not self.is_closed:
            self.recent_readings = readings

    async def _refresh_alerts(self) -> None:
        try:
            alerts = await self._service.alerts(self.patient.id)
        except BackendError as e:
            self.log_action("fetch_alerts_failed", {"error": str(e)})
            return
        if not self.is_closed:
            self.active_alerts = alerts

    async def submit_reading(
        self, metrics: Union[HealthMetricsInput, dict]
    ) -> Optional[SubmissionResult]:
        """
        Record a new reading.

        Args:
            metrics: A HealthMetricsInput or the raw form values

        Returns:
            SubmissionResult on success, None if rejected or failed
        """
        self.clear_errors()
        if isinstance(metrics, dict):
            try:
                metrics = HealthMetricsInput(**metrics)
            except PydanticValidationError as e:
                self.log_action("invalid_metrics", {"error": str(e)})
                self.fail(INVALID_METRICS)
                return None
        if self.patient is None and not await self.load():
            return None
        if not self._begin("submit_reading"):
            return None

        try:
            result = await self._service.submit_reading(self.patient.id, metrics)
        except BackendError as e:
            self.log_action("submit_failed", {"error": str(e)})
            if not self.is_closed:
                self.fail(SAVE_FAILED)
            return None
        finally:
            self._end("submit_reading")

        if self.is_closed:
            return result

        self.last_alerts = result.alerts
        self.notify("Health metrics recorded successfully!")
        for alert in result.alerts:
            self.notify(f"Health Alert: {alert.message}")
        await self.refresh()
        return result

    async def resolve_alert(self, alert_id: str) -> bool:
        """
        Mark one of the patient's alerts resolved.

        Returns:
            True if the alert is now resolved
        """
        self.clear_errors()
        if not self._begin("resolve_alert"):
            return False

        try:
            alert = await self._service.resolve_alert(alert_id)
        except BackendError as e:
            self.log_action("resolve_failed", {"alert_id": alert_id, "error": str(e)})
            return False if self.is_closed else self.fail(RESOLVE_FAILED)
        finally:
            self._end("resolve_alert")

        if self.is_closed:
            return alert is not None
        if alert is None:
            return self.fail(RESOLVE_FAILED)

        self.notify("Alert resolved")
        await self._refresh_alerts()
        return True
