"""
Health Metrics Service - Records vital-sign readings and derives alerts.

A reading is checked against a fixed table of clinical thresholds. Each
rule is independent: one submission can raise zero, one or several
alerts, and a rule whose fields were not provided is skipped.
"""

from typing import Callable, List, NamedTuple, Optional, Tuple

from loguru import logger

from mediconnect.config import ALERT_METRIC_TYPE, ALERT_TYPE_WARNING, get_settings
from mediconnect.exceptions import BackendError
from mediconnect.models.account import UserIdentity
from mediconnect.models.health import (
    HealthAlert,
    HealthMetricsInput,
    HealthMetricsReading,
    SubmissionResult,
)
from mediconnect.models.patient import Patient
from mediconnect.services.records import (
    ALERTS_TABLE,
    HEALTH_METRICS_TABLE,
    PATIENTS_TABLE,
    RecordStore,
    get_record_store,
)


class AlertRule(NamedTuple):
    """One threshold check over one or two reading fields."""

    message: str
    fields: Tuple[str, ...]
    triggered: Callable[..., bool]
    describe: Callable[..., str]


# Clinical thresholds (temperature in °F, oxygen in %)
ALERT_RULES: List[AlertRule] = [
    AlertRule(
        "High blood pressure detected",
        ("blood_pressure_systolic", "blood_pressure_diastolic"),
        lambda systolic, diastolic: systolic > 140 or diastolic > 90,
        lambda systolic, diastolic: f"{systolic}/{diastolic} mmHg",
    ),
    AlertRule(
        "High heart rate detected",
        ("heart_rate",),
        lambda bpm: bpm > 100,
        lambda bpm: f"{bpm} BPM",
    ),
    AlertRule(
        "Low heart rate detected",
        ("heart_rate",),
        lambda bpm: bpm < 60,
        lambda bpm: f"{bpm} BPM",
    ),
    AlertRule(
        "Fever detected",
        ("body_temperature",),
        lambda temp: temp > 100.4,
        lambda temp: f"{temp}°F",
    ),
    AlertRule(
        "Low body temperature detected",
        ("body_temperature",),
        lambda temp: temp < 97,
        lambda temp: f"{temp}°F",
    ),
    AlertRule(
        "Low blood oxygen level detected",
        ("blood_oxygen",),
        lambda spo2: spo2 < 95,
        lambda spo2: f"{spo2}%",
    ),
]


def evaluate_metrics(metrics: HealthMetricsInput) -> List[Tuple[str, str]]:
    """
    Run a reading through the alert rules.

    A rule only runs when every field it reads is present, so blood
    pressure needs both systolic and diastolic values.

    Args:
        metrics: The submitted reading

    Returns:
        (message, offending value) for each triggered rule, in rule order
    """
    triggered = []
    for rule in ALERT_RULES:
        values = [getattr(metrics, field) for field in rule.fields]
        if any(value is None for value in values):
            continue
        if rule.triggered(*values):
            triggered.append((rule.message, rule.describe(*values)))
    return triggered


def alert_messages(metrics: HealthMetricsInput) -> List[str]:
    """Messages of the rules a reading triggers."""
    return [message for message, _ in evaluate_metrics(metrics)]


class HealthMetricsService:
    """
    Persists readings and their alerts through the record store.
    """

    def __init__(self, store: Optional[RecordStore] = None):
        self._store = store or get_record_store()
        self.settings = get_settings()

    async def ensure_patient(self, user: UserIdentity) -> Patient:
        """
        Get the patient record for a user, creating it on first use.

        Args:
            user: Identity from the current session

        Returns:
            The user's patient record
        """
        row = await self._store.select_one(PATIENTS_TABLE, {"user_id": user.id})
        if row is None:
            row = await self._store.insert_one(
                PATIENTS_TABLE,
                {"user_id": user.id, "full_name": user.display_name},
            )
            logger.info(f"Created patient record {row['id']} for user {user.id}")
        return Patient(**row)

    async def submit_reading(
        self, patient_id: str, metrics: HealthMetricsInput
    ) -> SubmissionResult:
        """
        Store a reading and one alert per triggered rule.

        The reading and its alerts are written together: alerts go in as one
        batch, and if that batch fails the reading is removed again before
        the error propagates. Every field is optional, so an empty reading
        is stored as-is and raises no alerts.

        Args:
            patient_id: Patient the reading belongs to
            metrics: The submitted values

        Returns:
            SubmissionResult with the stored reading and new alerts

        Raises:
            BackendError: If either write fails
        """
        if metrics.is_empty:
            logger.debug(f"Storing empty reading for patient {patient_id}")

        warnings = evaluate_metrics(metrics)

        row = await self._store.insert_one(
            HEALTH_METRICS_TABLE,
            {"patient_id": patient_id, **metrics.to_record()},
        )
        reading = HealthMetricsReading(**row)

        alerts: List[HealthAlert] = []
        if warnings:
            try:
                rows = await self._store.insert(
                    ALERTS_TABLE,
                    [
                        {
                            "patient_id": patient_id,
                            "metric_type": ALERT_METRIC_TYPE,
                            "alert_type": ALERT_TYPE_WARNING,
                            "message": message,
                            "value": value,
                            "is_resolved": False,
                        }
                        for message, value in warnings
                    ],
                )
            except BackendError:
                await self._discard_reading(reading.id)
                raise
            alerts = [HealthAlert(**alert_row) for alert_row in rows]

        logger.info(
            f"Recorded reading {reading.id} for patient {patient_id} "
            f"with {len(alerts)} alert(s)"
        )
        return SubmissionResult(reading=reading, alerts=alerts)

    async def _discard_reading(self, reading_id: str) -> None:
        try:
            await self._store.delete(HEALTH_METRICS_TABLE, {"id": reading_id})
            logger.warning(f"Removed reading {reading_id} after alert write failed")
        except BackendError as e:
            logger.error(f"Could not remove reading {reading_id}: {e}")

    async def recent_readings(
        self, patient_id: str, limit: Optional[int] = None
    ) -> List[HealthMetricsReading]:
        """Most recent readings first."""
        rows = await self._store.select(
            HEALTH_METRICS_TABLE,
            {"patient_id": patient_id},
            order_by="recorded_at",
            descending=True,
            limit=limit or self.settings.recent_readings_limit,
        )
        return [HealthMetricsReading(**row) for row in rows]

    async def alerts(self, patient_id: str, unresolved_only: bool = True) -> List[HealthAlert]:
        """Alerts for a patient, newest first."""
        filters = {"patient_id": patient_id}
        if unresolved_only:
            filters["is_resolved"] = False
        rows = await self._store.select(
            ALERTS_TABLE, filters, order_by="created_at", descending=True
        )
        return [HealthAlert(**row) for row in rows]

    async def resolve_alert(self, alert_id: str) -> Optional[HealthAlert]:
        """
        Mark an alert resolved.

        Resolving an already-resolved alert rewrites the same flag and
        succeeds.

        Returns:
            The updated alert, or None if no alert has that ID

        Raises:
            BackendError: If the update fails
        """
        rows = await self._store.update(ALERTS_TABLE, {"is_resolved": True}, {"id": alert_id})
        if not rows:
            return None
        logger.info(f"Resolved alert {alert_id}")
        return HealthAlert(**rows[0])


# Singleton instance
_metrics_service: Optional[HealthMetricsService] = None


def get_metrics_service() -> HealthMetricsService:
    """Get the singleton health metrics service instance."""
    global _metrics_service
    if _metrics_service is None:
        _metrics_service = HealthMetricsService()
    return _metrics_service
