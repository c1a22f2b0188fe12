"""
Doctor Notes Service - Patient roster and clinical notes for doctors.
"""

from typing import List, Optional

from loguru import logger

from mediconnect.models.health import (
    DoctorNote,
    DoctorNoteInput,
    HealthAlert,
    HealthMetricsReading,
)
from mediconnect.models.patient import Patient
from mediconnect.services.records import (
    ALERTS_TABLE,
    DOCTOR_NOTES_TABLE,
    HEALTH_METRICS_TABLE,
    PATIENTS_TABLE,
    RecordStore,
    get_record_store,
)


class DoctorNotesService:
    """
    Reads the patient roster and writes doctor notes.
    """

    def __init__(self, store: Optional[RecordStore] = None):
        self._store = store or get_record_store()

    async def list_patients(self, search: str = "") -> List[Patient]:
        """
        List patients, newest first, optionally narrowed by a search term.

        Args:
            search: Matched case-insensitively against name and conditions

        Returns:
            Matching patients
        """
        rows = await self._store.select(PATIENTS_TABLE, order_by="created_at", descending=True)
        patients = [Patient(**row) for row in rows]
        if search:
            patients = [patient for patient in patients if patient.matches(search)]
        return patients

    async def patient_readings(
        self, patient_id: str, limit: Optional[int] = None
    ) -> List[HealthMetricsReading]:
        """A patient's readings, newest first."""
        rows = await self._store.select(
            HEALTH_METRICS_TABLE,
            {"patient_id": patient_id},
            order_by="recorded_at",
            descending=True,
            limit=limit,
        )
        return [HealthMetricsReading(**row) for row in rows]

    async def patient_alerts(self, patient_id: str) -> List[HealthAlert]:
        """All of a patient's alerts, resolved or not, newest first."""
        rows = await self._store.select(
            ALERTS_TABLE, {"patient_id": patient_id}, order_by="created_at", descending=True
        )
        return [HealthAlert(**row) for row in rows]

    async def resolve_alert(self, alert_id: str) -> Optional[HealthAlert]:
        """Mark an alert resolved. Returns None if no alert has that ID."""
        rows = await self._store.update(ALERTS_TABLE, {"is_resolved": True}, {"id": alert_id})
        if not rows:
            return None
        logger.info(f"Resolved alert {alert_id} from doctor dashboard")
        return HealthAlert(**rows[0])

    async def add_note(
        self, patient_id: str, doctor_id: str, note: DoctorNoteInput
    ) -> DoctorNote:
        """Store a note on a patient's chart."""
        row = await self._store.insert_one(
            DOCTOR_NOTES_TABLE,
            {"patient_id": patient_id, "doctor_id": doctor_id, **note.model_dump(exclude_none=True)},
        )
        logger.info(f"Doctor {doctor_id} added note {row['id']} for patient {patient_id}")
        return DoctorNote(**row)

    async def list_notes(self, patient_id: str) -> List[DoctorNote]:
        """Notes for a patient, newest first."""
        rows = await self._store.select(
            DOCTOR_NOTES_TABLE,
            {"patient_id": patient_id},
            order_by="created_at",
            descending=True,
        )
        return [DoctorNote(**row) for row in rows]


# Singleton instance
_doctor_notes_service: Optional[DoctorNotesService] = None


def get_doctor_notes_service() -> DoctorNotesService:
    """Get the singleton doctor notes service instance."""
    global _doctor_notes_service
    if _doctor_notes_service is None:
        _doctor_notes_service = DoctorNotesService()
    return _doctor_notes_service
