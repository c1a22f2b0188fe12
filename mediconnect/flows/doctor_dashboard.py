"""
Doctor Dashboard - Patient roster, vitals history and clinical notes.
"""

from typing import List, Optional

from mediconnect.exceptions import BackendError
from mediconnect.flows.base import BaseFlow
from mediconnect.models.account import AuthSession
from mediconnect.models.health import (
    DoctorNote,
    DoctorNoteInput,
    HealthAlert,
    HealthMetricsReading,
)
from mediconnect.models.patient import Patient
from mediconnect.services.doctor_notes import DoctorNotesService
from mediconnect.services.records import get_record_store
from mediconnect.validation import is_blank


class DoctorDashboard(BaseFlow):
    """
    State behind the doctor's dashboard.

    The signed-in user is the doctor; notes are attributed to their user ID.
    """

    def __init__(self, session: AuthSession, service: Optional[DoctorNotesService] = None):
        super().__init__()
        self.session = session
        # Chart reads go out with the doctor's token so row-level security applies
        self._service = service or DoctorNotesService(get_record_store(session))

        self.search = ""
        self.patients: List[Patient] = []
        self.selected_patient: Optional[Patient] = None
        self.readings: List[HealthMetricsReading] = []
        self.alerts: List[HealthAlert] = []
        self.notes: List[DoctorNote] = []

    async def load_patients(self, search: str = "") -> List[Patient]:
        """Fetch the roster filtered by name or medical condition."""
        self.clear_errors()
        if not self._begin("load_patients"):
            return self.patients

        try:
            patients = await self._service.list_patients(search)
        except BackendError as e:
            self.log_action("load_patients_failed", {"error": str(e)})
            if not self.is_closed:
                self.fail("Failed to load patients")
            return self.patients
        finally:
            self._end("load_patients")

        if not self.is_closed:
            self.search = search
            self.patients = patients
        return patients

    async def select_patient(self, patient_id: str) -> bool:
        """
        Open a patient's chart: readings, all alerts and notes.

        The previous chart stays on screen until all three lists have
        loaded; if any fetch fails nothing changes.
        """
        self.clear_errors()
        patient = next((p for p in self.patients if p.id == patient_id), None)
        if patient is None:
            return self.fail("Patient not found")
        if not self._begin("select_patient"):
            return False

        try:
            readings = await self._service.patient_readings(
                patient_id, limit=self.settings.recent_readings_limit
            )
            alerts = await self._service.patient_alerts(patient_id)
            notes = await self._service.list_notes(patient_id)
        except BackendError as e:
            self.log_action("load_chart_failed", {"patient_id": patient_id, "error": str(e)})
            return False if self.is_closed else self.fail("Failed to load patient data")
        finally:
            self._end("select_patient")

        if self.is_closed:
            return False
        self.selected_patient = patient
        self.readings, self.alerts, self.notes = readings, alerts, notes
        return True

    async def add_note(self, note: DoctorNoteInput) -> Optional[DoctorNote]:
        """Attach a note to the selected patient."""
        self.clear_errors()
        if self.selected_patient is None:
            self.fail("Please select a patient first")
            return None
        if all(is_blank(value) for value in (note.diagnosis, note.prescription, note.notes)):
            self.fail("Note is empty")
            return None
        if not self._begin("add_note"):
            return None

        patient_id = self.selected_patient.id
        try:
            saved = await self._service.add_note(patient_id, self.session.user.id, note)
        except BackendError as e:
            self.log_action("add_note_failed", {"error": str(e)})
            if not self.is_closed:
                self.fail("Failed to save note")
            return None
        finally:
            self._end("add_note")

        if not self.is_closed:
            self.notify("Note saved")
            self.notes = [saved] + [n for n in self.notes if n.id != saved.id]
        return saved

    async def resolve_alert(self, alert_id: str) -> bool:
        """Resolve an alert on the selected patient's chart."""
        self.clear_errors()
        if not self._begin("resolve_alert"):
            return False

        try:
            alert = await self._service.resolve_alert(alert_id)
        except BackendError as e:
            self.log_action("resolve_failed", {"alert_id": alert_id, "error": str(e)})
            return False if self.is_closed else self.fail("Failed to resolve alert")
        finally:
            self._end("resolve_alert")

        if self.is_closed:
            return alert is not None
        if alert is None:
            return self.fail("Failed to resolve alert")

        self.alerts = [alert if a.id == alert.id else a for a in self.alerts]
        return True
