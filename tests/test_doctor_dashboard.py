"""
Tests for the doctor dashboard flow and the doctor notes service.
"""

import asyncio

import pytest

from mediconnect.flows.doctor_dashboard import DoctorDashboard
from mediconnect.models.account import AuthSession, UserIdentity
from mediconnect.models.health import DoctorNoteInput, HealthMetricsInput
from mediconnect.services.records import ALERTS_TABLE, DOCTOR_NOTES_TABLE, PATIENTS_TABLE


@pytest.fixture
async def patients(store):
    meena = await store.insert_one(
        PATIENTS_TABLE,
        {"user_id": "u-meena", "full_name": "Meena Rao", "medical_conditions": "Hypertension"},
    )
    arjun = await store.insert_one(
        PATIENTS_TABLE,
        {"user_id": "u-arjun", "full_name": "Arjun Das", "medical_conditions": "Type 2 Diabetes"},
    )
    return {"meena": meena["id"], "arjun": arjun["id"]}


@pytest.fixture
def doctor_session():
    return AuthSession(
        access_token="doctor-token",
        user=UserIdentity(id="doc-1", email="dr.sharma@example.com", full_name="Priya Sharma"),
    )


@pytest.fixture
def dashboard(doctor_session, notes_service):
    return DoctorDashboard(doctor_session, service=notes_service)


class TestRoster:
    """Test the patient roster."""

    @pytest.mark.asyncio
    async def test_newest_first(self, notes_service, patients):
        roster = await notes_service.list_patients()
        assert [p.full_name for p in roster] == ["Arjun Das", "Meena Rao"]

    @pytest.mark.asyncio
    async def test_search_by_condition(self, dashboard, patients):
        roster = await dashboard.load_patients("diabetes")
        assert [p.full_name for p in roster] == ["Arjun Das"]
        assert dashboard.search == "diabetes"

    @pytest.mark.asyncio
    async def test_search_by_name(self, dashboard, patients):
        roster = await dashboard.load_patients("MEENA")
        assert [p.id for p in roster] == [patients["meena"]]

    @pytest.mark.asyncio
    async def test_load_failure_keeps_roster(self, dashboard, patients, store):
        await dashboard.load_patients()
        store.fail_on.add(("select", PATIENTS_TABLE))

        roster = await dashboard.load_patients("x")

        assert len(roster) == 2
        assert dashboard.errors == ["Failed to load patients"]


class TestPatientChart:
    """Test opening a chart, adding notes and resolving alerts."""

    @pytest.mark.asyncio
    async def test_chart_includes_resolved_alerts(self, dashboard, patients, metrics_service):
        patient_id = patients["meena"]
        first = await metrics_service.submit_reading(patient_id, HealthMetricsInput(heart_rate=45))
        await metrics_service.submit_reading(patient_id, HealthMetricsInput(heart_rate=120))
        await metrics_service.resolve_alert(first.alerts[0].id)

        await dashboard.load_patients()
        assert await dashboard.select_patient(patient_id) is True

        assert len(dashboard.readings) == 2
        assert [a.message for a in dashboard.alerts] == [
            "High heart rate detected",
            "Low heart rate detected",
        ]
        assert dashboard.alerts[1].is_resolved is True

    @pytest.mark.asyncio
    async def test_failed_switch_keeps_previous_chart(
        self, dashboard, patients, metrics_service, store
    ):
        await metrics_service.submit_reading(patients["meena"], HealthMetricsInput(heart_rate=72))
        await dashboard.load_patients()
        assert await dashboard.select_patient(patients["meena"]) is True
        store.fail_on.add(("select", ALERTS_TABLE))

        assert await dashboard.select_patient(patients["arjun"]) is False

        assert dashboard.errors == ["Failed to load patient data"]
        assert dashboard.selected_patient.id == patients["meena"]
        assert {r.patient_id for r in dashboard.readings} == {patients["meena"]}

    @pytest.mark.asyncio
    async def test_unknown_patient(self, dashboard, patients):
        await dashboard.load_patients()
        assert await dashboard.select_patient("nobody") is False
        assert dashboard.errors == ["Patient not found"]

    @pytest.mark.asyncio
    async def test_add_note(self, dashboard, patients, store):
        await dashboard.load_patients()
        await dashboard.select_patient(patients["arjun"])

        note = await dashboard.add_note(
            DoctorNoteInput(diagnosis="Controlled diabetes", prescription="Metformin 500mg")
        )

        assert note.doctor_id == "doc-1"
        assert note.patient_id == patients["arjun"]
        assert dashboard.notes[0].id == note.id
        assert len(store.tables[DOCTOR_NOTES_TABLE]) == 1

    @pytest.mark.asyncio
    async def test_notes_listed_newest_first(self, notes_service, patients):
        patient_id = patients["arjun"]
        await notes_service.add_note(patient_id, "doc-1", DoctorNoteInput(notes="first visit"))
        await notes_service.add_note(patient_id, "doc-1", DoctorNoteInput(notes="follow-up"))

        notes = await notes_service.list_notes(patient_id)

        assert [n.notes for n in notes] == ["follow-up", "first visit"]

    @pytest.mark.asyncio
    async def test_empty_note_rejected(self, dashboard, patients, store):
        await dashboard.load_patients()
        await dashboard.select_patient(patients["arjun"])

        assert await dashboard.add_note(DoctorNoteInput(notes="   ")) is None
        assert dashboard.errors == ["Note is empty"]
        assert DOCTOR_NOTES_TABLE not in store.tables

    @pytest.mark.asyncio
    async def test_note_requires_selected_patient(self, dashboard):
        assert await dashboard.add_note(DoctorNoteInput(notes="hello")) is None
        assert dashboard.errors == ["Please select a patient first"]

    @pytest.mark.asyncio
    async def test_resolve_alert_updates_chart(self, dashboard, patients, metrics_service):
        patient_id = patients["meena"]
        result = await metrics_service.submit_reading(patient_id, HealthMetricsInput(blood_oxygen=91))
        await dashboard.load_patients()
        await dashboard.select_patient(patient_id)

        assert await dashboard.resolve_alert(result.alerts[0].id) is True
        assert dashboard.alerts[0].is_resolved is True

    @pytest.mark.asyncio
    async def test_resolve_unknown_alert(self, dashboard):
        assert await dashboard.resolve_alert("missing") is False
        assert dashboard.errors == ["Failed to resolve alert"]


class TestConcurrency:
    """Test that each handler ignores calls while its previous call is pending."""

    @pytest.mark.asyncio
    async def test_concurrent_roster_load_ignored(self, dashboard, patients, store):
        store.delay = 0.01
        first, second = await asyncio.gather(
            dashboard.load_patients(),
            dashboard.load_patients("meena"),
        )

        assert len(first) == 2
        assert second == []
        assert store.calls.count(("select", PATIENTS_TABLE)) == 1
        assert dashboard.search == ""

    @pytest.mark.asyncio
    async def test_concurrent_select_ignored(self, dashboard, patients, store):
        await dashboard.load_patients()
        store.delay = 0.01

        first, second = await asyncio.gather(
            dashboard.select_patient(patients["meena"]),
            dashboard.select_patient(patients["arjun"]),
        )

        assert first is True
        assert second is False
        assert dashboard.selected_patient.id == patients["meena"]
        assert dashboard.is_busy is False

    @pytest.mark.asyncio
    async def test_concurrent_resolve_ignored(self, dashboard, patients, metrics_service, store):
        result = await metrics_service.submit_reading(patients["meena"], HealthMetricsInput(heart_rate=45))
        alert_id = result.alerts[0].id
        store.delay = 0.01

        first, second = await asyncio.gather(
            dashboard.resolve_alert(alert_id),
            dashboard.resolve_alert(alert_id),
        )

        assert first is True
        assert second is False
        assert store.calls.count(("update", ALERTS_TABLE)) == 1

    @pytest.mark.asyncio
    async def test_failure_after_close_not_recorded(self, dashboard, store):
        store.fail_on.add(("update", ALERTS_TABLE))
        dashboard.close()

        assert await dashboard.resolve_alert("a1") is False
        assert dashboard.errors == []
