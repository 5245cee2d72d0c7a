"""Tests for appointment and agenda endpoints."""

from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError

from clinic_agenda.domain.scheduling.repository import SqlAppointmentStore
from clinic_agenda.models import Appointment


def book(client, clinic, start="2030-01-07T09:00:00", doctor_key="doctor_id", **extra):
    payload = {
        "doctorId": clinic[doctor_key],
        "patientId": clinic["patient_id"],
        "startAt": start,
        **extra,
    }
    return client.post("/appointments", json=payload, headers=clinic["headers"])


class TestCreateAppointment:
    def test_end_follows_unit_visit_duration(self, client, clinic):
        response = book(client, clinic)
        assert response.status_code == 200
        data = response.json()
        assert data["startAt"] == "2030-01-07T09:00:00"
        assert data["endAt"] == "2030-01-07T09:15:00"
        assert data["status"] == "scheduled"
        assert data["unitId"] == clinic["unit_id"]
        assert data["bookedById"] == clinic["profile_id"]
        assert data["patientName"] == "Paulo Paciente"

    def test_fit_in_and_notes_are_stored(self, client, clinic):
        data = book(client, clinic, fitIn=True, notes="Retorno").json()
        assert data["fitIn"] is True
        assert data["notes"] == "Retorno"

    def test_unknown_doctor(self, client, clinic):
        response = client.post(
            "/appointments",
            json={"doctorId": "nope", "patientId": clinic["patient_id"], "startAt": "2030-01-07T09:00:00"},
            headers=clinic["headers"],
        )
        assert response.status_code == 404

    def test_invalid_status_rejected(self, client, clinic):
        assert book(client, clinic, status="lost").status_code == 422

    def test_missing_token(self, client, clinic):
        response = client.post("/appointments", json={})
        assert response.status_code in (401, 403)

    def test_plan_must_belong_to_insurer(self, client, clinic):
        headers = clinic["headers"]
        first = client.post("/settings/insurers", json={"name": "Saúde Mais"}, headers=headers).json()
        second = client.post("/settings/insurers", json={"name": "Vida Boa"}, headers=headers).json()
        plan = client.post(
            f"/settings/insurers/{second['id']}/plans", json={"name": "Ouro"}, headers=headers
        ).json()

        response = book(client, clinic, insurerId=first["id"], insurancePlanId=plan["id"])
        assert response.status_code == 400

        response = book(client, clinic, insurerId=second["id"], insurancePlanId=plan["id"])
        assert response.status_code == 200
        assert response.json()["insurancePlanName"] == "Ouro"

    def test_offset_start_stored_as_clinic_wall_time(self, client, clinic):
        # Sao Paulo is UTC-3
        data = book(client, clinic, start="2030-01-07T12:00:00Z").json()
        assert data["startAt"] == "2030-01-07T09:00:00"
        assert data["endAt"] == "2030-01-07T09:15:00"


class TestAppointmentLifecycle:
    def test_update_start_recomputes_end(self, client, clinic):
        appt_id = book(client, clinic).json()["id"]
        response = client.patch(
            f"/appointments/{appt_id}", json={"startAt": "2030-01-07T11:00:00"}, headers=clinic["headers"]
        )
        assert response.status_code == 200
        assert response.json()["endAt"] == "2030-01-07T11:15:00"

    @pytest.mark.parametrize("status", ["confirmed", "cancelled", "completed", "no_show", "scheduled"])
    def test_any_status_change_allowed(self, client, clinic, status):
        appt_id = book(client, clinic).json()["id"]
        response = client.patch(
            f"/appointments/{appt_id}/status", json={"status": status}, headers=clinic["headers"]
        )
        assert response.status_code == 200
        assert response.json()["status"] == status

    def test_delete(self, client, clinic):
        appt_id = book(client, clinic).json()["id"]
        assert client.delete(f"/appointments/{appt_id}", headers=clinic["headers"]).status_code == 200
        assert client.get(f"/appointments/{appt_id}", headers=clinic["headers"]).status_code == 404

    def test_list_window(self, client, clinic):
        book(client, clinic, start="2030-01-07T09:00:00")
        book(client, clinic, start="2030-01-08T09:00:00")
        response = client.get(
            "/appointments",
            params={"start": "2030-01-07T00:00:00", "end": "2030-01-07T23:59:59"},
            headers=clinic["headers"],
        )
        assert response.status_code == 200
        assert [a["startAt"] for a in response.json()] == ["2030-01-07T09:00:00"]

    def test_malformed_id_is_404(self, client, clinic):
        assert client.get("/appointments/not-a-uuid", headers=clinic["headers"]).status_code == 404

    def test_other_tenant_sees_404(self, client, clinic, other_clinic):
        appt_id = book(client, clinic).json()["id"]
        assert client.get(f"/appointments/{appt_id}", headers=other_clinic["headers"]).status_code == 404
        assert (
            client.patch(
                f"/appointments/{appt_id}/status", json={"status": "cancelled"}, headers=other_clinic["headers"]
            ).status_code
            == 404
        )


class TestAgendaEndpoint:
    def test_day_grid(self, client, clinic):
        book(client, clinic, start="2030-01-07T09:00:00")
        response = client.get("/agenda", params={"date": "2030-01-07"}, headers=clinic["headers"])
        assert response.status_code == 200
        data = response.json()
        assert data["slotMinutes"] == 15
        assert len(data["slots"]) == 40

        slots = {s["start"]: s for s in data["slots"]}
        assert [a["patientName"] for a in slots["2030-01-07T09:00:00"]["appointments"]] == ["Paulo Paciente"]
        assert slots["2030-01-07T09:15:00"]["appointments"] == []
        assert slots["2030-01-07T09:15:00"]["isFree"] is True

    def test_doctor_filter(self, client, clinic):
        book(client, clinic, start="2030-01-07T09:00:00")
        response = client.get(
            "/agenda",
            params={"date": "2030-01-07", "doctorId": clinic["other_doctor_id"]},
            headers=clinic["headers"],
        )
        assert all(not s["appointments"] for s in response.json()["slots"])

    def test_unit_wide_block_shows_in_grid(self, client, clinic):
        response = client.post(
            "/schedule-blocks",
            json={"startAt": "2030-01-07T12:00:00", "endAt": "2030-01-07T13:00:00", "reason": "Almoço"},
            headers=clinic["headers"],
        )
        assert response.status_code == 200

        grid = client.get("/agenda", params={"date": "2030-01-07"}, headers=clinic["headers"]).json()
        blocked = [s["start"] for s in grid["slots"] if s["blocks"]]
        assert blocked == [
            "2030-01-07T12:00:00",
            "2030-01-07T12:15:00",
            "2030-01-07T12:30:00",
            "2030-01-07T12:45:00",
        ]

    def test_block_with_mixed_offsets(self, client, clinic):
        response = client.post(
            "/schedule-blocks",
            json={"startAt": "2030-01-07T15:00:00Z", "endAt": "2030-01-07T13:00:00"},
            headers=clinic["headers"],
        )
        assert response.status_code == 200
        assert response.json()["startAt"] == "2030-01-07T12:00:00"

        response = client.post(
            "/schedule-blocks",
            json={"startAt": "2030-01-07T16:00:00Z", "endAt": "2030-01-07T13:00:00"},
            headers=clinic["headers"],
        )
        assert response.status_code == 422

    def test_requires_selected_unit(self, client, clinic, db):
        from clinic_agenda.models import Profile

        profile = db.get(Profile, clinic["profile_id"])
        profile.current_unit_id = None
        profile.default_unit_id = None
        db.commit()

        response = client.get("/agenda", params={"date": "2030-01-07"}, headers=clinic["headers"])
        assert response.status_code == 400


class TestMoveEndpoint:
    def test_move_to_other_slot_and_doctor(self, client, clinic, db):
        appt_id = book(client, clinic).json()["id"]
        response = client.post(
            f"/appointments/{appt_id}/move",
            json={"targetStart": "2030-01-07T09:30:00", "targetDoctorId": clinic["other_doctor_id"]},
            headers=clinic["headers"],
        )
        assert response.status_code == 200
        data = response.json()
        assert data["changed"] is True
        assert data["appointment"]["startAt"] == "2030-01-07T09:30:00"
        assert data["appointment"]["endAt"] == "2030-01-07T09:45:00"
        assert data["appointment"]["doctorId"] == clinic["other_doctor_id"]
        assert data["appointment"]["doctorName"] == "Dra. Yara"

        stored = db.get(Appointment, appt_id)
        assert stored.start_at == datetime(2030, 1, 7, 9, 30)
        assert stored.doctor_id == clinic["other_doctor_id"]

    def test_same_slot_is_noop(self, client, clinic):
        appt_id = book(client, clinic).json()["id"]
        response = client.post(
            f"/appointments/{appt_id}/move",
            json={"targetStart": "2030-01-07T09:00:00", "targetDoctorId": clinic["doctor_id"]},
            headers=clinic["headers"],
        )
        assert response.status_code == 200
        assert response.json()["changed"] is False

    def test_rejected_write_leaves_appointment_in_place(self, client, clinic, db, monkeypatch):
        appt_id = book(client, clinic).json()["id"]

        def reject(self, appointment_id, start_at, end_at, doctor_id):
            raise OperationalError("UPDATE appointments", {}, Exception("database is locked"))

        monkeypatch.setattr(SqlAppointmentStore, "update_appointment", reject)
        response = client.post(
            f"/appointments/{appt_id}/move",
            json={"targetStart": "2030-01-07T09:30:00", "targetDoctorId": clinic["other_doctor_id"]},
            headers=clinic["headers"],
        )
        assert response.status_code == 409
        assert "database is locked" in response.json()["detail"]

        stored = db.get(Appointment, appt_id)
        assert stored.start_at == datetime(2030, 1, 7, 9, 0)
        assert stored.doctor_id == clinic["doctor_id"]

    def test_unknown_target_doctor(self, client, clinic):
        appt_id = book(client, clinic).json()["id"]
        response = client.post(
            f"/appointments/{appt_id}/move",
            json={"targetStart": "2030-01-07T09:30:00", "targetDoctorId": "ghost"},
            headers=clinic["headers"],
        )
        assert response.status_code == 404

    def test_same_slot_with_utc_offset_is_noop(self, client, clinic, monkeypatch):
        appt_id = book(client, clinic).json()["id"]
        writes = []

        def record(self, appointment_id, start_at, end_at, doctor_id):
            writes.append(appointment_id)

        monkeypatch.setattr(SqlAppointmentStore, "update_appointment", record)
        response = client.post(
            f"/appointments/{appt_id}/move",
            json={"targetStart": "2030-01-07T12:00:00Z", "targetDoctorId": clinic["doctor_id"]},
            headers=clinic["headers"],
        )
        assert response.status_code == 200
        assert response.json()["changed"] is False
        assert writes == []

    def test_list_window_accepts_offsets(self, client, clinic):
        book(client, clinic, start="2030-01-07T09:00:00")
        response = client.get(
            "/appointments",
            params={"start": "2030-01-07T11:00:00+00:00", "end": "2030-01-07T13:00:00+00:00"},
            headers=clinic["headers"],
        )
        assert [a["startAt"] for a in response.json()] == ["2030-01-07T09:00:00"]
