"""
Tests for distribution schedules under /distribution/schedule.
"""

from unittest.mock import patch

import pytest

from distribution.api.schedule import CreateForm, createSchedule, scheduleStore
from distribution.src import exceptions
from distribution.src.db import Schedule

URL = "/distribution/schedule"


def _payload(**overrides) -> dict:
    payload = {
        "organization_id": "org-1",
        "route_id": "route-1",
        "zone_id": "zone-1",
        "schedule_name": "Turno mañana",
        "days_of_week": ["MONDAY", "WEDNESDAY", "FRIDAY"],
        "start_time": "06:00",
        "end_time": "10:00",
        "duration_hours": 4,
    }
    payload.update(overrides)
    return payload


def _update(**overrides) -> dict:
    payload = {
        "route_id": "route-2",
        "day_of_week": "TUESDAY",
        "start_time": "07:00",
        "end_time": "09:30",
        "estimated_duration": 150,
    }
    payload.update(overrides)
    return payload


class TestCreateSchedule:
    def test_create(self, client, openobserve_events):
        resp = client.post(URL, json=_payload())
        assert resp.status_code == 201
        body = resp.json()
        assert body["schedule_code"] == "HOR001"
        assert body["status"] == "ACTIVE"
        assert body["days_of_week"] == ["MONDAY", "WEDNESDAY", "FRIDAY"]
        assert body["duration_hours"] == 4
        assert body["day_of_week"] is None
        openobserve_events.assert_called_once()

    def test_sequential_codes(self, client):
        codes = [client.post(URL, json=_payload()).json()["schedule_code"] for _ in range(2)]
        assert codes == ["HOR001", "HOR002"]

    def test_route_is_optional(self, client):
        resp = client.post(URL, json=_payload(route_id=None))
        assert resp.status_code == 201
        assert resp.json()["route_id"] is None

    @pytest.mark.parametrize(
        "overrides", [{"days_of_week": []}, {"duration_hours": 0}, {"zone_id": ""}]
    )
    def test_invalid_body(self, client, db_session, overrides):
        resp = client.post(URL, json=_payload(**overrides))
        assert resp.status_code == 422
        assert db_session.query(Schedule).count() == 0

    def test_generated_code_already_taken(self, db_session):
        store = scheduleStore(db_session)
        store.save(Schedule(schedule_code="HOR002", days_of_week=[]))
        with patch.object(
            store, "findTopByCodeDesc", return_value=Schedule(schedule_code="HOR001")
        ):
            with patch.object(store, "save") as save:
                with pytest.raises(exceptions.CodeAlreadyExists):
                    createSchedule(store, CreateForm(**_payload()))
        save.assert_not_called()


class TestFetchSchedule:
    def test_get_all_and_by_status(self, client):
        first = client.post(URL, json=_payload()).json()
        client.post(URL, json=_payload())
        client.patch(f"{URL}/{first['id']}/deactivate")

        assert [s["schedule_code"] for s in client.get(URL).json()] == [
            "HOR001",
            "HOR002",
        ]
        assert [s["schedule_code"] for s in client.get(f"{URL}/active").json()] == [
            "HOR002"
        ]
        assert [s["schedule_code"] for s in client.get(f"{URL}/inactive").json()] == [
            "HOR001"
        ]

    def test_get_by_id(self, client):
        created = client.post(URL, json=_payload()).json()
        resp = client.get(f"{URL}/{created['id']}")
        assert resp.status_code == 200
        assert resp.json()["schedule_code"] == "HOR001"

    def test_get_unknown_id(self, client):
        resp = client.get(f"{URL}/missing")
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Schedule with ID missing not found"


class TestUpdateSchedule:
    def test_update_uses_single_day_and_minutes(self, client):
        created = client.post(URL, json=_payload()).json()
        resp = client.put(f"{URL}/{created['id']}", json=_update())
        assert resp.status_code == 200
        body = resp.json()
        assert body["route_id"] == "route-2"
        assert body["day_of_week"] == "TUESDAY"
        assert body["start_time"] == "07:00"
        assert body["end_time"] == "09:30"
        assert body["estimated_duration"] == 150
        assert body["days_of_week"] == ["MONDAY", "WEDNESDAY", "FRIDAY"]
        assert body["duration_hours"] == 4
        assert body["schedule_code"] == "HOR001"
        assert body["schedule_name"] == "Turno mañana"

    def test_update_unknown_id(self, client):
        resp = client.put(f"{URL}/missing", json=_update())
        assert resp.status_code == 404

    def test_update_rejects_blank_day(self, client):
        created = client.post(URL, json=_payload()).json()
        resp = client.put(f"{URL}/{created['id']}", json=_update(day_of_week=""))
        assert resp.status_code == 422


class TestScheduleStatus:
    def test_deactivate_then_activate(self, client):
        created = client.post(URL, json=_payload()).json()
        assert client.patch(f"{URL}/{created['id']}/deactivate").json()["status"] == (
            "INACTIVE"
        )
        assert client.patch(f"{URL}/{created['id']}/activate").json()["status"] == (
            "ACTIVE"
        )

    def test_unknown_id(self, client):
        assert client.patch(f"{URL}/missing/activate").status_code == 404


class TestDeleteSchedule:
    def test_delete(self, client):
        created = client.post(URL, json=_payload()).json()
        assert client.delete(f"{URL}/{created['id']}").status_code == 204
        assert client.get(f"{URL}/{created['id']}").status_code == 404

    def test_delete_unknown_id(self, client):
        assert client.delete(f"{URL}/missing").status_code == 404
