"""
Tests for distribution routes under /distribution/route.
"""

from unittest.mock import patch

import pytest

from distribution.api.route import UpdateForm, routeStore, updateRoute
from distribution.src import exceptions
from distribution.src.db import Route
from distribution.src.functions import changeStatus

URL = "/distribution/route"


def _payload(**overrides) -> dict:
    payload = {
        "organization_id": "org-1",
        "route_name": "Ruta Norte",
        "zones": [
            {"zone_id": "zone-1", "order": 1, "estimated_duration": 2},
            {"zone_id": "zone-2", "order": 2, "estimated_duration": 3},
        ],
        "total_estimated_duration": 5,
        "responsible_user_id": "user-1",
    }
    payload.update(overrides)
    return payload


class TestCreateRoute:
    def test_create(self, client, openobserve_events):
        resp = client.post(URL, json=_payload())
        assert resp.status_code == 201
        body = resp.json()
        assert body["route_code"] == "RUT001"
        assert body["status"] == "ACTIVE"
        assert body["zones"] == _payload()["zones"]
        assert body["created_at"] is not None
        event = openobserve_events.call_args.args[0]
        assert event["_method"] == "POST"
        assert event["route_code"] == "RUT001"

    def test_sequential_codes(self, client):
        first = client.post(URL, json=_payload()).json()
        second = client.post(URL, json=_payload(route_name="Ruta Sur")).json()
        assert first["route_code"] == "RUT001"
        assert second["route_code"] == "RUT002"

    def test_client_supplied_code_is_ignored(self, client):
        resp = client.post(URL, json=_payload(route_code="RUT777"))
        assert resp.json()["route_code"] == "RUT001"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"zones": []},
            {"route_name": ""},
            {"zones": [{"zone_id": "zone-1", "order": 0, "estimated_duration": 2}]},
            {"total_estimated_duration": -1},
        ],
    )
    def test_invalid_body(self, client, db_session, overrides):
        resp = client.post(URL, json=_payload(**overrides))
        assert resp.status_code == 422
        assert db_session.query(Route).count() == 0


class TestFetchRoute:
    def test_get_all(self, client):
        client.post(URL, json=_payload())
        client.post(URL, json=_payload())
        resp = client.get(URL)
        assert resp.status_code == 200
        assert [r["route_code"] for r in resp.json()] == ["RUT001", "RUT002"]

    def test_active_and_inactive(self, client):
        first = client.post(URL, json=_payload()).json()
        client.post(URL, json=_payload())
        client.patch(f"{URL}/{first['id']}/deactivate")

        active = client.get(f"{URL}/active").json()
        inactive = client.get(f"{URL}/inactive").json()
        assert [r["route_code"] for r in active] == ["RUT002"]
        assert [r["route_code"] for r in inactive] == ["RUT001"]

    def test_get_by_id(self, client):
        created = client.post(URL, json=_payload()).json()
        resp = client.get(f"{URL}/{created['id']}")
        assert resp.status_code == 200
        assert resp.json()["route_name"] == "Ruta Norte"

    def test_get_unknown_id(self, client):
        resp = client.get(f"{URL}/missing")
        assert resp.status_code == 404
        assert resp.headers["X-Error"] == "NotFound"
        assert resp.json()["detail"] == "Route with ID missing not found"


class TestUpdateRoute:
    def test_update_replaces_zones(self, client):
        created = client.post(URL, json=_payload()).json()
        zones = [{"zone_id": "zone-9", "order": 1, "estimated_duration": 4}]
        resp = client.put(
            f"{URL}/{created['id']}",
            json={
                "route_name": "Ruta Centro",
                "zones": zones,
                "total_estimated_duration": 4,
                "responsible_user_id": "user-2",
            },
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["route_name"] == "Ruta Centro"
        assert body["zones"] == zones
        assert body["responsible_user_id"] == "user-2"
        assert body["route_code"] == "RUT001"
        assert body["status"] == "ACTIVE"

    def test_update_unknown_id_never_saves(self, db_session):
        store = routeStore(db_session)
        fParam = UpdateForm(route_name="Ruta", zones=[])
        with patch.object(store, "save") as save:
            with pytest.raises(exceptions.NotFound):
                updateRoute(store, "missing", fParam)
        save.assert_not_called()


class TestRouteStatus:
    def test_deactivate_then_activate(self, client):
        created = client.post(URL, json=_payload()).json()
        resp = client.patch(f"{URL}/{created['id']}/deactivate")
        assert resp.status_code == 200
        assert resp.json()["status"] == "INACTIVE"
        resp = client.patch(f"{URL}/{created['id']}/activate")
        assert resp.json()["status"] == "ACTIVE"

    def test_activate_already_active_still_writes(self, client, db_session):
        created = client.post(URL, json=_payload()).json()
        store = routeStore(db_session)
        with patch.object(store, "save", wraps=store.save) as save:
            route = changeStatus(store, created["id"], "ACTIVE")
        save.assert_called_once()
        assert route.status == "ACTIVE"

    def test_unknown_id(self, client):
        assert client.patch(f"{URL}/missing/activate").status_code == 404
        assert client.patch(f"{URL}/missing/deactivate").status_code == 404


class TestDeleteRoute:
    def test_delete(self, client):
        created = client.post(URL, json=_payload()).json()
        assert client.delete(f"{URL}/{created['id']}").status_code == 204
        assert client.get(URL).json() == []

    def test_delete_unknown_id(self, client):
        assert client.delete(f"{URL}/missing").status_code == 404
