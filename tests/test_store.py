"""
Tests for EntityStore against an in-memory SQLite database.
"""

import types

import pytest

from distribution.src.db import Fare, Route
from distribution.src.enums import EntityStatus
from distribution.src.store import EntityStore


@pytest.fixture
def route_store(db_session):
    return EntityStore(db_session, Route, Route.route_code)


def _route(code: str, status: str = EntityStatus.ACTIVE.value) -> Route:
    return Route(route_code=code, route_name=f"Route {code}", zones=[], status=status)


class TestQueries:
    def test_find_all_is_lazy(self, route_store):
        assert isinstance(route_store.findAll(), types.GeneratorType)

    def test_find_all_restarts_per_call(self, route_store):
        route_store.save(_route("RUT001"))
        first = list(route_store.findAll())
        route_store.save(_route("RUT002"))
        second = list(route_store.findAll())
        assert [r.route_code for r in first] == ["RUT001"]
        assert [r.route_code for r in second] == ["RUT001", "RUT002"]

    def test_find_all_by_status(self, route_store):
        route_store.save(_route("RUT001"))
        route_store.save(_route("RUT002", EntityStatus.INACTIVE.value))
        route_store.save(_route("RUT003"))
        active = [r.route_code for r in route_store.findAllByStatus("ACTIVE")]
        inactive = [r.route_code for r in route_store.findAllByStatus("INACTIVE")]
        assert active == ["RUT001", "RUT003"]
        assert inactive == ["RUT002"]

    def test_find_by_id(self, route_store):
        route = route_store.save(_route("RUT001"))
        assert route_store.findById(route.id).route_code == "RUT001"
        assert route_store.findById("does-not-exist") is None

    def test_identifier_is_generated(self, route_store):
        route = route_store.save(_route("RUT001"))
        assert isinstance(route.id, str)
        assert len(route.id) == 24

    def test_find_top_by_code_desc_empty(self, route_store):
        assert route_store.findTopByCodeDesc() is None

    def test_find_top_by_code_desc(self, route_store):
        for code in ["RUT002", "RUT010", "RUT007"]:
            route_store.save(_route(code))
        assert route_store.findTopByCodeDesc().route_code == "RUT010"

    def test_find_top_by_code_desc_is_lexicographic(self, route_store):
        route_store.save(_route("RUT999"))
        route_store.save(_route("RUT1000"))
        assert route_store.findTopByCodeDesc().route_code == "RUT999"

    def test_exists_by_code(self, db_session):
        store = EntityStore(db_session, Fare, Fare.fare_code)
        store.save(
            Fare(
                organization_id="org-1",
                fare_code="TAR001",
                fare_name="Diaria",
                fare_amount=5,
            )
        )
        assert store.existsByCode("TAR001") is True
        assert store.existsByCode("TAR002") is False


class TestWrites:
    def test_save_assigns_creation_timestamp(self, route_store):
        route = route_store.save(_route("RUT001"))
        assert route.created_at is not None

    def test_delete(self, route_store):
        route = route_store.save(_route("RUT001"))
        route_store.delete(route)
        assert route_store.findById(route.id) is None
        assert list(route_store.findAll()) == []
