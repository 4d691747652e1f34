from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from grocery_dispatch.main import create_app

# Customer pin placed exactly on store s-1 of the seed roster.
CUSTOMER = {"lat": -6.2, "lng": 106.8166}


@pytest.fixture
def api_client(roster_file: Path) -> TestClient:
    return TestClient(create_app())


def test_health(api_client: TestClient):
    assert api_client.get("/api/health").json() == {"status": "ok"}

    roster = api_client.get("/api/health/roster").json()
    assert roster["source"] == "workbook"
    assert roster["healthy"] is True
    assert roster["stores_count"] == 4
    assert roster["active_stores_count"] == 3


def test_coverage_returns_nearest_staffed_store(api_client: TestClient):
    response = api_client.get("/api/stores/available", params=CUSTOMER)

    assert response.status_code == 200
    payload = response.json()
    assert payload["available"] is True
    assert payload["store"]["store"]["id"] == "s-1"
    assert payload["store"]["distance_km"] == 0.0
    assert payload["estimated_delivery_minutes"] == 5
    assert payload["cod_allowed"] is False


def test_coverage_outside_delivery_zone_is_a_normal_response(api_client: TestClient):
    response = api_client.get("/api/stores/available", params={"lat": -6.5, "lng": 106.8166})

    assert response.status_code == 200
    payload = response.json()
    assert payload["available"] is False
    assert payload["message"]
    assert [item["store"]["id"] for item in payload["stores"]] == ["s-3", "s-2", "s-1"]
    assert all(item["is_available"] is False for item in payload["stores"])


def test_coverage_rejects_invalid_coordinates(api_client: TestClient):
    assert api_client.get("/api/stores/available", params={"lat": 95, "lng": 0}).status_code == 422
    assert api_client.get("/api/stores/available", params={"lat": "abc", "lng": 0}).status_code == 422
    assert api_client.get("/api/stores/available", params={"lat": "nan", "lng": 0}).status_code == 422


def test_unreadable_roster_is_service_unavailable(api_client: TestClient, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    from grocery_dispatch.config import settings

    monkeypatch.setattr(settings, "roster_file", tmp_path / "gone.xlsx")

    response = api_client.get("/api/stores/available", params=CUSTOMER)
    assert response.status_code == 503
    assert "try again" in response.json()["detail"]


def test_corrupt_roster_is_service_unavailable(api_client: TestClient, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    from grocery_dispatch.config import settings

    garbage = tmp_path / "corrupt.xlsx"
    garbage.write_bytes(b"not a zip file")
    monkeypatch.setattr(settings, "roster_file", garbage)

    assert api_client.get("/api/stores/available", params=CUSTOMER).status_code == 503
    assert api_client.post("/api/staff/toggle-status", json={"user_id": "u-d1", "status": "offline"}).status_code == 503


def test_broken_supabase_client_does_not_serve_workbook(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from grocery_dispatch.config import settings
    from grocery_dispatch.data import roster_repository
    from grocery_dispatch.db import supabase as supabase_module

    def broken_client(url, key):
        raise ValueError("Invalid API key")

    monkeypatch.setattr(settings, "supabase_url", "https://example.supabase.co")
    monkeypatch.setattr(settings, "supabase_key", "bad-key")
    monkeypatch.setattr(supabase_module, "create_client", broken_client)
    monkeypatch.setattr(roster_repository, "get_supabase_client", supabase_module.get_supabase_client)
    supabase_module.get_supabase_client.cache_clear()
    try:
        response = api_client.get("/api/stores/available", params=CUSTOMER)
        assert response.status_code == 503

        health = api_client.get("/api/health/roster").json()
        assert health["source"] == "supabase"
        assert health["healthy"] is False
    finally:
        supabase_module.get_supabase_client.cache_clear()


def test_nearby_lists_every_active_store(api_client: TestClient):
    payload = api_client.get("/api/stores/nearby", params=CUSTOMER).json()

    assert payload["max_radius_km"] == 5.0
    items = payload["items"]
    assert [item["store"]["id"] for item in items] == ["s-1", "s-2", "s-3"]
    assert [item["is_available"] for item in items] == [True, False, False]
    assert items[1]["has_online_driver"] is False
    assert items[2]["distance_km"] > 5.0


def test_staff_toggle_changes_coverage(api_client: TestClient):
    response = api_client.post("/api/staff/toggle-status", json={"user_id": "u-d1", "status": "offline"})
    assert response.status_code == 200
    assert response.json()["assignments"][0]["status"] == "offline"

    coverage = api_client.get("/api/stores/available", params=CUSTOMER).json()
    assert coverage["available"] is False

    api_client.post("/api/staff/toggle-status", json={"user_id": "u-d2", "status": "online"})
    coverage = api_client.get("/api/stores/available", params=CUSTOMER).json()
    assert coverage["available"] is True
    assert coverage["store"]["store"]["id"] == "s-2"


def test_staff_toggle_validation(api_client: TestClient):
    unknown = api_client.post("/api/staff/toggle-status", json={"user_id": "ghost", "status": "online"})
    assert unknown.status_code == 404

    bad_status = api_client.post("/api/staff/toggle-status", json={"user_id": "u-d1", "status": "away"})
    assert bad_status.status_code == 422


def test_store_staff_snapshot(api_client: TestClient):
    payload = api_client.get("/api/stores/s-2/staff").json()

    assert payload["online_pickers"] == 1
    assert payload["online_drivers"] == 0
    assert len(payload["staff"]) == 2

    assert api_client.get("/api/stores/nope/staff").status_code == 404


def test_deactivated_store_leaves_listing(api_client: TestClient):
    response = api_client.post("/api/stores/s-1/active", json={"is_active": False})
    assert response.status_code == 200
    assert response.json()["is_active"] is False

    ids = [item["store"]["id"] for item in api_client.get("/api/stores/nearby", params=CUSTOMER).json()["items"]]
    assert ids == ["s-2", "s-3"]

    # Store remains in the raw roster.
    assert "s-1" in [store["id"] for store in api_client.get("/api/stores").json()]


def test_dispatch_binds_store_picker_and_driver(api_client: TestClient):
    response = api_client.post(
        "/api/orders/dispatch",
        json={"customer_lat": CUSTOMER["lat"], "customer_lng": CUSTOMER["lng"]},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["available"] is True
    assert payload["store"]["store"]["id"] == "s-1"
    assert payload["picker_id"] == "u-p1"
    assert payload["driver_id"] == "u-d1"
    assert payload["estimated_delivery_minutes"] == 5
    assert payload["estimated_delivery_at"]


def test_dispatch_refuses_cod_at_non_cod_store(api_client: TestClient):
    response = api_client.post(
        "/api/orders/dispatch",
        json={"customer_lat": CUSTOMER["lat"], "customer_lng": CUSTOMER["lng"], "payment_method": "cod"},
    )
    assert response.status_code == 400


def test_dispatch_without_coverage(api_client: TestClient):
    response = api_client.post("/api/orders/dispatch", json={"customer_lat": 0.0, "customer_lng": 0.0})

    assert response.status_code == 200
    payload = response.json()
    assert payload["available"] is False
    assert payload["reason"] == "no_coverage"
    assert payload["picker_id"] is None
    assert len(payload["stores"]) == 3


def test_dispatch_uses_injected_ranker(api_client: TestClient):
    from grocery_dispatch.models.domain import Store
    from grocery_dispatch.services.availability.ranker import StoreAvailabilityRanker
    from grocery_dispatch.services.availability.roster import get_ranker

    empty = StoreAvailabilityRanker(lambda: [Store("X", "Nowhere", 0.0, 0.0)], lambda store_id: _no_staff(store_id))
    api_client.app.dependency_overrides[get_ranker] = lambda: empty

    payload = api_client.post("/api/orders/dispatch", json={"customer_lat": 0.0, "customer_lng": 0.0}).json()
    assert payload["available"] is False
    assert [item["store"]["id"] for item in payload["stores"]] == ["X"]


def test_dispatch_reports_staff_lost_after_ranking(api_client: TestClient):
    from grocery_dispatch.services.availability.roster import get_staffing

    api_client.app.dependency_overrides[get_staffing] = lambda: _no_staff

    response = api_client.post(
        "/api/orders/dispatch",
        json={"customer_lat": CUSTOMER["lat"], "customer_lng": CUSTOMER["lng"]},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["available"] is False
    assert payload["reason"] == "no_staff"
    assert "pickers or drivers" in payload["message"]
    assert payload["picker_id"] is None


def _no_staff(store_id: str):
    from grocery_dispatch.models.domain import OnlineStaffSnapshot

    return OnlineStaffSnapshot(store_id=store_id)


def test_driver_proximity(api_client: TestClient):
    response = api_client.post(
        "/api/tracking/proximity",
        json={"driver_lat": -6.201, "driver_lng": 106.8166, "customer_lat": -6.2, "customer_lng": 106.8166},
    )

    assert response.status_code == 200
    assert response.json() == {"distance_m": 111, "is_nearby": True, "eta_minutes": 1}
