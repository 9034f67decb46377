"""
API Tests
=========

Tests for the FastAPI service, using the bundled area table.

Weissmere (marlin, 48-tick dwell) covers (2600, 3950).
"""

import pytest
from fastapi.testclient import TestClient

from shoal_tracker.main import app


@pytest.fixture
def client():
    """Provide a client with the lifespan (and a fresh tracker) running."""
    with TestClient(app) as test_client:
        yield test_client


def _appear(client, entity_id="shoal-7", x=2600, y=3950):
    return client.post("/signals/presence", json={
        "kind": "APPEARED",
        "entity_id": entity_id,
        "entity_kind": "shoal",
        "category": "marlin",
        "x": x,
        "y": y,
    })


class TestServiceEndpoints:
    """Tests for informational endpoints."""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["service"] == "ShoalTracker"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_ready(self, client):
        """Verify the bundled table is loaded at startup."""
        response = client.get("/ready")
        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    def test_metrics(self, client):
        data = client.get("/metrics").json()
        assert data["tick"] == 0
        assert "movement" in data


class TestSignalEndpoints:
    """Tests for signal delivery."""

    def test_presence_and_tick(self, client):
        """Verify a tracked entity shows up in the tick snapshot."""
        response = _appear(client)
        assert response.status_code == 200
        assert response.json()["tracked_entity"] == "shoal-7"

        snapshot = client.post("/signals/tick", json={"count": 1}).json()
        assert snapshot["tick"] == 1
        assert snapshot["entity"]["entity_id"] == "shoal-7"
        assert snapshot["area"] == "weissmere"
        assert snapshot["timer"]["status"] == "WAITING"

    def test_rebind_reported(self, client):
        _appear(client, entity_id="shoal-7")
        data = _appear(client, entity_id="shoal-8").json()
        assert data["rebind"]["previous"] == "shoal-7"
        assert data["rebind"]["current"] == "shoal-8"
        assert data["rebind"]["category_changed"] is False

    def test_position_unknown_entity(self, client):
        response = client.post("/signals/position", json={"entity_id": "ghost", "x": 1, "y": 1})
        assert response.status_code == 404

    def test_stop_countdown_over_http(self, client):
        """Verify the 48-tick dwell predicts the change 24 ticks in."""
        _appear(client)
        for step in range(5):
            client.post("/signals/position", json={
                "entity_id": "shoal-7", "x": 2600 + 3 * step, "y": 3950,
            })
            client.post("/signals/tick", json={})

        snapshot = client.post("/signals/tick", json={"count": 2}).json()
        assert snapshot["timer"]["status"] == "TIMING"
        assert snapshot["timer"]["ticks_remaining"] == 23
        assert snapshot["depth"]["required"] == "MODERATE"

    def test_text_and_probe(self, client):
        _appear(client)
        probe = client.post("/signals/probe", json={"probe": "PORT", "raw": 3}).json()
        assert probe["depth"] == "DEEP"

        data = client.post("/signals/text", json={
            "text": "Your net is at the correct depth for the nearby shoal.",
        }).json()
        assert data["classification"] == "CONFIRMED_DEPTH"
        assert data["reason_code"] == "DEPTH_CONFIRMED"
        assert data["depth"] == "DEEP"

    def test_invalid_payloads_rejected(self, client):
        assert client.post("/signals/tick", json={"count": 0}).status_code == 422
        assert client.post("/signals/probe", json={"probe": "BOW", "raw": 1}).status_code == 422
        assert client.post("/signals/presence", json={"kind": "VANISHED"}).status_code == 422


class TestPathEndpoints:
    """Tests for path read-outs."""

    def test_path_and_simplified(self, client):
        _appear(client)
        for step in range(6):
            client.post("/signals/position", json={
                "entity_id": "shoal-7", "x": 2600 + 3 * step, "y": 3950,
            })
            client.post("/signals/tick", json={})

        raw = client.get("/path").json()
        simplified = client.get("/path/simplified").json()
        assert raw["count"] == 6
        assert simplified["count"] == 2
        assert raw["waypoints"][0] == {"x": 2600, "y": 3950, "plane": 0, "is_stop_point": False}

        analysis = client.get("/path/analysis").json()
        assert analysis["removed_count"] == 4

    def test_export(self, client):
        _appear(client)
        client.post("/signals/tick", json={})
        data = client.get("/path/export").json()
        assert data["export"]["category"] == "marlin"
        assert "waypoint_count: 1" in data["yaml"]

    def test_last_export_missing(self, client):
        assert client.get("/path/last-export").status_code == 404

    def test_last_export_after_departure(self, client):
        _appear(client)
        for step in range(10):
            client.post("/signals/position", json={
                "entity_id": "shoal-7", "x": 2600 + 3 * step, "y": 3950,
            })
            client.post("/signals/tick", json={})
        client.post("/signals/presence", json={"kind": "DEPARTED", "entity_id": "shoal-7"})

        response = client.get("/path/last-export")
        assert response.status_code == 200
        assert len(response.json()["export"]["waypoints"]) == 10
