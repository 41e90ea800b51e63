"""
Tests for the HTTP API.
"""

from fastapi.testclient import TestClient

from py_hexmap.api.main import app, clear_maps
from py_hexmap.config import settings


class TestAPIEndpoints:
    """Test the map generation endpoints."""

    def setup_method(self):
        """Set up test client."""
        clear_maps()
        self.client = TestClient(app)

    def generate(self, **payload):
        body = {"width": 16, "height": 12, "seed": 42}
        body.update(payload)
        return self.client.post("/maps/generate", json=body)

    def test_root(self):
        response = self.client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_health(self):
        response = self.client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_presets(self):
        data = self.client.get("/presets").json()
        assert "archipelago" in data["presets"]
        assert data["default_preset"] == settings.default_preset

    def test_compatibility_rules(self):
        data = self.client.get("/compatibility-rules").json()
        assert data["deep_water"] == ["deep_water", "shallow_water"]

    def test_generate_map(self):
        response = self.generate(preset="continents")
        assert response.status_code == 200
        data = response.json()
        assert data["width"] == 16
        assert data["height"] == 12
        assert data["preset"] == "continents"
        assert set(data["seeds"].values()) == {42}

    def test_generated_map_is_reproducible(self):
        first = self.generate().json()["id"]
        second = self.generate().json()["id"]
        tiles_a = self.client.get(f"/maps/{first}").json()["tiles"]
        tiles_b = self.client.get(f"/maps/{second}").json()["tiles"]
        assert tiles_a == tiles_b

    def test_get_map_tiles(self):
        map_id = self.generate().json()["id"]
        data = self.client.get(f"/maps/{map_id}").json()
        assert len(data["tiles"]) == 12
        assert all(len(row) == 16 for row in data["tiles"])
        assert data["legend"]["0"] == "deep_water"

    def test_statistics(self):
        map_id = self.generate().json()["id"]
        response = self.client.get(f"/maps/{map_id}/statistics")
        assert response.status_code == 200
        data = response.json()
        assert data["total_cells"] == 192
        assert data["land_cells"] + data["water_cells"] == 192
        assert sum(data["counts"].values()) == 192

    def test_ascii_preview(self):
        map_id = self.generate().json()["id"]
        data = self.client.get(f"/maps/{map_id}/ascii").json()
        assert len(data["ascii"].splitlines()) == 12

    def test_list_maps(self):
        self.generate()
        self.generate()
        assert len(self.client.get("/maps").json()) == 2

    def test_delete_map(self):
        map_id = self.generate().json()["id"]
        response = self.client.delete(f"/maps/{map_id}")
        assert response.status_code == 200
        assert response.json() == {"map_id": map_id, "deleted": True}
        assert self.client.get(f"/maps/{map_id}").status_code == 404
        assert self.client.delete(f"/maps/{map_id}").status_code == 404

    def test_store_evicts_oldest(self, monkeypatch):
        monkeypatch.setattr(settings, "max_stored_maps", 2)
        first = self.generate().json()["id"]
        second = self.generate().json()["id"]
        third = self.generate().json()["id"]

        ids = [m["id"] for m in self.client.get("/maps").json()]
        assert ids == [second, third]
        assert self.client.get(f"/maps/{first}").status_code == 404

    def test_config_overrides(self):
        response = self.generate(config={"landFrequency": 1.0, "water_frequency": 0.0})
        assert response.status_code == 200

    def test_unknown_map(self):
        assert self.client.get("/maps/does-not-exist").status_code == 404
        assert self.client.get("/maps/does-not-exist/statistics").status_code == 404

    def test_unknown_preset(self):
        assert self.generate(preset="atlantis").status_code == 404

    def test_invalid_dimensions(self):
        assert self.generate(width=0).status_code == 422
        assert self.generate(height=-4).status_code == 422

    def test_map_too_large(self):
        response = self.generate(width=settings.max_map_width + 1)
        assert response.status_code == 400

    def test_invalid_override(self):
        assert self.generate(config={"riverChance": 3}).status_code == 422
        assert self.generate(config={"notAField": 1}).status_code == 422
