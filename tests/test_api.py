"""
Tests for the map generation API.
"""

from unittest.mock import patch

from fastapi.testclient import TestClient

from py_mapgen.api.main import app
from py_mapgen.core.errors import InvalidOptionsError


class TestMapAPI:
    """Test the HTTP endpoints."""

    def setup_method(self):
        """Set up test client."""
        self.client = TestClient(app)

    def test_root(self):
        """Test the root endpoint."""
        response = self.client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_health(self):
        """Test the health check."""
        response = self.client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_terrains(self):
        """Test the preset listing."""
        response = self.client.get("/terrains")
        assert response.status_code == 200
        data = response.json()
        assert data["forest"]["default_algorithm"] == "bsp"
        assert "wizard_tower" in data["house"]["subtypes"]

    def test_generate(self):
        """Test a basic dungeon request."""
        response = self.client.post(
            "/maps/generate", json={"terrain": "dungeon", "seed": 12345, "width": 60, "height": 60}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["seed"] == 12345
        assert data["algorithm"] == "bsp"
        assert data["rooms"]
        assert data["metadata"]["connected_groups"] == 1
        assert data["grid"] is None

        # Check room structure
        room = data["rooms"][0]
        for field in ["id", "type", "shape", "position", "width", "height"]:
            assert field in room

    def test_generate_deterministic(self):
        """Test that repeated requests return the same layout."""
        payload = {"terrain": "house", "subtype": "inn", "seed": 77}
        first = self.client.post("/maps/generate", json=payload).json()
        second = self.client.post("/maps/generate", json=payload).json()
        assert first["rooms"] == second["rooms"]
        assert first["corridors"] == second["corridors"]
        assert first["entrance_exit"] == second["entrance_exit"]

    def test_include_grid(self):
        """Test that the occupancy grid is returned on request."""
        response = self.client.post(
            "/maps/generate",
            json={"terrain": "cave", "seed": 3, "width": 30, "height": 20, "include_grid": True},
        )
        assert response.status_code == 200
        grid = response.json()["grid"]
        assert len(grid) == 20 and len(grid[0]) == 30
        assert set(v for row in grid for v in row) <= {0, 1}

    def test_too_many_rooms(self):
        """Test that an impossible room count is a 422."""
        response = self.client.post(
            "/maps/generate", json={"terrain": "dungeon", "width": 20, "number_of_rooms": 50, "seed": 1}
        )
        assert response.status_code == 422
        assert "50" in response.json()["detail"]

    def test_invalid_terrain(self):
        """Test request validation."""
        response = self.client.post("/maps/generate", json={"terrain": "swamp"})
        assert response.status_code == 422

    @patch("py_mapgen.api.main.generate_map")
    def test_generation_error_mapped(self, mock_generate):
        """Test that generation errors become 422 responses."""
        mock_generate.side_effect = InvalidOptionsError("bad story")
        response = self.client.post("/maps/generate", json={"terrain": "house"})
        assert response.status_code == 422
        assert response.json()["detail"] == "bad story"
