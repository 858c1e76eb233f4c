"""Tests for drunkard's walk caves."""

import numpy as np
import pytest

from py_mapgen.core.drunkards_walk import DrunkardsWalkGenerator, DrunkardsWalkParams
from py_mapgen.core.lcg_prng import SeededRandom


class TestDrunkardsWalk:
    """Test walk carving and tiling."""

    def test_target_floor_cells(self):
        """Test the coverage target and its cap at the interior size."""
        walker = DrunkardsWalkGenerator(SeededRandom(1))
        assert walker.target_floor_cells(20, 20) == 60

        full = DrunkardsWalkGenerator(SeededRandom(1), DrunkardsWalkParams(coverage_percent=100))
        assert full.target_floor_cells(5, 5) == 9
        assert full.target_floor_cells(2, 2) == 0

    def test_carves_exact_target(self):
        """Test that the walk stops as soon as the target is reached."""
        grid, floor, target = DrunkardsWalkGenerator(SeededRandom(12345)).carve(20, 20)
        assert target == 60
        assert floor == target
        assert int((~grid).sum()) == floor

    def test_border_untouched(self):
        """Test that carving never reaches the grid border."""
        grid, _, _ = DrunkardsWalkGenerator(SeededRandom(7)).carve(30, 24)
        assert grid[0, :].all() and grid[-1, :].all()
        assert grid[:, 0].all() and grid[:, -1].all()

    def test_tiles_cover_floor(self):
        """Test that packed tiles cover exactly the carved cells."""
        result = DrunkardsWalkGenerator(SeededRandom(42)).generate(20, 15)
        assert result.grid.shape == (45, 60)

        covered = np.ones_like(result.grid)
        for tile in result.tiles:
            x0, y0 = round(tile.position.x * 3), round(tile.position.y * 3)
            w, h = round(tile.width * 3), round(tile.height * 3)
            assert covered[y0:y0 + h, x0:x0 + w].all()
            covered[y0:y0 + h, x0:x0 + w] = False
        np.testing.assert_array_equal(covered, result.grid)

    def test_tiles_in_map_units(self):
        """Test that tile coordinates stay within the map."""
        result = DrunkardsWalkGenerator(SeededRandom(42)).generate(20, 15)
        for tile in result.tiles:
            assert 0 <= tile.position.x and tile.position.x + tile.width <= 20
            assert 0 <= tile.position.y and tile.position.y + tile.height <= 15

    def test_invalid_resolution(self):
        """Test that a zero resolution is rejected."""
        with pytest.raises(ValueError):
            DrunkardsWalkGenerator(SeededRandom(1), DrunkardsWalkParams(resolution=0))

    def test_deterministic(self):
        """Test that the same seed gives the same walk."""
        a = DrunkardsWalkGenerator(SeededRandom(3)).generate(16, 16)
        b = DrunkardsWalkGenerator(SeededRandom(3)).generate(16, 16)
        np.testing.assert_array_equal(a.grid, b.grid)
        assert [t.to_dict() for t in a.tiles] == [t.to_dict() for t in b.tiles]
