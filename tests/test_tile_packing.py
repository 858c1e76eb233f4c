"""Tests for rectangle packing."""

import numpy as np

from py_mapgen.core.map_data import RoomShapeType
from py_mapgen.core.tile_packing import pack_rectangles


def boxes(tiles):
    return [(t.position.x, t.position.y, t.width, t.height) for t in tiles]


class TestPackRectangles:
    """Test greedy row-major packing."""

    def test_open_grid_is_one_tile(self):
        """Test that an all-floor grid packs into a single rectangle."""
        tiles = pack_rectangles(np.zeros((4, 6), dtype=bool))
        assert boxes(tiles) == [(0, 0, 6, 4)]
        assert tiles[0].id == "tile-0"
        assert tiles[0].shape.type == RoomShapeType.PACKED_TILE

    def test_l_shape(self):
        """Test that the width shrinks to the shortest row."""
        grid = np.ones((3, 3), dtype=bool)
        grid[0, :] = False
        grid[:, 0] = False
        tiles = pack_rectangles(grid)
        assert boxes(tiles) == [(0, 0, 1, 3), (1, 0, 2, 1)]

    def test_resolution_scales_to_map_units(self):
        """Test that coordinates are divided by the resolution."""
        tiles = pack_rectangles(np.zeros((4, 4), dtype=bool), resolution=2)
        assert boxes(tiles) == [(0, 0, 2, 2)]

    def test_all_wall(self):
        """Test that solid rock yields no tiles."""
        assert pack_rectangles(np.ones((3, 3), dtype=bool)) == []

    def test_room_type(self):
        """Test the type tag on emitted tiles."""
        tiles = pack_rectangles(np.zeros((2, 2), dtype=bool), room_type="cavern")
        assert tiles[0].type == "cavern"
