"""Tests for occupancy grid rasterization."""

import numpy as np
from scipy import ndimage

from py_mapgen.core.map_data import Corridor, CorridorKind, PathPoint, Position, Room
from py_mapgen.core.occupancy import (
    build_occupancy_grid, carve_path, carve_polyline, carve_radius, in_bounds,
)


def make_room(x, y, w, h, room_id="r"):
    return Room(id=room_id, type="chamber", position=Position(x, y), width=w, height=h)


class TestBuildOccupancyGrid:
    """Test grid construction from rooms and corridors."""

    def test_empty_input_is_all_wall(self):
        """Test that no rooms and no corridors give an all-wall grid."""
        grid = build_occupancy_grid([], [], 12, 8)
        assert grid.shape == (8, 12)
        assert grid.dtype == bool
        assert grid.all()

    def test_room_footprint_is_floor(self):
        """Test that a room's bounding box is carved."""
        grid = build_occupancy_grid([make_room(2, 3, 4, 2)], [], 10, 10)
        assert not grid[3:5, 2:6].any()
        assert (~grid).sum() == 8

    def test_corridor_point_widened_laterally(self):
        """Test that each corridor point carves x-1, x and x+1."""
        corridor = Corridor(id="c", points=[PathPoint(5, 5)])
        grid = build_occupancy_grid([], [corridor], 10, 10)
        assert not grid[5, 4:7].any()
        assert (~grid).sum() == 3

    def test_clipped_to_bounds(self):
        """Test that rooms and points off the map are clipped."""
        room = make_room(8, 8, 5, 5)
        corridor = Corridor(id="c", points=[PathPoint(0, 0), PathPoint(20, 20)])
        grid = build_occupancy_grid([room], [corridor], 10, 10)
        assert not grid[8:10, 8:10].any()
        assert not grid[0, 0] and not grid[0, 1]

    def test_fractional_tiles_cover_touched_cells(self):
        """Test that sub-cell tiles carve every cell they touch."""
        tile = make_room(1 / 3, 1 / 3, 2 / 3, 1 / 3)
        grid = build_occupancy_grid([tile], [], 4, 4)
        assert not grid[0, 0]
        assert (~grid).sum() == 1

    def test_inputs_not_mutated(self):
        """Test that rasterizing leaves rooms and corridors untouched."""
        room = make_room(1, 1, 3, 3)
        corridor = Corridor(id="c", points=[PathPoint(4, 2)])
        build_occupancy_grid([room], [corridor], 10, 10)
        assert room.position == Position(1, 1)
        assert corridor.points == [PathPoint(4, 2)]


class TestCarving:
    """Test in-place carving helpers."""

    def test_carve_radius_disc(self):
        """Test that radius 1 carves a plus shape."""
        grid = np.ones((11, 11), dtype=bool)
        carve_radius(grid, (5, 5), 1)
        assert (~grid).sum() == 5
        assert not grid[5, 5] and not grid[4, 5] and not grid[5, 6]
        assert grid[4, 4]

    def test_carve_radius_near_edge(self):
        """Test that discs are clipped at the map edge."""
        grid = np.ones((10, 10), dtype=bool)
        carve_radius(grid, (0, 0), 3)
        assert not grid[0, 0]
        assert not grid[3, 0]
        assert grid[3, 3]

    def test_carve_path(self):
        """Test carving a list of positions."""
        grid = np.ones((5, 5), dtype=bool)
        carve_path(grid, [Position(2, 0), Position(2, 1), Position(2, 2)])
        assert not grid[0:3, 1:4].any()
        assert grid[3:, :].all()

    def test_carve_polyline_fills_gaps(self):
        """Test that sparse points become one 4-connected run."""
        grid = np.ones((12, 12), dtype=bool)
        carve_polyline(grid, [(1.2, 1.0), (4.0, 3.6), (9.4, 10.1)])
        labels, count = ndimage.label(~grid)
        assert count == 1
        assert not grid[1, 1] and not grid[4, 4] and not grid[10, 9]

    def test_carve_polyline_clamps_to_grid(self):
        """Test that points past the edge are pulled inside."""
        grid = np.ones((5, 5), dtype=bool)
        carve_polyline(grid, [(-3, 2), (8, 2)])
        assert not grid[2, :].any()
        carve_polyline(grid, [])

    def test_organic_corridor_is_continuous(self):
        """Test that organic corridor samples three cells apart still join two rooms."""
        rooms = [
            Room(id="a", type="clearing", position=Position(1, 1), width=3, height=3),
            Room(id="b", type="clearing", position=Position(20, 14), width=3, height=3),
        ]
        points = [PathPoint(2.5 + 3 * i, 2.5 + 2 * i) for i in range(7)]
        corridor = Corridor(id="c", points=points, kind=CorridorKind.ORGANIC)
        grid = build_occupancy_grid(rooms, [corridor], 25, 20)
        labels, count = ndimage.label(~grid)
        assert count == 1

        sparse = Corridor(id="c", points=points, kind=CorridorKind.CORRIDOR)
        _, sparse_count = ndimage.label(~build_occupancy_grid(rooms, [sparse], 25, 20))
        assert sparse_count > 1

    def test_in_bounds(self):
        """Test bounds checks."""
        grid = np.ones((4, 6), dtype=bool)
        assert in_bounds(grid, 5, 3)
        assert not in_bounds(grid, 6, 0)
        assert not in_bounds(grid, 0, -1)
