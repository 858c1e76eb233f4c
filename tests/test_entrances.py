"""Tests for entrance and exit placement."""

import numpy as np
import pytest

from py_mapgen.config.terrain_presets import TerrainType
from py_mapgen.core.entrances import (
    BOTTOM, LEFT, RIGHT, TOP, WIDEN_CELLS, EntranceExitPlacer, edge_midpoint,
)
from py_mapgen.core.errors import EdgePlacementError
from py_mapgen.core.lcg_prng import SeededRandom
from py_mapgen.core.map_data import Position, Room
from py_mapgen.core.occupancy import build_occupancy_grid


def make_room(x, y, w, h, room_id):
    return Room(id=room_id, type="chamber", position=Position(x, y), width=w, height=h)


class TestEdgeMidpoint:
    """Test edge midpoint coordinates."""

    def test_edges(self):
        """Test each edge lands on the map border."""
        assert edge_midpoint(LEFT, 100, 80) == (0, 40)
        assert edge_midpoint(TOP, 100, 80) == (50, 0)
        assert edge_midpoint(RIGHT, 100, 80) == (99, 40)
        assert edge_midpoint(BOTTOM, 100, 80) == (50, 79)


class TestEntranceExitPlacer:
    """Test the per-terrain policies."""

    @pytest.fixture
    def rooms(self):
        """A small room and a large main room."""
        return [make_room(5, 5, 4, 4, "small"), make_room(25, 20, 12, 10, "main")]

    @pytest.fixture
    def grid(self, rooms):
        return build_occupancy_grid(rooms, [], 50, 40)

    @pytest.mark.parametrize("terrain", [TerrainType.HOUSE, TerrainType.DUNGEON, TerrainType.CAVE])
    def test_single_entrance_policy(self, terrain, rooms, grid):
        """Test an edge entrance with a path to the largest room."""
        record = EntranceExitPlacer(SeededRandom(8)).place(terrain, rooms, grid)

        x, y = record.entrance
        assert x in (0, 49) or y in (0, 39)
        assert record.exit is None
        assert record.main_room == "main"
        assert (record.entrance_path[0].x, record.entrance_path[0].y) == (x, y)
        assert (record.entrance_path[-1].x, record.entrance_path[-1].y) == rooms[1].grid_center

    def test_entrance_widened_and_carved(self, rooms, grid):
        """Test that the first path cells are widened to radius 3."""
        record = EntranceExitPlacer(SeededRandom(8)).place(TerrainType.DUNGEON, rooms, grid)
        widths = [p.width for p in record.entrance_path]
        assert widths[:WIDEN_CELLS] == [7] * min(WIDEN_CELLS, len(widths))
        assert all(w == 1 for w in widths[WIDEN_CELLS:])
        for p in record.entrance_path:
            assert not grid[p.y, p.x]

    def test_forest_through_path(self):
        """Test the left-to-right trail for forests."""
        grid = np.ones((100, 100), dtype=bool)
        record = EntranceExitPlacer(SeededRandom(99999)).place(TerrainType.FOREST, [], grid)

        assert record.entrance == (0, 50)
        assert record.exit == (99, 50)
        assert record.entrance_path and record.exit_path
        assert (record.entrance_path[0].x, record.entrance_path[0].y) == (0, 50)
        assert (record.exit_path[0].x, record.exit_path[0].y) == (99, 50)
        assert len(record.entrance_path) + len(record.exit_path) == 100
        assert not grid[50, 0] and not grid[50, 99]
        # both map-edge ends are widened
        assert not grid[47, 0] and not grid[53, 99]

    def test_town_has_degenerate_record(self, rooms, grid):
        """Test that towns get no real entrance."""
        before = grid.copy()
        record = EntranceExitPlacer(SeededRandom(1)).place(TerrainType.TOWN, rooms, grid)
        assert record.entrance == (0, 0)
        assert record.entrance_path == []
        assert record.exit is None
        np.testing.assert_array_equal(grid, before)

    def test_no_rooms_targets_map_center(self):
        """Test that an empty map routes to its center."""
        grid = np.ones((20, 30), dtype=bool)
        record = EntranceExitPlacer(SeededRandom(4)).place(TerrainType.DUNGEON, [], grid)
        assert record.main_room is None
        assert (record.entrance_path[-1].x, record.entrance_path[-1].y) == (15, 10)

    def test_edge_outside_grid_rejected(self):
        """Test that impossible edge coordinates raise."""
        placer = EntranceExitPlacer(SeededRandom(1))
        with pytest.raises(EdgePlacementError):
            placer.place(TerrainType.FOREST, [], np.ones((5, 0), dtype=bool))

    def test_deterministic(self, rooms):
        """Test that placement is reproducible."""
        a = EntranceExitPlacer(SeededRandom(21)).place(
            TerrainType.HOUSE, rooms, build_occupancy_grid(rooms, [], 50, 40))
        b = EntranceExitPlacer(SeededRandom(21)).place(
            TerrainType.HOUSE, rooms, build_occupancy_grid(rooms, [], 50, 40))
        assert a.to_dict() == b.to_dict()
