"""
Entrance and exit placement.

Each terrain family has a placement policy:

- cave, dungeon, house: one entrance at the midpoint of a random map edge,
  with a path to the largest room,
- forest: a through-map trail from the left edge to the right edge,
- town: no entrance (a degenerate record at the origin).

Paths come from the weighted shortest-path search and are carved into the
occupancy grid; cells near the map edge are widened into a clearing.
"""

import math
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np
import structlog

from ..config.terrain_presets import TerrainType
from .connectivity import shortest_path
from .errors import EdgePlacementError
from .lcg_prng import SeededRandom
from .map_data import EntranceExit, PathPoint, Position, Room
from .occupancy import carve_path, carve_radius, in_bounds

logger = structlog.get_logger()

WIDEN_RADIUS = 3
WIDEN_CELLS = 10

# Edge order for the random pick
LEFT, TOP, RIGHT, BOTTOM = range(4)


def edge_midpoint(edge: int, width: int, height: int) -> Position:
    """Midpoint cell of a map edge."""
    if edge == LEFT:
        return Position(0, height // 2)
    if edge == TOP:
        return Position(width // 2, 0)
    if edge == RIGHT:
        return Position(width - 1, height // 2)
    return Position(width // 2, height - 1)


class EntranceExitPlacer:
    """
    Places entrances and exits according to terrain policy.
    """

    def __init__(self, prng: SeededRandom):
        self.prng = prng
        self._policies: Dict[TerrainType, Callable[[Sequence[Room], np.ndarray], EntranceExit]] = {
            TerrainType.CAVE: self._single_entrance,
            TerrainType.DUNGEON: self._single_entrance,
            TerrainType.HOUSE: self._single_entrance,
            TerrainType.FOREST: self._through_path,
            TerrainType.TOWN: self._no_entrance,
        }

    def place(self, terrain: TerrainType, rooms: Sequence[Room], grid: np.ndarray) -> Optional[EntranceExit]:
        """
        Place the entrance (and exit) for a map.

        Args:
            terrain: Terrain family selecting the policy
            rooms: Generated rooms
            grid: Occupancy grid; paths are carved into it

        Returns:
            EntranceExit record, or None for terrains without a policy
        """
        policy = self._policies.get(TerrainType(terrain))
        if policy is None:
            return None
        record = policy(rooms, grid)
        logger.debug(
            "Entrance placed",
            terrain=TerrainType(terrain).value,
            entrance=tuple(record.entrance),
            exit=tuple(record.exit) if record.exit else None,
        )
        return record

    def _checked(self, point: Position, grid: np.ndarray) -> Position:
        if not in_bounds(grid, int(point.x), int(point.y)):
            height, width = grid.shape
            raise EdgePlacementError(point.x, point.y, width, height)
        return point

    def _single_entrance(self, rooms: Sequence[Room], grid: np.ndarray) -> EntranceExit:
        height, width = grid.shape
        edge = math.floor(self.prng.random() * 4)
        entrance = self._checked(edge_midpoint(edge, width, height), grid)

        main_room = max(rooms, key=lambda room: room.area) if rooms else None
        target = main_room.grid_center if main_room else (width // 2, height // 2)

        path = shortest_path(entrance, target, grid)
        carve_path(grid, path)
        return EntranceExit(
            entrance=entrance,
            entrance_path=self._widen(path, grid),
            main_room=main_room.id if main_room else None,
        )

    def _through_path(self, rooms: Sequence[Room], grid: np.ndarray) -> EntranceExit:
        height, width = grid.shape
        entrance = self._checked(edge_midpoint(LEFT, width, height), grid)
        exit_point = self._checked(edge_midpoint(RIGHT, width, height), grid)

        path = shortest_path(entrance, exit_point, grid)
        carve_path(grid, path)

        half = (len(path) + 1) // 2
        entrance_half = path[:half]
        # Exit path runs from the exit back toward the middle
        exit_half = list(reversed(path[half:]))

        return EntranceExit(
            entrance=entrance,
            entrance_path=self._widen(entrance_half, grid),
            exit=exit_point,
            exit_path=self._widen(exit_half, grid),
        )

    def _no_entrance(self, rooms: Sequence[Room], grid: np.ndarray) -> EntranceExit:
        return EntranceExit(entrance=Position(0, 0), entrance_path=[])

    def _widen(self, path: List[Tuple[int, int]], grid: np.ndarray) -> List[PathPoint]:
        """Carve a clearing around the first path cells and tag their width."""
        points = []
        for index, (x, y) in enumerate(path):
            if index < WIDEN_CELLS:
                carve_radius(grid, (x, y), WIDEN_RADIUS)
                points.append(PathPoint(x, y, 2 * WIDEN_RADIUS + 1))
            else:
                points.append(PathPoint(x, y, 1))
        return points
