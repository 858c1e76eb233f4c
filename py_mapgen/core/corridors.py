"""
Corridor connection between rooms.

Connection runs in two passes:

1. A nearest-neighbour spanning pass grows a connected set from the first
   room, always joining the closest (Manhattan distance between centers)
   connected/unconnected pair with an L-shaped corridor, or a winding
   Bezier path for natural terrain.
2. A gap-filling pass rasterizes the result, groups rooms by floor
   reachability and joins each pair of neighbouring groups with the
   shortest weighted path between their room centers. Accepted paths are
   carved into the shared grid before the next pair is searched.
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np
import structlog

from .connectivity import find_groups, shortest_path
from .lcg_prng import SeededRandom
from .map_data import Corridor, CorridorKind, PathPoint, Position, Room
from .occupancy import build_occupancy_grid, carve_path, path_to_points
from .organic_shapes import bezier_path

logger = structlog.get_logger()


def manhattan(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def _line(x0: int, y0: int, x1: int, y1: int) -> List[Tuple[int, int]]:
    """Cells of an axis-aligned segment, both ends included."""
    if y0 == y1:
        step = 1 if x1 >= x0 else -1
        return [(x, y0) for x in range(x0, x1 + step, step)]
    step = 1 if y1 >= y0 else -1
    return [(x0, y) for y in range(y0, y1 + step, step)]


class CorridorConnector:
    """
    Joins rooms so that every room is reachable from every other.
    """

    def __init__(self, prng: SeededRandom, corridor_width: int = 1, organic_paths: bool = False):
        """
        Initialize the connector.

        Args:
            prng: Random source shared with the rest of the request
            corridor_width: Corridor width in cells (parallel offset lines)
            organic_paths: Use winding Bezier paths instead of L-shapes
        """
        self.prng = prng
        self.corridor_width = max(1, int(corridor_width))
        self.organic_paths = organic_paths
        self._next_id = 0

    def connect(self, rooms: Sequence[Room], width: int, height: int) -> Tuple[List[Corridor], np.ndarray]:
        """
        Run both passes.

        Args:
            rooms: Rooms to connect
            width: Map width
            height: Map height

        Returns:
            Tuple of (corridors, occupancy grid with everything carved)
        """
        corridors = self.spanning_corridors(rooms)
        grid = build_occupancy_grid(rooms, corridors, width, height)
        corridors.extend(self.fill_gaps(rooms, grid))
        return corridors, grid

    def spanning_corridors(self, rooms: Sequence[Room]) -> List[Corridor]:
        """Nearest-neighbour spanning tree over room centers."""
        corridors: List[Corridor] = []
        if len(rooms) < 2:
            return corridors

        connected = [rooms[0]]
        remaining = list(rooms[1:])

        while remaining:
            best: Optional[Tuple[Room, Room]] = None
            best_distance = 0.0
            for source in connected:
                for target in remaining:
                    distance = manhattan(source.center, target.center)
                    if best is None or distance < best_distance:
                        best = (source, target)
                        best_distance = distance

            if best is None:
                logger.warning("Spanning pass found no candidate pair", remaining=len(remaining))
                break

            source, target = best
            corridors.append(self.corridor_between(source, target))
            connected.append(target)
            remaining.remove(target)

        return corridors

    def corridor_between(self, source: Room, target: Room) -> Corridor:
        """Corridor from one room center to another."""
        if self.organic_paths:
            points = bezier_path(self.prng, source.center, target.center, self.corridor_width)
            kind = CorridorKind.ORGANIC
        else:
            points = self.l_shaped_points(source.grid_center, target.grid_center)
            kind = CorridorKind.CORRIDOR
        return Corridor(
            id=self._new_id(),
            points=points,
            width=self.corridor_width,
            kind=kind,
            from_room=source.id,
            to_room=target.id,
        )

    def l_shaped_points(self, start: Tuple[int, int], end: Tuple[int, int]) -> List[PathPoint]:
        """
        Points of an L-shaped corridor.

        One draw decides the leg order. Each extra unit of width adds a copy
        of the whole L shifted by one cell perpendicular to each leg.
        """
        sx, sy = start
        ex, ey = end
        horizontal_first = self.prng.random() > 0.5
        if horizontal_first:
            legs = [((sx, sy), (ex, sy)), ((ex, sy), (ex, ey))]
        else:
            legs = [((sx, sy), (sx, ey)), ((sx, ey), (ex, ey))]

        points: List[PathPoint] = []
        for offset in range(self.corridor_width):
            for (x0, y0), (x1, y1) in legs:
                horizontal = y0 == y1
                for x, y in _line(x0, y0, x1, y1):
                    px, py = (x, y + offset) if horizontal else (x + offset, y)
                    if points and (points[-1].x, points[-1].y) == (px, py):
                        continue
                    points.append(PathPoint(px, py, self.corridor_width))
        return points

    def fill_gaps(self, rooms: Sequence[Room], grid: np.ndarray) -> List[Corridor]:
        """
        Join disconnected room groups, carving each new path into grid.

        Args:
            rooms: All rooms
            grid: Occupancy grid of rooms and corridors so far (mutated)

        Returns:
            Connector corridors added
        """
        groups = find_groups(rooms, grid)
        if len(groups) <= 1:
            return []

        logger.info("Filling connectivity gaps", groups=len(groups))
        connectors = []
        for group_a, group_b in zip(groups, groups[1:]):
            best_path: List[Position] = []
            best_pair = None
            for room_a in group_a:
                for room_b in group_b:
                    path = shortest_path(room_a.grid_center, room_b.grid_center, grid)
                    if path and (not best_path or len(path) < len(best_path)):
                        best_path = path
                        best_pair = (room_a, room_b)

            if not best_path:
                continue

            carve_path(grid, best_path)
            connectors.append(Corridor(
                id=self._new_id(),
                points=path_to_points(best_path, self.corridor_width),
                width=self.corridor_width,
                kind=CorridorKind.CONNECTOR,
                from_room=best_pair[0].id,
                to_room=best_pair[1].id,
            ))

        remaining = find_groups(rooms, grid)
        if len(remaining) > 1:
            logger.warning("Rooms still disconnected after gap filling", groups=len(remaining))
        return connectors

    def _new_id(self) -> str:
        corridor_id = f"corridor-{self._next_id}"
        self._next_id += 1
        return corridor_id
