"""
Occupancy grid rasterization.

Grids are ``np.ndarray`` of bool with shape ``(height, width)``;
``True`` is wall, ``False`` is floor.
"""

from typing import Iterable, Sequence, Tuple

import numpy as np

from .map_data import Corridor, CorridorKind, PathPoint, Room


def in_bounds(grid: np.ndarray, x: int, y: int) -> bool:
    """Check if a cell lies inside the grid."""
    height, width = grid.shape
    return 0 <= x < width and 0 <= y < height


def _to_cell(value: float) -> int:
    # round half up, matching how corridor points are drawn
    return int(np.floor(value + 0.5))


def build_occupancy_grid(
    rooms: Sequence[Room],
    corridors: Iterable[Corridor],
    width: int,
    height: int,
) -> np.ndarray:
    """
    Rasterize rooms and corridors into a fresh occupancy grid.

    Every room's bounding footprint becomes floor. Every corridor point
    becomes floor along with its left and right neighbours, so one-cell-wide
    vertical corridors still touch diagonal room corners. Organic corridors
    are sparse samples of a curve, so the cells between consecutive points
    are carved too. Inputs are not modified.

    Args:
        rooms: Rooms to carve
        corridors: Corridors to carve
        width: Grid width
        height: Grid height

    Returns:
        Boolean grid, True where wall
    """
    grid = np.ones((height, width), dtype=bool)

    for room in rooms:
        x0, y0, x1, y1 = room.footprint()
        x0, y0 = max(x0, 0), max(y0, 0)
        x1, y1 = min(x1, width), min(y1, height)
        if x0 < x1 and y0 < y1:
            grid[y0:y1, x0:x1] = False

    for corridor in corridors:
        if corridor.kind == CorridorKind.ORGANIC:
            carve_polyline(grid, corridor.points)
        else:
            carve_path(grid, corridor.points)

    return grid


def carve_path(grid: np.ndarray, points: Iterable[Tuple[float, float]]) -> None:
    """Carve path points and their lateral neighbours into grid (in place)."""
    for point in points:
        x, y = _to_cell(point[0]), _to_cell(point[1])
        for nx in (x - 1, x, x + 1):
            if in_bounds(grid, nx, y):
                grid[y, nx] = False


def carve_polyline(grid: np.ndarray, points: Sequence[Tuple[float, float]]) -> None:
    """
    Carve a 4-connected line through consecutive points (in place).

    Points outside the grid are clamped to its edge. Each carved cell also
    opens its left and right neighbours, as in carve_path.
    """
    height, width = grid.shape
    cells = [
        (min(max(_to_cell(p[0]), 0), width - 1), min(max(_to_cell(p[1]), 0), height - 1))
        for p in points
    ]
    if not cells:
        return

    x, y = cells[0]
    walked = [(x, y)]
    for tx, ty in cells[1:]:
        dx, dy = abs(tx - x), abs(ty - y)
        sx = 1 if tx > x else -1
        sy = 1 if ty > y else -1
        ix = iy = 0
        while ix < dx or iy < dy:
            # step along whichever axis the straight line crosses first
            if (1 + 2 * ix) * dy < (1 + 2 * iy) * dx:
                x += sx
                ix += 1
            else:
                y += sy
                iy += 1
            walked.append((x, y))
    carve_path(grid, walked)


def carve_radius(grid: np.ndarray, point: Tuple[float, float], radius: int) -> None:
    """Carve a filled disc of the given radius around point (in place)."""
    cx, cy = _to_cell(point[0]), _to_cell(point[1])
    height, width = grid.shape
    y0, y1 = max(cy - radius, 0), min(cy + radius + 1, height)
    x0, x1 = max(cx - radius, 0), min(cx + radius + 1, width)
    if x0 >= x1 or y0 >= y1:
        return
    ys, xs = np.ogrid[y0:y1, x0:x1]
    disc = (xs - cx) ** 2 + (ys - cy) ** 2 <= radius * radius
    grid[y0:y1, x0:x1][disc] = False


def path_to_points(path: Sequence[Tuple[float, float]], width: float = 1) -> list:
    """Convert a list of positions into corridor PathPoints."""
    return [PathPoint(p[0], p[1], width) for p in path]
