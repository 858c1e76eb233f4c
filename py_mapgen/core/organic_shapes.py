"""
Organic outlines and curved paths for natural terrain.

Forest clearings and cave chambers get jagged polygon outlines instead of
plain rectangles, and their connecting paths follow a wobbling quadratic
Bezier curve. Curve points keep sub-cell precision.
"""

import math
from typing import List, Tuple

from .lcg_prng import SeededRandom
from .map_data import PathPoint, Position


def organic_outline(
    prng: SeededRandom,
    base_radius: float,
    organic_factor: float,
) -> List[Position]:
    """
    Jagged polygon around the origin.

    Uses 8-15 points evenly spaced by angle; each point's radius is scaled by
    ``1 + (random - 0.5) * organic_factor * 0.5``.

    Args:
        prng: Random source
        base_radius: Radius before variation
        organic_factor: 0.0 = circle, 1.0 = very irregular

    Returns:
        Outline points as offsets from the shape center
    """
    num_points = 8 + math.floor(prng.random() * 8)
    points = []
    for i in range(num_points):
        angle = (i / num_points) * 2 * math.pi
        radius = base_radius * (1 + (prng.random() - 0.5) * organic_factor * 0.5)
        points.append(Position(round(math.cos(angle) * radius), round(math.sin(angle) * radius)))
    return points


def bezier_path(
    prng: SeededRandom,
    start: Tuple[float, float],
    end: Tuple[float, float],
    width: int,
) -> List[PathPoint]:
    """
    Winding path between two points.

    A single control point is placed near the midpoint, offset by up to 15%
    of the distance on each axis. Every sample is nudged by up to one cell
    and 30% of samples widen or narrow the path by one.

    Args:
        prng: Random source
        start: Path start (x, y)
        end: Path end (x, y)
        width: Base path width

    Returns:
        Path points from start to end
    """
    sx, sy = start
    ex, ey = end
    distance = math.hypot(ex - sx, ey - sy)
    segments = max(8, math.floor(distance / 3))

    mid_x = (sx + ex) / 2 + (prng.random() - 0.5) * distance * 0.3
    mid_y = (sy + ey) / 2 + (prng.random() - 0.5) * distance * 0.3

    points = []
    for i in range(segments + 1):
        t = i / segments
        bx = (1 - t) ** 2 * sx + 2 * (1 - t) * t * mid_x + t ** 2 * ex
        by = (1 - t) ** 2 * sy + 2 * (1 - t) * t * mid_y + t ** 2 * ey

        # Endpoints stay pinned to the rooms they join
        if 0 < i < segments:
            bx += prng.next_float(-1, 1)
            by += prng.next_float(-1, 1)

        variation = 0
        if prng.random() < 0.3:
            variation = 1 if prng.random() < 0.5 else -1

        points.append(PathPoint(round(bx, 2), round(by, 2), max(1, width + variation)))
    return points
