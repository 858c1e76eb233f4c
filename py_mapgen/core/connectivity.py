"""
Connectivity analysis over occupancy grids.

Two questions are answered here:

- which rooms can already reach each other over floor cells
  (``find_groups``), and
- what is the cheapest 4-directional route between two cells when walls are
  expensive but passable (``shortest_path``).

Because walls are passable at a penalty, ``shortest_path`` always finds a
route between in-bounds cells. Group membership therefore uses floor-only
reachability, otherwise every room would trivially share one group.
"""

import heapq
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import structlog
from scipy import ndimage

from .map_data import Position, Room
from .occupancy import in_bounds

logger = structlog.get_logger()

FLOOR_COST = 1
WALL_COST = 5

# Up, right, down, left
DIRECTIONS = ((0, -1), (1, 0), (0, 1), (-1, 0))


def shortest_path(
    start: Tuple[float, float],
    goal: Tuple[float, float],
    grid: np.ndarray,
) -> List[Position]:
    """
    Weighted 4-directional shortest path (Dijkstra).

    Entering a floor cell costs 1, entering a wall cell costs 5. Equal-cost
    entries leave the heap in insertion order. The grid is read on every call
    so callers may carve accepted paths between searches.

    Args:
        start: Start cell (x, y)
        goal: Goal cell (x, y)
        grid: Occupancy grid, True where wall

    Returns:
        Cells from start to goal inclusive, or [] if either end is out of bounds
    """
    sx, sy = int(start[0]), int(start[1])
    gx, gy = int(goal[0]), int(goal[1])
    if not in_bounds(grid, sx, sy) or not in_bounds(grid, gx, gy):
        return []
    if (sx, sy) == (gx, gy):
        return [Position(sx, sy)]

    height, width = grid.shape
    best: Dict[Tuple[int, int], int] = {(sx, sy): 0}
    previous: Dict[Tuple[int, int], Tuple[int, int]] = {}
    counter = 0
    queue = [(0, counter, sx, sy)]
    found = False

    while queue:
        cost, _, x, y = heapq.heappop(queue)
        if (x, y) == (gx, gy):
            found = True
            break
        if cost > best[(x, y)]:
            continue  # stale entry

        for dx, dy in DIRECTIONS:
            nx, ny = x + dx, y + dy
            if nx < 0 or ny < 0 or nx >= width or ny >= height:
                continue
            new_cost = cost + (WALL_COST if grid[ny, nx] else FLOOR_COST)
            if new_cost < best.get((nx, ny), new_cost + 1):
                best[(nx, ny)] = new_cost
                previous[(nx, ny)] = (x, y)
                counter += 1
                heapq.heappush(queue, (new_cost, counter, nx, ny))

    if not found:
        return []

    path = [Position(gx, gy)]
    node = (gx, gy)
    while node != (sx, sy):
        node = previous[node]
        path.append(Position(node[0], node[1]))
    path.reverse()
    return path


def _room_label(room: Room, labels: np.ndarray) -> int:
    """Floor region a room sits in, 0 if its footprint has no floor."""
    cx, cy = room.grid_center
    if in_bounds(labels, cx, cy) and labels[cy, cx]:
        return int(labels[cy, cx])

    height, width = labels.shape
    x0, y0, x1, y1 = room.footprint()
    window = labels[max(y0, 0):min(y1, height), max(x0, 0):min(x1, width)]
    hits = window[window > 0]
    return int(hits[0]) if hits.size else 0


def find_groups(rooms: Sequence[Room], grid: np.ndarray) -> List[List[Room]]:
    """
    Partition rooms into groups mutually reachable over floor cells.

    Floor regions are labelled once with 4-connectivity; each room joins
    the group of the region under its center (or any floor cell of its
    footprint). Groups and members keep room order.

    Args:
        rooms: Rooms to group
        grid: Occupancy grid snapshot, True where wall

    Returns:
        List of groups covering every room exactly once
    """
    if not rooms:
        return []

    labels, _ = ndimage.label(~grid)

    groups: List[List[Room]] = []
    by_label: Dict[int, List[Room]] = {}
    for room in rooms:
        label = _room_label(room, labels)
        if label == 0:
            groups.append([room])
            continue
        group: Optional[List[Room]] = by_label.get(label)
        if group is None:
            group = []
            by_label[label] = group
            groups.append(group)
        group.append(room)

    logger.debug("Connectivity groups computed", rooms=len(rooms), groups=len(groups))
    return groups


def is_fully_connected(rooms: Sequence[Room], grid: np.ndarray) -> bool:
    """True when all rooms share one floor region."""
    return len(find_groups(rooms, grid)) <= 1
