"""Greedy rectangle packing of open cells into tile rooms."""

from typing import List

import numpy as np
import structlog

from .map_data import Position, Room, RoomShape, RoomShapeType

logger = structlog.get_logger()


def pack_rectangles(grid: np.ndarray, resolution: int = 1, room_type: str = "cave_tile") -> List[Room]:
    """
    Cover every floor cell with non-overlapping rectangles.

    Cells are scanned row-major. From each unprocessed floor cell the
    rectangle first extends right along the row, then grows downward while
    the next row still has floor from the left edge; the width shrinks to
    the shortest row. Coordinates are divided by ``resolution`` so tiles
    from an upscaled grid land in map units.

    Args:
        grid: Occupancy grid, True where wall
        resolution: Grid cells per map cell
        room_type: Type tag for the emitted tiles

    Returns:
        Tile rooms in scan order
    """
    height, width = grid.shape
    processed = np.zeros_like(grid, dtype=bool)
    scale = 1 / resolution
    tiles = []

    for y in range(height):
        for x in range(width):
            if grid[y, x] or processed[y, x]:
                continue

            run = 0
            while x + run < width and not grid[y, x + run] and not processed[y, x + run]:
                run += 1

            rows = 1
            while y + rows < height:
                row_run = 0
                while (row_run < run
                       and not grid[y + rows, x + row_run]
                       and not processed[y + rows, x + row_run]):
                    row_run += 1
                if row_run == 0:
                    break
                run = min(run, row_run)
                rows += 1

            processed[y:y + rows, x:x + run] = True
            tiles.append(Room(
                id=f"tile-{len(tiles)}",
                type=room_type,
                position=Position(x * scale, y * scale),
                width=run * scale,
                height=rows * scale,
                shape=RoomShape(type=RoomShapeType.PACKED_TILE),
            ))

    logger.debug("Packed floor cells into tiles", tiles=len(tiles), resolution=resolution)
    return tiles
