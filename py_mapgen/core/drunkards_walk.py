"""
Drunkard's walk cave generation.

A walker starts in the middle of an upscaled grid and carves floor as it
wanders, keeping its heading for a few steps before turning. Most steps
carve a single cell, giving narrow winding passages; occasionally a 3x3
patch opens a small chamber. The carved grid is then packed into
rectangular tiles in map units.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np
import structlog

from .lcg_prng import SeededRandom
from .map_data import Room
from .tile_packing import pack_rectangles

logger = structlog.get_logger()

# Up, right, down, left
DIRECTIONS = ((0, -1), (1, 0), (0, 1), (-1, 0))
MAX_STEPS_PER_CELL = 20


@dataclass
class DrunkardsWalkParams:
    """Walk tuning."""

    coverage_percent: float = 15.0
    resolution: int = 3  # grid cells per map cell
    direction_change_chance: float = 0.15
    wider_area_chance: float = 0.02
    min_steps_before_change: int = 3
    max_steps_before_change: int = 8


@dataclass
class WalkResult:
    grid: np.ndarray  # upscaled, True where wall
    floor_cells: int
    target_floor_cells: int
    tiles: List[Room] = field(default_factory=list)


class DrunkardsWalkGenerator:
    """
    Carves caves with a persistent-direction random walk.
    """

    def __init__(self, prng: SeededRandom, params: Optional[DrunkardsWalkParams] = None):
        self.prng = prng
        self.params = params or DrunkardsWalkParams()
        if self.params.resolution < 1:
            raise ValueError("resolution must be at least 1")

    def target_floor_cells(self, grid_width: int, grid_height: int) -> int:
        """Floor cells to carve, capped at the interior size."""
        target = math.floor(grid_width * grid_height * self.params.coverage_percent / 100)
        interior = max(0, grid_width - 2) * max(0, grid_height - 2)
        return min(target, interior)

    def carve(self, grid_width: int, grid_height: int) -> Tuple[np.ndarray, int, int]:
        """
        Run the walk on a grid of the given size.

        Returns:
            Tuple of (grid, carved floor cells, target floor cells)
        """
        p = self.params
        grid = np.ones((grid_height, grid_width), dtype=bool)
        target = self.target_floor_cells(grid_width, grid_height)

        x, y = grid_width // 2, grid_height // 2
        direction = math.floor(self.prng.random() * len(DIRECTIONS))
        steps_in_direction = 0
        steps_before_change = p.min_steps_before_change + math.floor(
            self.prng.random() * (p.max_steps_before_change - p.min_steps_before_change)
        )

        floor = 0
        # Stops walks that cycle with the PRNG period
        step_budget = MAX_STEPS_PER_CELL * grid_width * grid_height
        while floor < target:
            step_budget -= 1
            if step_budget < 0:
                logger.warning("Walk step budget exhausted", floor_cells=floor, target=target)
                break
            # radius 2 opens a 3x3 patch, radius 1 a single cell
            radius = 2 if self.prng.random() < p.wider_area_chance else 1
            for dy in range(1 - radius, radius):
                for dx in range(1 - radius, radius):
                    nx, ny = x + dx, y + dy
                    if 1 <= nx < grid_width - 1 and 1 <= ny < grid_height - 1 and grid[ny, nx]:
                        grid[ny, nx] = False
                        floor += 1
                        if floor >= target:
                            return grid, floor, target

            steps_in_direction += 1
            if (steps_in_direction >= steps_before_change
                    or self.prng.random() < p.direction_change_chance):
                direction = math.floor(self.prng.random() * len(DIRECTIONS))
                steps_in_direction = 0

            dx, dy = DIRECTIONS[direction]
            x = max(1, min(grid_width - 2, x + dx))
            y = max(1, min(grid_height - 2, y + dy))

        return grid, floor, target

    def generate(self, width: int, height: int) -> WalkResult:
        """
        Carve a cave for a width x height map and pack it into tiles.

        Args:
            width: Map width in map cells
            height: Map height in map cells

        Returns:
            WalkResult with the upscaled grid and tiles in map units
        """
        res = self.params.resolution
        grid, floor, target = self.carve(width * res, height * res)
        tiles = pack_rectangles(grid, res)
        logger.info(
            "Drunkard's walk complete",
            floor_cells=floor,
            target=target,
            tiles=len(tiles),
            resolution=res,
        )
        return WalkResult(grid=grid, floor_cells=floor, target_floor_cells=target, tiles=tiles)
