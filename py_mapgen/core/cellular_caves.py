"""
Cellular automata cave generation.

Classic cave recipe:

1. Seed interior cells as wall with a roughness-adjusted fill probability
   (the border is always wall).
2. Smooth a fixed number of times: a cell becomes wall when at least
   ``wall_threshold`` of its 8 neighbours are walls. Cells outside the map
   count as walls.
3. Keep only the largest 4-connected floor region.

Neighbour counting uses ``scipy.signal.convolve2d`` and region extraction
uses ``scipy.ndimage.label``.
"""

import numpy as np
import structlog
from dataclasses import dataclass
from typing import Optional
from scipy import ndimage
from scipy.signal import convolve2d

from .lcg_prng import SeededRandom
from .map_data import Position

logger = structlog.get_logger()

NEIGHBOUR_KERNEL = np.array([[1, 1, 1], [1, 0, 1], [1, 1, 1]], dtype=np.int32)


@dataclass
class CellularCaveOptions:
    """Configuration for cellular automata caves."""

    width: int
    height: int
    fill_probability: float = 0.45
    roughness: float = 1.0  # multiplies fill_probability
    smooth_iterations: int = 4
    wall_threshold: int = 5

    @property
    def adjusted_fill(self) -> float:
        """Fill probability after roughness, clamped to [0.1, 0.8]."""
        return max(0.1, min(0.8, self.fill_probability * self.roughness))


@dataclass
class CaveResult:
    """Output of a cave run."""

    grid: np.ndarray  # True where wall
    main_chamber_center: Optional[Position]
    open_cells: int


def force_border(grid: np.ndarray) -> np.ndarray:
    grid[0, :] = True
    grid[-1, :] = True
    grid[:, 0] = True
    grid[:, -1] = True
    return grid


def smooth_step(grid: np.ndarray, wall_threshold: int) -> np.ndarray:
    """One automaton step; returns a new grid."""
    walls = convolve2d(
        grid.astype(np.int32), NEIGHBOUR_KERNEL, mode="same", boundary="fill", fillvalue=1
    )
    return force_border(walls >= wall_threshold)


def keep_largest_region(grid: np.ndarray) -> np.ndarray:
    """Wall over every floor region but the largest (first on ties)."""
    labels, count = ndimage.label(~grid)
    if count == 0:
        return np.ones_like(grid, dtype=bool)
    sizes = np.bincount(labels.ravel())[1:]
    largest = int(np.argmax(sizes)) + 1
    return labels != largest


def chamber_center(grid: np.ndarray) -> Optional[Position]:
    """Floor cell closest to the centroid of all floor cells."""
    ys, xs = np.nonzero(~grid)
    if xs.size == 0:
        return None
    cx, cy = xs.mean(), ys.mean()
    nearest = int(np.argmin((xs - cx) ** 2 + (ys - cy) ** 2))
    return Position(int(xs[nearest]), int(ys[nearest]))


class CellularCaveGenerator:
    """
    Generates a single connected cave with cellular automata.
    """

    def __init__(self, prng: SeededRandom, options: CellularCaveOptions):
        if options.width < 1 or options.height < 1:
            raise ValueError("Cave dimensions must be positive")
        self.prng = prng
        self.options = options

    def seed_grid(self) -> np.ndarray:
        """Random initial grid, one draw per interior cell in row-major order."""
        width, height = self.options.width, self.options.height
        fill = self.options.adjusted_fill
        grid = np.ones((height, width), dtype=bool)
        for y in range(1, height - 1):
            for x in range(1, width - 1):
                grid[y, x] = self.prng.random() < fill
        return grid

    def generate(self) -> CaveResult:
        """Run seeding, smoothing and region extraction."""
        grid = self.seed_grid()
        for _ in range(self.options.smooth_iterations):
            grid = smooth_step(grid, self.options.wall_threshold)
        grid = keep_largest_region(grid)

        open_cells = int((~grid).sum())
        center = chamber_center(grid)
        if open_cells == 0:
            logger.warning("Cave collapsed to solid rock", **_summary(self.options))
        else:
            logger.info("Cave generated", open_cells=open_cells, **_summary(self.options))
        return CaveResult(grid=grid, main_chamber_center=center, open_cells=open_cells)


def _summary(options: CellularCaveOptions) -> dict:
    return {
        "width": options.width,
        "height": options.height,
        "fill": round(options.adjusted_fill, 3),
        "iterations": options.smooth_iterations,
        "threshold": options.wall_threshold,
    }
