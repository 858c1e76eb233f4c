"""
Map generation entry point.

``generate_map`` resolves terrain presets, picks a layout algorithm and runs
one of three pipelines with a single seeded PRNG:

- ``bsp``: partition rooms, connect them with corridors, place the entrance,
- ``cellular_automata``: grow a cave, pack it into tiles, place the entrance,
- ``drunkards_walk``: walk a cave, pack it into tiles, place the entrance.

All pipelines return the same ``GeneratedMap`` structure.
"""

import time
from dataclasses import dataclass, asdict
from typing import List, Optional, Tuple

import numpy as np
import structlog

from ..config.terrain_presets import (
    DEFAULT_ALGORITHMS,
    GenerationAlgorithm,
    StoryConfig,
    SubtypeConfig,
    TerrainType,
    get_subtype_config,
    parse_terrain,
    validate_subtype,
)
from ..utils.random import resolve_seed
from .bsp_rooms import BSPRoomGenerator, BSPTree, RoomLayout, MIN_ROOM_SIZE, room_capacity, root_container
from .cellular_caves import CellularCaveGenerator, CellularCaveOptions
from .connectivity import find_groups
from .corridors import CorridorConnector
from .drunkards_walk import DrunkardsWalkGenerator, DrunkardsWalkParams
from .entrances import EntranceExitPlacer
from .errors import InvalidOptionsError, RoomCapacityError
from .lcg_prng import SeededRandom
from .map_data import Corridor, EntranceExit, GeneratedMap, Room
from .occupancy import build_occupancy_grid
from .tile_packing import pack_rectangles

logger = structlog.get_logger()

DEFAULT_WIDTH = 100
DEFAULT_HEIGHT = 100
DEFAULT_ROOM_COUNT = 8
DEFAULT_ROOM_SPACING = 2


@dataclass
class MapGenerationOptions:
    """Parameters for one generation request."""

    terrain: str = TerrainType.DUNGEON.value
    width: Optional[int] = None  # None: story preset size, else DEFAULT_WIDTH
    height: Optional[int] = None
    seed: Optional[int] = None  # None: time based
    subtype: Optional[str] = None
    story: Optional[str] = None  # house stories only
    algorithm: Optional[str] = None  # None: preset or terrain default

    # Rooms
    number_of_rooms: Optional[int] = None
    min_room_size: Optional[int] = None
    max_room_size: Optional[int] = None
    organic_factor: float = 0.0  # 0.0 = geometric, 1.0 = very organic
    corridor_width: Optional[int] = None
    room_spacing: Optional[int] = None
    organic_paths: Optional[bool] = None  # None: on for forest and cave

    # Cellular automata
    fill_probability: float = 0.45
    roughness: float = 1.0
    smooth_iterations: int = 4
    wall_threshold: int = 5

    # Drunkard's walk
    coverage_percent: float = 15.0
    resolution: int = 3
    direction_change_chance: float = 0.15
    wider_area_chance: float = 0.02
    min_steps_before_change: int = 3
    max_steps_before_change: int = 8

    def validate(self) -> None:
        """Raise InvalidOptionsError for malformed options."""
        for name in ("width", "height", "number_of_rooms", "corridor_width"):
            value = getattr(self, name)
            if value is not None and value < 1:
                raise InvalidOptionsError(f"{name} must be at least 1, got {value}")
        if self.room_spacing is not None and self.room_spacing < 0:
            raise InvalidOptionsError("room_spacing must not be negative")
        if (self.min_room_size is not None and self.max_room_size is not None
                and self.min_room_size > self.max_room_size):
            raise InvalidOptionsError("min_room_size cannot exceed max_room_size")
        for name in ("organic_factor", "fill_probability", "direction_change_chance", "wider_area_chance"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise InvalidOptionsError(f"{name} must be between 0 and 1, got {value}")
        if self.roughness <= 0:
            raise InvalidOptionsError("roughness must be positive")
        if not 0 <= self.wall_threshold <= 8:
            raise InvalidOptionsError("wall_threshold must be between 0 and 8")
        if self.smooth_iterations < 0:
            raise InvalidOptionsError("smooth_iterations must not be negative")
        if not 0 <= self.coverage_percent <= 100:
            raise InvalidOptionsError("coverage_percent must be between 0 and 100")
        if self.resolution < 1:
            raise InvalidOptionsError("resolution must be at least 1")
        if not 0 <= self.min_steps_before_change <= self.max_steps_before_change:
            raise InvalidOptionsError("need 0 <= min_steps_before_change <= max_steps_before_change")


@dataclass
class _Resolved:
    """Options after presets are applied."""

    terrain: TerrainType
    subtype: Optional[str]
    algorithm: GenerationAlgorithm
    preset: Optional[SubtypeConfig]
    story: Optional[StoryConfig]
    width: int
    height: int


def _resolve(options: MapGenerationOptions) -> _Resolved:
    try:
        terrain = parse_terrain(options.terrain)
        subtype = validate_subtype(terrain, options.subtype)
        preset = get_subtype_config(terrain, subtype)
        story = preset.get_story(options.story) if preset else None
        if options.story and preset and story is None:
            raise ValueError(f"{subtype} has no story '{options.story}'")
        if options.algorithm:
            algorithm = GenerationAlgorithm(options.algorithm)
        elif preset:
            algorithm = preset.algorithm
        else:
            algorithm = DEFAULT_ALGORITHMS[terrain]
    except ValueError as e:
        raise InvalidOptionsError(str(e)) from e

    width = options.width or (story.map_width if story else DEFAULT_WIDTH)
    height = options.height or (story.map_height if story else DEFAULT_HEIGHT)
    return _Resolved(terrain, subtype, algorithm, preset, story, width, height)


def _first(*values):
    """First value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None


def _generate_rooms(layout: RoomLayout, prng: SeededRandom, shrink: bool) -> Tuple[List[Room], BSPTree]:
    """
    Run the BSP generator, lowering a preset room count until it fits.

    Requested counts are never lowered; their RoomCapacityError propagates.
    """
    generator = BSPRoomGenerator(prng)
    while True:
        try:
            return generator.generate_rooms(layout)
        except RoomCapacityError:
            if not shrink or layout.target_rooms <= 1:
                raise
            logger.info("Preset room count does not fit, retrying", target=layout.target_rooms)
            layout.target_rooms -= 1


def _run_bsp(
    options: MapGenerationOptions, resolved: _Resolved, prng: SeededRandom
) -> Tuple[List[Room], List[Corridor], np.ndarray, Optional[EntranceExit], dict]:
    preset, story = resolved.preset, resolved.story

    # House stories fix room sizes; everything else prefers the request
    if story:
        min_size, max_size = story.min_room_size, story.max_room_size
    else:
        min_size = _first(options.min_room_size, preset.min_room_size if preset else None, MIN_ROOM_SIZE)
        max_size = _first(options.max_room_size, preset.max_room_size if preset else None)

    layout = RoomLayout(
        terrain=resolved.terrain,
        target_rooms=_first(
            options.number_of_rooms,
            story.number_of_rooms if story else None,
            preset.default_room_count if preset else None,
            DEFAULT_ROOM_COUNT,
        ),
        width=resolved.width,
        height=resolved.height,
        spacing=_first(
            options.room_spacing,
            story.min_room_spacing if story else None,
            preset.min_room_spacing if preset else None,
            DEFAULT_ROOM_SPACING,
        ),
        padding=_first(story.room_padding if story else None, preset.room_padding if preset else None, 0.0),
        room_shape=preset.room_shape if preset else "rectangle",
        organic_factor=options.organic_factor,
        min_room_size=min_size,
        max_room_size=max_size,
        circular_footprint=preset.circular_footprint if preset else False,
    )
    if options.number_of_rooms is None:
        # Preset counts shrink to what the map can hold; explicit counts may fail
        capacity = room_capacity(root_container(layout))
        if layout.target_rooms > capacity:
            logger.info("Clamping preset room count", preset_rooms=layout.target_rooms, capacity=capacity)
            layout.target_rooms = max(1, capacity)
    corridor_width = _first(
        options.corridor_width,
        story.corridor_width if story else None,
        preset.corridor_width if preset else None,
        1,
    )
    organic_paths = _first(
        options.organic_paths,
        resolved.terrain in (TerrainType.FOREST, TerrainType.CAVE),
    )

    rooms, tree = _generate_rooms(layout, prng, shrink=options.number_of_rooms is None)
    connector = CorridorConnector(prng, corridor_width, organic_paths=organic_paths)
    corridors, grid = connector.connect(rooms, resolved.width, resolved.height)
    entrance = EntranceExitPlacer(prng).place(resolved.terrain, rooms, grid)

    extra = {
        "target_rooms": layout.target_rooms,
        "leaf_count": len(tree.get_leaves()),
        "corridor_width": corridor_width,
        "room_spacing": layout.spacing,
        "min_room_size": min_size,
        "max_room_size": max_size,
        "story": story.story.value if story else None,
    }
    return rooms, corridors, grid, entrance, extra


def _run_cellular(
    options: MapGenerationOptions, resolved: _Resolved, prng: SeededRandom
) -> Tuple[List[Room], List[Corridor], np.ndarray, Optional[EntranceExit], dict]:
    cave_options = CellularCaveOptions(
        width=resolved.width,
        height=resolved.height,
        fill_probability=options.fill_probability,
        roughness=options.roughness,
        smooth_iterations=options.smooth_iterations,
        wall_threshold=options.wall_threshold,
    )
    result = CellularCaveGenerator(prng, cave_options).generate()
    tiles = pack_rectangles(result.grid)
    grid = result.grid.copy()
    entrance = EntranceExitPlacer(prng).place(resolved.terrain, tiles, grid)

    center = result.main_chamber_center
    extra = {
        "fill_probability": round(cave_options.adjusted_fill, 4),
        "cave_open_cells": result.open_cells,
        "main_chamber_center": {"x": center.x, "y": center.y} if center else None,
    }
    return tiles, [], grid, entrance, extra


def _run_drunkards_walk(
    options: MapGenerationOptions, resolved: _Resolved, prng: SeededRandom
) -> Tuple[List[Room], List[Corridor], np.ndarray, Optional[EntranceExit], dict]:
    params = DrunkardsWalkParams(
        coverage_percent=options.coverage_percent,
        resolution=options.resolution,
        direction_change_chance=options.direction_change_chance,
        wider_area_chance=options.wider_area_chance,
        min_steps_before_change=options.min_steps_before_change,
        max_steps_before_change=options.max_steps_before_change,
    )
    result = DrunkardsWalkGenerator(prng, params).generate(resolved.width, resolved.height)
    grid = build_occupancy_grid(result.tiles, [], resolved.width, resolved.height)
    entrance = EntranceExitPlacer(prng).place(resolved.terrain, result.tiles, grid)

    extra = {
        "resolution": params.resolution,
        "floor_cells": result.floor_cells,
        "target_floor_cells": result.target_floor_cells,
    }
    return result.tiles, [], grid, entrance, extra


PIPELINES = {
    GenerationAlgorithm.BSP: _run_bsp,
    GenerationAlgorithm.CELLULAR_AUTOMATA: _run_cellular,
    GenerationAlgorithm.DRUNKARDS_WALK: _run_drunkards_walk,
}


def generate_map(options: MapGenerationOptions) -> GeneratedMap:
    """
    Generate a map.

    Args:
        options: Generation parameters

    Returns:
        GeneratedMap with rooms, corridors, entrance/exit, grid and metadata

    Raises:
        InvalidOptionsError: For malformed options
        RoomCapacityError: If the room count cannot fit the map
    """
    options.validate()
    resolved = _resolve(options)
    seed = resolve_seed(options.seed)
    prng = SeededRandom(seed)

    log = logger.bind(
        terrain=resolved.terrain.value,
        subtype=resolved.subtype,
        algorithm=resolved.algorithm.value,
        seed=seed,
    )
    log.info("Map generation started", width=resolved.width, height=resolved.height)
    started = time.perf_counter()

    rooms, corridors, grid, entrance, extra = PIPELINES[resolved.algorithm](options, resolved, prng)

    groups = find_groups(rooms, grid)
    metadata = {
        "room_count": len(rooms),
        "corridor_count": len(corridors),
        "connected_groups": len(groups),
        "open_cells": int((~grid).sum()),
        "prng_calls": prng.call_count,
        "runtime_ms": round((time.perf_counter() - started) * 1000, 2),
        "options": asdict(options),
    }
    metadata.update(extra)

    log.info(
        "Map generation complete",
        rooms=metadata["room_count"],
        corridors=metadata["corridor_count"],
        groups=metadata["connected_groups"],
        runtime_ms=metadata["runtime_ms"],
    )

    return GeneratedMap(
        width=resolved.width,
        height=resolved.height,
        terrain=resolved.terrain.value,
        subtype=resolved.subtype,
        algorithm=resolved.algorithm.value,
        seed=seed,
        rooms=rooms,
        corridors=corridors,
        grid=grid,
        entrance_exit=entrance,
        metadata=metadata,
    )
