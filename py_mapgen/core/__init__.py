"""
Core map generation functionality.
"""

from .lcg_prng import SeededRandom
from .map_data import (
    Position, PathPoint, Room, RoomShape, RoomShapeType, Corridor, CorridorKind,
    EntranceExit, GeneratedMap,
)
from .errors import MapGenerationError, InvalidOptionsError, RoomCapacityError, EdgePlacementError
from .occupancy import build_occupancy_grid, carve_radius
from .connectivity import shortest_path, find_groups, is_fully_connected
from .bsp_rooms import BSPContainer, BSPTree, BSPRoomGenerator, RoomLayout
from .corridors import CorridorConnector
from .entrances import EntranceExitPlacer
from .cellular_caves import CellularCaveGenerator, CellularCaveOptions, CaveResult
from .drunkards_walk import DrunkardsWalkGenerator, DrunkardsWalkParams, WalkResult
from .tile_packing import pack_rectangles

__all__ = ['SeededRandom', 'Position', 'PathPoint', 'Room', 'RoomShape', 'RoomShapeType',
           'Corridor', 'CorridorKind', 'EntranceExit', 'GeneratedMap',
           'MapGenerationError', 'InvalidOptionsError', 'RoomCapacityError', 'EdgePlacementError',
           'build_occupancy_grid', 'carve_radius', 'shortest_path', 'find_groups', 'is_fully_connected',
           'BSPContainer', 'BSPTree', 'BSPRoomGenerator', 'RoomLayout', 'CorridorConnector',
           'EntranceExitPlacer', 'CellularCaveGenerator', 'CellularCaveOptions', 'CaveResult',
           'DrunkardsWalkGenerator', 'DrunkardsWalkParams', 'WalkResult', 'pack_rectangles']
