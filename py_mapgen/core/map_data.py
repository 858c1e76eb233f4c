"""
Data structures shared by all map generators.

Rooms, corridors and the entrance/exit record are plain dataclasses so the
generators can build them cheaply and the API can serialize them with
``to_dict()``. Occupancy grids are NumPy boolean arrays indexed ``[y, x]``
with ``True`` meaning wall.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

import numpy as np


class Position(NamedTuple):
    """A point on the map. Organic paths and packed tiles keep fractions."""

    x: float
    y: float


class PathPoint(NamedTuple):
    """A corridor point with an optional per-point width."""

    x: float
    y: float
    width: Optional[float] = None


class RoomShapeType:
    """Room shape identifiers."""

    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    ORGANIC = "organic"
    PACKED_TILE = "packed_tile"


@dataclass
class RoomShape:
    """Shape descriptor; organic outlines are offsets from the room center."""

    type: str = RoomShapeType.RECTANGLE
    points: Optional[List[Position]] = None
    radius: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type}
        if self.points is not None:
            data["points"] = [{"x": p.x, "y": p.y} for p in self.points]
        if self.radius is not None:
            data["radius"] = self.radius
        return data


@dataclass(eq=False)
class Room:
    """A room, cavern or packed cave tile. Compared and hashed by identity."""

    id: str
    type: str
    position: Position
    width: float
    height: float
    shape: RoomShape = field(default_factory=RoomShape)
    doors: List[Position] = field(default_factory=list)
    padding: Optional[float] = None

    @property
    def center(self) -> Position:
        return Position(self.position.x + self.width / 2, self.position.y + self.height / 2)

    @property
    def grid_center(self) -> Tuple[int, int]:
        """Center snapped to the grid cell that contains it."""
        cx, cy = self.center
        return int(math.floor(cx)), int(math.floor(cy))

    @property
    def area(self) -> float:
        return self.width * self.height

    def footprint(self) -> Tuple[int, int, int, int]:
        """Covered grid cells as (x0, y0, x1, y1), end-exclusive."""
        x0 = int(math.floor(self.position.x))
        y0 = int(math.floor(self.position.y))
        x1 = int(math.ceil(self.position.x + self.width))
        y1 = int(math.ceil(self.position.y + self.height))
        return x0, y0, x1, y1

    def overlaps(self, other: "Room", margin: float = 0) -> bool:
        """Check bounding-box overlap, optionally grown by margin on each side."""
        return (
            self.position.x - margin < other.position.x + other.width
            and other.position.x - margin < self.position.x + self.width
            and self.position.y - margin < other.position.y + other.height
            and other.position.y - margin < self.position.y + self.height
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "shape": self.shape.to_dict(),
            "position": {"x": self.position.x, "y": self.position.y},
            "width": self.width,
            "height": self.height,
        }
        if self.doors:
            data["doors"] = [{"x": d.x, "y": d.y} for d in self.doors]
        if self.padding is not None:
            data["padding"] = self.padding
        return data


class CorridorKind:
    """Corridor identifiers."""

    CORRIDOR = "corridor"
    CONNECTOR = "connector"
    ORGANIC = "organic"


@dataclass
class Corridor:
    """An ordered carved path; point order is draw order."""

    id: str
    points: List[PathPoint]
    width: float = 1
    kind: str = CorridorKind.CORRIDOR
    from_room: Optional[str] = None
    to_room: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind,
            "width": self.width,
            "from_room": self.from_room,
            "to_room": self.to_room,
            "points": [
                {"x": p.x, "y": p.y, "width": p.width} for p in self.points
            ],
        }


@dataclass
class EntranceExit:
    """Where a party enters (and for through-maps, leaves) the map."""

    entrance: Position
    entrance_path: List[PathPoint] = field(default_factory=list)
    exit: Optional[Position] = None
    exit_path: Optional[List[PathPoint]] = None
    main_room: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        def _path(points):
            return [{"x": p.x, "y": p.y, "width": p.width} for p in points]

        return {
            "entrance": {"x": self.entrance.x, "y": self.entrance.y},
            "entrance_path": _path(self.entrance_path),
            "exit": {"x": self.exit.x, "y": self.exit.y} if self.exit else None,
            "exit_path": _path(self.exit_path) if self.exit_path is not None else None,
            "main_room": self.main_room,
        }


@dataclass
class GeneratedMap:
    """Output of every generation pipeline."""

    width: int
    height: int
    terrain: str
    subtype: Optional[str]
    algorithm: str
    seed: int
    rooms: List[Room]
    corridors: List[Corridor]
    grid: np.ndarray
    entrance_exit: Optional[EntranceExit] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self, include_grid: bool = False) -> Dict[str, Any]:
        data = {
            "width": self.width,
            "height": self.height,
            "terrain": self.terrain,
            "subtype": self.subtype,
            "algorithm": self.algorithm,
            "seed": self.seed,
            "rooms": [room.to_dict() for room in self.rooms],
            "corridors": [corridor.to_dict() for corridor in self.corridors],
            "entrance_exit": self.entrance_exit.to_dict() if self.entrance_exit else None,
            "metadata": self.metadata,
        }
        if include_grid:
            # Rows of 0/1, 1 = wall
            data["grid"] = self.grid.astype(np.uint8).tolist()
        return data
