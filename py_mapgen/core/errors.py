"""Exceptions surfaced by the map generators."""


class MapGenerationError(ValueError):
    """Base class for generation failures a caller should handle."""


class InvalidOptionsError(MapGenerationError):
    """Options are malformed (bad dimensions, unknown terrain or algorithm)."""


class RoomCapacityError(MapGenerationError):
    """Requested room count cannot fit in the map area."""

    def __init__(self, requested: int, capacity: int):
        self.requested = requested
        self.capacity = capacity
        super().__init__(
            f"Cannot place {requested} rooms: map area supports at most {capacity}"
        )


class EdgePlacementError(MapGenerationError):
    """Entrance or exit coordinates fall outside the map edge."""

    def __init__(self, x: float, y: float, width: int, height: int):
        self.x = x
        self.y = y
        super().__init__(
            f"Edge position ({x}, {y}) is outside a {width}x{height} map"
        )
